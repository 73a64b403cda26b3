# packages/server/src/lingohub/containers/services.py
"""
应用服务层容器：组装业务服务与总协调器。
本容器只依赖 UoW 工厂与缓存接口，不依赖具体的基础设施实现。
"""

from dependency_injector import containers, providers

from lingohub.application import coordinator, services
from lingohub.config import LingoHubConfig


class ServicesContainer(containers.DeclarativeContainer):
    config = providers.Dependency(instance_of=LingoHubConfig)
    uow_factory = providers.Dependency()
    cache_handler = providers.Dependency()

    guard = providers.Singleton(services.ConsistencyGuard)

    # 导出服务持有构建计数与单飞锁，必须是单例
    export_service = providers.Singleton(
        services.ExportService,
        uow_factory=uow_factory,
        config=config,
        cache=cache_handler,
    )

    command_service = providers.Factory(
        services.TranslationCommandService,
        uow_factory=uow_factory,
        guard=guard,
        export_service=export_service,
    )
    query_service = providers.Factory(
        services.TranslationQueryService,
        uow_factory=uow_factory,
        config=config,
    )
    tag_service = providers.Factory(
        services.TagService,
        uow_factory=uow_factory,
        config=config,
        guard=guard,
        export_service=export_service,
    )

    coordinator = providers.Factory(
        coordinator.Coordinator,
        command_service=command_service,
        query_service=query_service,
        tag_service=tag_service,
        export_service=export_service,
    )

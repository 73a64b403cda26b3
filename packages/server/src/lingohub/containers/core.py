# packages/server/src/lingohub/containers/core.py
"""
核心容器：应用范围内的基础设施，目前只有日志初始化。
使用字段级配置提供者。
"""

from dependency_injector import containers, providers

from lingohub.observability.logging_config import setup_logging


class CoreContainer(containers.DeclarativeContainer):
    config = providers.Configuration()

    # 在 init_resources() 时调用一次，配置全局日志
    logging = providers.Resource(
        setup_logging,
        log_level=config.logging.level,
        log_format=config.logging.format,
        service=config.service_name,
    )

# packages/server/src/lingohub/containers/persistence.py
"""
持久化层容器：数据库引擎、会话工厂与 UoW 工厂。
"""

from dependency_injector import containers, providers
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from lingohub.config import LingoHubConfig
from lingohub.infrastructure.db import (
    create_async_db_engine,
    create_async_sessionmaker,
)
from lingohub.infrastructure.uow import SqlAlchemyUnitOfWork


class PersistenceContainer(containers.DeclarativeContainer):
    config = providers.Dependency(instance_of=LingoHubConfig)

    db_engine: providers.Singleton[AsyncEngine] = providers.Singleton(
        create_async_db_engine,
        cfg=config,
    )

    session_maker: providers.Singleton[async_sessionmaker[AsyncSession]] = (
        providers.Singleton(
            create_async_sessionmaker,
            engine=db_engine,
        )
    )

    # 每次调用都创建一个新的 UoW；注入时使用 `.provider` 得到工厂本身
    uow_factory: providers.Factory[SqlAlchemyUnitOfWork] = providers.Factory(
        SqlAlchemyUnitOfWork,
        sessionmaker=session_maker,
    )

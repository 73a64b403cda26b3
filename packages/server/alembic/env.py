# packages/server/alembic/env.py
"""
Alembic 环境配置。

连接的获取顺序：
1. `config.attributes["connection"]`：调用方（测试）注入的同步连接；
2. `config.attributes["lingohub_config"]`：CLI 传入的配置对象；
3. 都没有时按 `LINGOHUB_*` 环境变量与 .env 文件加载配置。

运行期 DSN 使用异步驱动，这里通过 `connection.run_sync` 执行迁移。
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

import structlog
from alembic import context
from sqlalchemy.engine import Connection

from lingohub.config import LingoHubConfig
from lingohub.infrastructure.db import create_async_db_engine, dispose_engine, metadata
from lingohub.infrastructure.db import _schema  # noqa: F401  注册模型

logger = structlog.get_logger(__name__)

config = context.config

if config.config_file_name is not None and "connection" not in config.attributes:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = config.attributes.get("target_metadata", metadata)


def _app_config() -> LingoHubConfig:
    injected = config.attributes.get("lingohub_config")
    if injected is not None:
        return injected
    from lingohub.bootstrap import create_app_config

    return create_app_config("dev")


def run_migrations_offline() -> None:
    """离线模式：只生成 SQL。"""
    context.configure(
        url=_app_config().database.url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def _do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def _run_async_migrations() -> None:
    engine = create_async_db_engine(_app_config())
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_do_run_migrations)
            await connection.commit()
    finally:
        await dispose_engine(engine)


def run_migrations_online() -> None:
    injected = config.attributes.get("connection")
    if injected is not None:
        logger.debug("使用注入的连接执行迁移", dialect=injected.dialect.name)
        _do_run_migrations(injected)
        return
    asyncio.run(_run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

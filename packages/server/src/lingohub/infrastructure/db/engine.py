# packages/server/src/lingohub/infrastructure/db/engine.py
"""
异步引擎工厂

- Postgres / MySQL：映射连接池参数（QueuePool）
- SQLite：NullPool，忽略不适用的池参数；并在每个连接上开启外键约束、
  改为显式 BEGIN，使 SAVEPOINT 与级联删除的行为与 PostgreSQL 一致。
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from ...config import LingoHubConfig

logger = structlog.get_logger(__name__)


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite+aiosqlite") or url.startswith("sqlite://")


def _install_sqlite_pragmas(engine: AsyncEngine) -> None:
    """为 SQLite 连接开启外键约束，并接管事务的开启。"""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ARG001
        # 关闭驱动自带的隐式事务管理，由下方的 begin 事件发出 BEGIN
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_async_db_engine(cfg: LingoHubConfig) -> AsyncEngine:
    """根据配置创建 AsyncEngine。"""
    url = cfg.database.url
    is_sqlite = _is_sqlite(url)

    kwargs: dict[str, Any] = {
        "echo": cfg.db_echo or cfg.database.echo,
        "pool_pre_ping": cfg.db_pool_pre_ping,
    }

    if is_sqlite:
        # SQLite 推荐使用 NullPool，避免多进程/多线程下的共享句柄问题
        kwargs["poolclass"] = NullPool
    else:
        if cfg.db_pool_size is not None:
            kwargs["pool_size"] = cfg.db_pool_size
        if cfg.db_max_overflow is not None:
            kwargs["max_overflow"] = cfg.db_max_overflow
        if cfg.db_pool_recycle is not None:
            kwargs["pool_recycle"] = cfg.db_pool_recycle
        kwargs["pool_timeout"] = cfg.db_pool_timeout

    engine = create_async_engine(url, **kwargs)
    if is_sqlite:
        _install_sqlite_pragmas(engine)

    logger.debug("数据库引擎已创建", dialect=engine.dialect.name, sqlite=is_sqlite)
    return engine

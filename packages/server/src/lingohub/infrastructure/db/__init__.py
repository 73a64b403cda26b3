# packages/server/src/lingohub/infrastructure/db/__init__.py
"""
数据库公共 API（唯一对外入口）

使用约定：仅从本包导入公共函数，不直接引用内部模块路径。
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from .base import Base, metadata
from .engine import create_async_db_engine
from .session import create_async_sessionmaker, session_scope


async def create_all(engine: AsyncEngine) -> None:
    """按 ORM 元数据直接建表（测试与 `db init` 使用；生产环境走 Alembic）。"""
    from . import _schema  # noqa: F401  确保模型已注册到 metadata

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


async def drop_all(engine: AsyncEngine) -> None:
    from . import _schema  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    释放底层连接池资源（异步等待）。
    在测试/进程退出时由上层显式 await 调用。
    """
    await engine.dispose()


__all__ = [
    "Base",
    "metadata",
    "create_async_db_engine",
    "create_async_sessionmaker",
    "session_scope",
    "create_all",
    "drop_all",
    "dispose_engine",
]

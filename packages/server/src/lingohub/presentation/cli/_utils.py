# packages/server/src/lingohub/presentation/cli/_utils.py
"""
CLI 内部共享的辅助工具。
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from lingohub.application.coordinator import Coordinator
from lingohub.bootstrap import create_coordinator
from lingohub.infrastructure.db import dispose_engine
from lingohub.infrastructure.redis import close_redis_client

from ._state import CLISharedState


@asynccontextmanager
async def get_coordinator(state: CLISharedState) -> AsyncGenerator[Coordinator, None]:
    """创建 Coordinator，并在退出时释放数据库引擎与 Redis 连接。"""
    coordinator, db_engine = await create_coordinator(state.config)
    try:
        yield coordinator
    finally:
        await close_redis_client()
        await dispose_engine(db_engine)

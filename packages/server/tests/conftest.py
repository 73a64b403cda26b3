# packages/server/tests/conftest.py
"""
Pytest 共享夹具

- test_config: 指向临时 SQLite 文件的配置对象（每个测试一个独立数据库）。
- db_engine: 已按 ORM 元数据建表的异步引擎。
- uow_factory: 基于 db_engine 的 UoW 工厂。
- clock / cache: 可手动推进的时钟，以及使用该时钟的内存缓存。
- coordinator: 组装好的应用门面。
"""

from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from lingohub.application.coordinator import Coordinator
from lingohub.bootstrap import build_coordinator
from lingohub.config import LingoHubConfig
from lingohub.infrastructure.cache import MemoryCacheHandler
from lingohub.infrastructure.db import (
    create_all,
    create_async_db_engine,
    create_async_sessionmaker,
    dispose_engine,
)
from lingohub.infrastructure.uow import SqlAlchemyUnitOfWork, UowFactory


class FakeClock:
    """供 TLRUCache 使用的可控时钟。"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_config(db_path: Path, **overrides) -> LingoHubConfig:
    return LingoHubConfig(
        database={"url": f"sqlite+aiosqlite:///{db_path}"},
        redis={"url": None, "key_prefix": "test:"},
        **overrides,
    )


@pytest.fixture
def test_config(tmp_path: Path) -> LingoHubConfig:
    return make_config(tmp_path / "lingohub_test.db")


@pytest_asyncio.fixture
async def db_engine(test_config: LingoHubConfig) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_db_engine(test_config)
    await create_all(engine)
    try:
        yield engine
    finally:
        await dispose_engine(engine)


@pytest.fixture
def sessionmaker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_async_sessionmaker(db_engine)


@pytest.fixture
def uow_factory(sessionmaker: async_sessionmaker[AsyncSession]) -> UowFactory:
    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(sessionmaker)

    return factory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCacheHandler:
    return MemoryCacheHandler(key_prefix="test:", timer=clock)


@pytest.fixture
def coordinator(
    test_config: LingoHubConfig, uow_factory: UowFactory, cache: MemoryCacheHandler
) -> Coordinator:
    return build_coordinator(test_config, uow_factory, cache)


@pytest.fixture
def coordinator_factory(
    test_config: LingoHubConfig, uow_factory: UowFactory, cache: MemoryCacheHandler
):
    """按导出参数覆盖项组装 Coordinator，共享同一个数据库与缓存。"""

    def factory(**export_overrides) -> Coordinator:
        cfg = test_config.model_copy(
            update={"export": test_config.export.model_copy(update=export_overrides)}
        )
        return build_coordinator(cfg, uow_factory, cache)

    return factory

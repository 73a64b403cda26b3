# packages/server/src/lingohub/bootstrap.py
"""
应用引导程序。

本模块是应用的初始化入口，负责：
1. 加载 .env 文件与配置；
2. 创建 DI 容器，或直接组装 Coordinator；
3. 把数据库引擎、Redis 客户端等资源的关闭交还给调用方。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import structlog

from lingohub.application import Coordinator
from lingohub.application.services import (
    ConsistencyGuard,
    ExportService,
    TagService,
    TranslationCommandService,
    TranslationQueryService,
)
from lingohub.config import LingoHubConfig
from lingohub.containers import ApplicationContainer
from lingohub.infrastructure.cache import MemoryCacheHandler
from lingohub.infrastructure.db import create_async_db_engine, create_async_sessionmaker
from lingohub.infrastructure.uow import SqlAlchemyUnitOfWork, UowFactory
from lingohub.management.config_utils import mask_db_url
from lingohub_core.interfaces import CacheHandler

SERVER_ROOT_DIR = Path(__file__).resolve().parents[2]
logger = structlog.get_logger("lingohub.bootstrap")

EnvMode = Literal["prod", "dev", "test"]


def _parse_env_line(line: str) -> tuple[str, str] | None:
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1]
    return key.strip(), value


def load_dotenv_files(env_mode: EnvMode, root: Path = SERVER_ROOT_DIR) -> list[Path]:
    """
    按环境模式加载 `.env`、`.env.dev`、`.env.test`。

    已存在于进程环境中的变量不会被覆盖。
    """
    candidates = [root / ".env"]
    if env_mode in ("dev", "test"):
        candidates.append(root / ".env.dev")
    if env_mode == "test":
        candidates.append(root / ".env.test")

    loaded: list[Path] = []
    for path in candidates:
        if not path.is_file():
            continue
        for raw in path.read_text(encoding="utf-8").splitlines():
            parsed = _parse_env_line(raw)
            if parsed is not None and parsed[0] not in os.environ:
                os.environ[parsed[0]] = parsed[1]
        loaded.append(path)

    logger.debug("已加载 dotenv 文件", files=[p.name for p in loaded])
    return loaded


def create_app_config(env_mode: EnvMode = "dev") -> LingoHubConfig:
    """加载、验证并返回应用配置对象。"""
    load_dotenv_files(env_mode)
    config = LingoHubConfig()
    logger.debug(
        "配置已创建",
        env_mode=env_mode,
        db_url=mask_db_url(config.database.url),
        redis=bool(config.redis.url),
    )
    return config


def create_container(config: LingoHubConfig, service_name: str) -> ApplicationContainer:
    """创建并装配 DI 容器，同时初始化日志。"""
    container = ApplicationContainer()
    container.pydantic_config.override(config)
    container.config.from_pydantic(config)
    container.config.service_name.from_value(service_name)
    container.core.init_resources()
    return container


def create_uow_factory(config: LingoHubConfig) -> tuple[UowFactory, Any]:
    """创建 UoW 工厂和底层的数据库引擎。"""
    db_engine = create_async_db_engine(config)
    sessionmaker = create_async_sessionmaker(db_engine)

    def uow_factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(sessionmaker)

    return uow_factory, db_engine


async def create_cache_handler(config: LingoHubConfig) -> CacheHandler:
    """配置了 Redis 时返回 Redis 缓存，否则返回进程内缓存。"""
    if config.redis.url:
        from lingohub.infrastructure.redis import RedisCacheHandler, get_redis_client

        client = await get_redis_client(config)
        logger.info("使用 Redis 缓存", key_prefix=config.redis.key_prefix)
        return RedisCacheHandler(client, key_prefix=config.redis.key_prefix)
    return MemoryCacheHandler(
        key_prefix=config.redis.key_prefix, maxsize=config.memory_cache.maxsize
    )


def build_coordinator(
    config: LingoHubConfig, uow_factory: UowFactory, cache: CacheHandler
) -> Coordinator:
    """用给定的 UoW 工厂与缓存组装 Coordinator 及其全部服务。"""
    guard = ConsistencyGuard()
    export_service = ExportService(uow_factory, config, cache)
    return Coordinator(
        command_service=TranslationCommandService(uow_factory, guard, export_service),
        query_service=TranslationQueryService(uow_factory, config),
        tag_service=TagService(uow_factory, config, guard, export_service),
        export_service=export_service,
    )


async def create_coordinator(config: LingoHubConfig) -> tuple[Coordinator, Any]:
    """
    创建一个完全配置的 Coordinator。
    返回 Coordinator 与数据库引擎；引擎由调用方负责 dispose。
    """
    uow_factory, db_engine = create_uow_factory(config)
    cache = await create_cache_handler(config)
    return build_coordinator(config, uow_factory, cache), db_engine

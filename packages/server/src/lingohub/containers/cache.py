# packages/server/src/lingohub/containers/cache.py
"""
缓存容器。

配置了 `redis.url` 时使用 Redis，否则使用进程内的 TTL 缓存。
"""

import redis.asyncio as aioredis
from dependency_injector import containers, providers

from lingohub.config import LingoHubConfig
from lingohub.infrastructure.cache import MemoryCacheHandler
from lingohub.infrastructure.redis import RedisCacheHandler, get_redis_client


def cache_backend(config: LingoHubConfig) -> str:
    return "redis" if config.redis.url else "memory"


class CacheContainer(containers.DeclarativeContainer):
    config = providers.Dependency(instance_of=LingoHubConfig)

    # 仅在选择 redis 后端时才会被初始化
    redis_client: providers.Resource[aioredis.Redis] = providers.Resource(
        get_redis_client,
        config=config,
    )

    cache_handler = providers.Selector(
        providers.Callable(cache_backend, config),
        redis=providers.Singleton(
            RedisCacheHandler,
            client=redis_client,
            key_prefix=config.provided.redis.key_prefix,
        ),
        memory=providers.Singleton(
            MemoryCacheHandler,
            key_prefix=config.provided.redis.key_prefix,
            maxsize=config.provided.memory_cache.maxsize,
        ),
    )

# packages/server/src/lingohub/infrastructure/redis/_client.py
"""
集中管理 Redis 客户端的创建和生命周期。
"""

from __future__ import annotations

import redis.asyncio as aioredis

from lingohub.config import LingoHubConfig
from lingohub_core.exceptions import ConfigurationError

_redis_client: aioredis.Redis | None = None


async def get_redis_client(config: LingoHubConfig) -> aioredis.Redis:
    """获取进程内单例的 Redis 异步客户端，首次创建时 ping 一次。"""
    global _redis_client
    if _redis_client is None:
        url = config.redis.url
        if not url:
            raise ConfigurationError("Redis URL 未配置（请设置 LINGOHUB_REDIS__URL）")
        client = aioredis.from_url(url, decode_responses=True)
        try:
            await client.ping()
        except aioredis.RedisError as e:
            await client.aclose()
            raise ConfigurationError(f"无法连接到 Redis 服务器 {url}: {e}") from e
        _redis_client = client
    return _redis_client


async def close_redis_client() -> None:
    """关闭全局 Redis 客户端连接。"""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None

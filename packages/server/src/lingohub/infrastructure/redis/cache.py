# packages/server/src/lingohub/infrastructure/redis/cache.py
"""
使用 Redis 实现 `CacheHandler` 接口，值以 JSON 存储。
"""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis
import structlog

from lingohub_core.interfaces import CacheHandler


class RedisCacheHandler(CacheHandler):
    """基于 Redis 的分布式缓存实现。"""

    def __init__(self, client: aioredis.Redis, key_prefix: str = "lingohub:cache:"):
        self._client = client
        self._prefix = key_prefix
        self._logger = structlog.get_logger(__name__)

    async def get(self, key: str) -> Any | None:
        """读取并反序列化；损坏的值或 Redis 故障按未命中处理。"""
        try:
            raw_value = await self._client.get(self._prefix + key)
        except aioredis.RedisError as e:
            self._logger.error("Redis 读取失败", key=key, error=str(e))
            return None
        if raw_value is None:
            return None
        try:
            return json.loads(raw_value)
        except json.JSONDecodeError as e:
            self._logger.warning("缓存值反序列化失败", key=key, error=str(e))
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        try:
            serialized_value = json.dumps(value, ensure_ascii=False)
        except TypeError as e:
            self._logger.warning(
                "缓存值序列化失败，跳过写入",
                key=key,
                value_type=type(value).__name__,
                error=str(e),
            )
            return
        await self._client.set(self._prefix + key, serialized_value, ex=ttl)

    async def delete(self, key: str) -> None:
        await self._client.delete(self._prefix + key)

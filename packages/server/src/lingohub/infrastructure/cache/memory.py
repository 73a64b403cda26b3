# packages/server/src/lingohub/infrastructure/cache/memory.py
"""
进程内缓存实现，未配置 Redis 时使用，也用于测试。

底层为 `cachetools.TLRUCache`，每个条目按写入时给出的 TTL 独立过期。
写入与读取时都做深拷贝，调用方修改取回的值不会影响缓存中的条目。
"""

from __future__ import annotations

import copy
import time
from typing import Any, Callable

from cachetools import TLRUCache

from lingohub_core.interfaces import CacheHandler

_NO_EXPIRY = float("inf")


def _time_to_use(key: str, value: tuple[Any, int | None], now: float) -> float:
    _, ttl = value
    return now + ttl if ttl is not None else _NO_EXPIRY


class MemoryCacheHandler(CacheHandler):
    """基于内存的缓存实现。"""

    def __init__(
        self,
        key_prefix: str = "lingohub:cache:",
        maxsize: int = 128,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)
        self._prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """生成带前缀的缓存键。"""
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Any | None:
        entry = self._cache.get(self._make_key(key))
        return copy.deepcopy(entry[0]) if entry is not None else None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """写入缓存值；`ttl` 为秒数，None 表示不过期。"""
        self._cache[self._make_key(key)] = (copy.deepcopy(value), ttl)

    async def delete(self, key: str) -> None:
        self._cache.pop(self._make_key(key), None)

    def clear(self) -> None:
        """清空所有缓存。"""
        self._cache.clear()

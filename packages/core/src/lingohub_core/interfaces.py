# packages/core/src/lingohub_core/interfaces.py
"""
定义了 LingoHub 基础设施的抽象接口协议 (Protocols)。
应用层只依赖这些协议，具体实现（内存 / Redis）由组合根注入。
"""

from __future__ import annotations

from typing import Any, Protocol


class CacheHandler(Protocol):
    """定义了缓存处理器的接口。"""

    async def get(self, key: str) -> Any | None:
        """从缓存中获取一个值；不存在或已过期时返回 None。"""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """向缓存中设置一个值，并可选地设置过期时间（秒）。"""
        ...

    async def delete(self, key: str) -> None:
        """从缓存中删除一个键；键不存在时为空操作。"""
        ...

# packages/server/tests/unit/test_memory_cache.py
"""内存缓存的单元测试。"""

import pytest

from lingohub.infrastructure.cache import MemoryCacheHandler


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> _Clock:
    return _Clock()


@pytest.fixture
def cache(clock: _Clock) -> MemoryCacheHandler:
    return MemoryCacheHandler(key_prefix="unit:", maxsize=4, timer=clock)


@pytest.mark.asyncio
async def test_get_missing_returns_none(cache: MemoryCacheHandler):
    assert await cache.get("nothing") is None


@pytest.mark.asyncio
async def test_value_expires_after_ttl(cache: MemoryCacheHandler, clock: _Clock):
    await cache.set("export", [{"key": "a"}], ttl=60)
    clock.now = 59.0
    assert await cache.get("export") == [{"key": "a"}]
    clock.now = 60.0
    assert await cache.get("export") is None


@pytest.mark.asyncio
async def test_entries_have_independent_ttls(cache: MemoryCacheHandler, clock: _Clock):
    await cache.set("short", 1, ttl=5)
    await cache.set("long", 2, ttl=50)
    await cache.set("forever", 3)
    clock.now = 10.0
    assert await cache.get("short") is None
    assert await cache.get("long") == 2
    clock.now = 10_000.0
    assert await cache.get("forever") == 3


@pytest.mark.asyncio
async def test_delete_is_idempotent(cache: MemoryCacheHandler):
    await cache.set("k", "v", ttl=10)
    await cache.delete("k")
    await cache.delete("k")
    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_keys_are_prefixed(cache: MemoryCacheHandler):
    other = MemoryCacheHandler(key_prefix="other:")
    await cache.set("k", "mine")
    assert await other.get("k") is None
    assert "unit:k" in cache._cache


@pytest.mark.asyncio
async def test_clear(cache: MemoryCacheHandler):
    await cache.set("a", 1)
    await cache.set("b", 2)
    cache.clear()
    assert await cache.get("a") is None
    assert await cache.get("b") is None


@pytest.mark.asyncio
async def test_values_are_copied_on_set_and_get(cache: MemoryCacheHandler):
    value = [{"key": "welcome", "translations": {"en": "Hi"}}]
    await cache.set("doc", value, ttl=10)
    value[0]["translations"]["en"] = "changed"

    fetched = await cache.get("doc")
    fetched.append({"key": "extra"})
    fetched[0]["translations"]["fr"] = "Salut"

    assert await cache.get("doc") == [{"key": "welcome", "translations": {"en": "Hi"}}]

# packages/server/src/lingohub/application/services/_export.py
"""
批量导出管线。

把 键 / 译文 / 标签 三张表展平成按键组织的文档列表：

    [{"key": "welcome", "translations": {"en": "Hi"}, "tags": ["common"]}, ...]

结果缓存在固定的缓存键下，TTL 较短；任何翻译写操作成功后都会清除它。
构建时按批次读取，每个批次使用独立的短事务，因此得到的是尽力而为的快照。
"""

from __future__ import annotations

import asyncio
import enum
from typing import TYPE_CHECKING, Any, Iterable

import structlog

from lingohub_core.types import ExportEntry

if TYPE_CHECKING:
    from lingohub.config import LingoHubConfig
    from lingohub.infrastructure.uow import UowFactory
    from lingohub_core.interfaces import CacheHandler
    from lingohub_core.uow import ExportRow

logger = structlog.get_logger(__name__)


class ExportState(str, enum.Enum):
    IDLE = "idle"
    BUILDING = "building"
    CACHED = "cached"


class _Accumulator:
    """按键文本折叠查询行。"""

    def __init__(self) -> None:
        self._translations: dict[str, dict[str, str]] = {}
        self._tags: dict[str, set[str]] = {}

    def fold(self, rows: Iterable[ExportRow]) -> None:
        for row in rows:
            translations = self._translations.setdefault(row.key, {})
            tags = self._tags.setdefault(row.key, set())
            # 外连接产生的“无译文”行不能写入空条目
            if row.locale is not None and row.content is not None:
                translations[row.locale] = row.content
            if row.tag_name is not None:
                tags.add(row.tag_name)

    def document(self) -> list[dict[str, Any]]:
        return [
            ExportEntry(
                key=key,
                translations=self._translations[key],
                tags=sorted(self._tags[key]),
            ).model_dump()
            for key in sorted(self._translations)
        ]


def fold_export_rows(rows: Iterable[ExportRow]) -> list[dict[str, Any]]:
    """把一组导出行折叠成按键排序的导出文档。"""
    acc = _Accumulator()
    acc.fold(rows)
    return acc.document()


class ExportService:
    """
    状态机：Idle -> Building -> Cached -> (过期/失效) -> Building ...

    `single_flight=True` 时，同一进程内的并发未命中只会触发一次构建；
    关闭后并发构建只是重复劳动，不影响结果正确性。
    """

    def __init__(
        self,
        uow_factory: UowFactory,
        config: LingoHubConfig,
        cache: CacheHandler,
        single_flight: bool = True,
    ):
        self._uow_factory = uow_factory
        self._config = config
        self._cache = cache
        self._lock: asyncio.Lock | None = asyncio.Lock() if single_flight else None
        self._state = ExportState.IDLE
        self._generation = 0
        self.build_count = 0

    @property
    def state(self) -> ExportState:
        return self._state

    @property
    def cache_key(self) -> str:
        return self._config.export.cache_key

    async def export(self) -> list[dict[str, Any]]:
        """返回导出文档；缓存命中时不访问数据库。"""
        cached = await self._cache.get(self.cache_key)
        if cached is not None:
            logger.debug("导出缓存命中", cache_key=self.cache_key)
            return cached

        if self._lock is None:
            return await self._rebuild()
        async with self._lock:
            # 等锁期间可能已有其他调用完成了构建
            cached = await self._cache.get(self.cache_key)
            if cached is not None:
                return cached
            return await self._rebuild()

    async def invalidate(self) -> None:
        """清除导出缓存；重复调用或缓存不存在时均无副作用。"""
        self._generation += 1
        await self._cache.delete(self.cache_key)
        self._state = ExportState.IDLE
        logger.debug("导出缓存已失效", cache_key=self.cache_key)

    async def _rebuild(self) -> list[dict[str, Any]]:
        generation = self._generation
        self._state = ExportState.BUILDING
        self.build_count += 1
        try:
            document = await self._build()
        except Exception:
            self._state = ExportState.IDLE
            raise

        if generation != self._generation:
            # 构建期间发生了写操作，本次结果不写回缓存
            logger.debug("构建期间缓存被失效，跳过写回")
            self._state = ExportState.IDLE
            return document

        await self._cache.set(
            self.cache_key, document, ttl=self._config.export.cache_ttl
        )
        self._state = ExportState.CACHED
        return document

    async def _build(self) -> list[dict[str, Any]]:
        cfg = self._config.export
        async with self._uow_factory() as uow:
            total = await uow.export.count_keys()
            keys = await uow.export.list_keys(cfg.max_keys)

        if len(keys) < total:
            logger.warning(
                "翻译键数量超过导出上限，结果已截断",
                total_keys=total,
                max_keys=cfg.max_keys,
                omitted=total - len(keys),
            )

        acc = _Accumulator()
        key_ids = [key_id for key_id, _ in keys]
        for batch_no, start in enumerate(range(0, len(key_ids), cfg.batch_size), 1):
            batch = key_ids[start : start + cfg.batch_size]
            async with self._uow_factory() as uow:
                rows = await uow.export.fetch_batch(batch)
            acc.fold(rows)
            logger.debug("导出批次完成", batch=batch_no, keys=len(batch), rows=len(rows))

        document = acc.document()
        logger.info("导出文档已构建", keys=len(document), build_count=self.build_count)
        return document

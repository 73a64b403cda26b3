# packages/server/src/lingohub/infrastructure/persistence/repositories/_export_repo.py
"""导出管线使用的只读查询。"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import func, select

from lingohub.infrastructure.db._schema import (
    Tag,
    TagTranslationKey,
    Translation,
    TranslationKey,
)
from lingohub_core.uow import ExportRow, IExportRepository

from ._base_repo import BaseRepository


class SqlAlchemyExportRepository(BaseRepository, IExportRepository):
    """导出查询实现。"""

    async def count_keys(self) -> int:
        stmt = select(func.count(TranslationKey.id))
        return (await self._session.execute(stmt)).scalar_one()

    async def list_keys(self, limit: int | None) -> list[tuple[str, str]]:
        """按 key 升序列出 (id, key)，最多 `limit` 条。"""
        stmt = select(TranslationKey.id, TranslationKey.key).order_by(
            TranslationKey.key
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return [(row.id, row.key) for row in await self._session.execute(stmt)]

    async def fetch_batch(self, key_ids: Sequence[str]) -> list[ExportRow]:
        """
        对一批键执行一次外连接查询。

        每行对应 (键, 译文, 标签) 的一个组合；没有译文或没有标签的键
        仍会返回一行，对应列为 NULL。键 ID 以绑定参数的 IN 列表传入。
        """
        if not key_ids:
            return []
        stmt = (
            select(
                TranslationKey.key,
                Translation.locale,
                Translation.content,
                Tag.name,
            )
            .select_from(TranslationKey)
            .outerjoin(Translation, Translation.translation_key_id == TranslationKey.id)
            .outerjoin(
                TagTranslationKey,
                TagTranslationKey.translation_key_id == TranslationKey.id,
            )
            .outerjoin(Tag, Tag.id == TagTranslationKey.tag_id)
            .where(TranslationKey.id.in_(list(key_ids)))
            .order_by(TranslationKey.key, Translation.locale)
        )
        return [ExportRow(*row) for row in await self._session.execute(stmt)]

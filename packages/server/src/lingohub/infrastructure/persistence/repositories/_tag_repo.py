# packages/server/src/lingohub/infrastructure/persistence/repositories/_tag_repo.py
"""标签仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from lingohub.infrastructure.db._schema import Tag, TagTranslationKey
from lingohub.infrastructure.persistence._query import (
    PageRequest,
    TagQuery,
    tagged_keys_statement,
)
from lingohub_core.exceptions import DuplicateNameError
from lingohub_core.types import KeyRef, Page, TagRecord
from lingohub_core.uow import ITagRepository

from ._base_repo import BaseRepository


class SqlAlchemyTagRepository(BaseRepository, ITagRepository):
    """标签仓库实现。唯一约束冲突在此转换为 `DuplicateNameError`。"""

    async def add(self, name: str) -> str:
        row = Tag(name=name)
        try:
            async with self._session.begin_nested():
                self._session.add(row)
        except IntegrityError as e:
            raise DuplicateNameError(name) from e
        return row.id

    async def get(self, tag_id: str, key_limit: int | None = None) -> TagRecord | None:
        stmt = (
            select(Tag)
            .where(Tag.id == tag_id)
            .execution_options(populate_existing=True)
        )
        result = (await self._session.execute(stmt)).scalar_one_or_none()
        if result is None:
            return None
        keys = await self._keys_by_tag([tag_id], key_limit)
        return TagRecord.from_orm_model(result, keys[tag_id])

    async def find_id_by_name(self, name: str) -> str | None:
        stmt = select(Tag.id).where(Tag.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def missing_ids(self, tag_ids: Sequence[str]) -> list[str]:
        """返回 `tag_ids` 中不存在的标签 ID（保持输入顺序）。"""
        if not tag_ids:
            return []
        stmt = select(Tag.id).where(Tag.id.in_(list(dict.fromkeys(tag_ids))))
        found = set((await self._session.execute(stmt)).scalars().all())
        return [t for t in tag_ids if t not in found]

    async def rename(self, tag_id: str, name: str) -> None:
        stmt = (
            update(Tag)
            .where(Tag.id == tag_id)
            .values(name=name, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session.begin_nested():
                await self._session.execute(stmt)
        except IntegrityError as e:
            raise DuplicateNameError(name) from e

    async def delete(self, tag_id: str) -> bool:
        """删除标签及其关联行；返回是否确实删除了标签。"""
        await self._session.execute(
            delete(TagTranslationKey).where(TagTranslationKey.tag_id == tag_id)
        )
        result = await self._session.execute(
            delete(Tag)
            .where(Tag.id == tag_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def search(
        self, name: str | None, page: int, per_page: int, key_limit: int | None = None
    ) -> Page[TagRecord]:
        query = TagQuery().name_contains(name)
        request = PageRequest(page=page, per_page=per_page)
        total = (await self._session.execute(query.count_statement())).scalar_one()
        result = await self._session.execute(query.page_statement(request))
        rows = list(result.scalars())
        keys = await self._keys_by_tag([r.id for r in rows], key_limit)
        return Page[TagRecord](
            items=[TagRecord.from_orm_model(r, keys[r.id]) for r in rows],
            total=total,
            page=request.page,
            per_page=request.per_page,
        )

    async def _keys_by_tag(
        self, tag_ids: Sequence[str], key_limit: int | None
    ) -> dict[str, list[KeyRef]]:
        """按标签分组的关联键；每个标签最多 `key_limit` 个。"""
        grouped: dict[str, list[KeyRef]] = {tag_id: [] for tag_id in tag_ids}
        if not tag_ids:
            return grouped
        stmt = tagged_keys_statement(tag_ids, key_limit)
        for tag_id, key_id, key in await self._session.execute(stmt):
            grouped[tag_id].append(KeyRef(id=key_id, key=key))
        return grouped

# packages/server/src/lingohub/infrastructure/persistence/repositories/_translation_repo.py
"""翻译仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from lingohub.infrastructure.db._schema import Translation, TranslationKey
from lingohub.infrastructure.persistence._query import PageRequest, TranslationQuery
from lingohub_core.exceptions import DuplicateTranslationError
from lingohub_core.types import Page, TranslationFilters, TranslationRecord
from lingohub_core.uow import ITranslationRepository, TranslationLocator

from ._base_repo import BaseRepository


class SqlAlchemyTranslationRepository(BaseRepository, ITranslationRepository):
    """翻译仓库实现。"""

    async def get(self, translation_id: str) -> TranslationRecord | None:
        """根据 ID 获取翻译 DTO，预加载所属键及键上的标签。"""
        stmt = (
            select(Translation)
            .where(Translation.id == translation_id)
            .options(
                selectinload(Translation.translation_key).selectinload(
                    TranslationKey.tags
                )
            )
            .execution_options(populate_existing=True)
        )
        result = (await self._session.execute(stmt)).scalar_one_or_none()
        return TranslationRecord.from_orm_model(result) if result else None

    async def locate(self, translation_id: str) -> TranslationLocator | None:
        stmt = (
            select(
                Translation.id,
                Translation.translation_key_id,
                TranslationKey.key,
                Translation.locale,
            )
            .join(TranslationKey, Translation.translation_key_id == TranslationKey.id)
            .where(Translation.id == translation_id)
        )
        row = (await self._session.execute(stmt)).first()
        return TranslationLocator(*row) if row else None

    async def exists(
        self, key_id: str, locale: str, exclude_id: str | None = None
    ) -> bool:
        cond = exists().where(
            Translation.translation_key_id == key_id, Translation.locale == locale
        )
        if exclude_id is not None:
            cond = cond.where(Translation.id != exclude_id)
        return bool((await self._session.execute(select(cond))).scalar())

    async def exists_for_key(self, key: str, locale: str) -> bool:
        """按键文本（而非键 ID）检查 (键, 语言) 是否已有翻译。"""
        cond = (
            exists()
            .where(Translation.translation_key_id == TranslationKey.id)
            .where(TranslationKey.key == key, Translation.locale == locale)
        )
        return bool((await self._session.execute(select(cond))).scalar())

    async def add(self, key_id: str, locale: str, content: str) -> str:
        row = Translation(translation_key_id=key_id, locale=locale, content=content)
        try:
            # SAVEPOINT 保证唯一约束冲突后外层事务仍可继续查询
            async with self._session.begin_nested():
                self._session.add(row)
        except IntegrityError as e:
            raise DuplicateTranslationError(await self._key_text(key_id), locale) from e
        return row.id

    async def update(self, translation_id: str, **values: Any) -> None:
        """更新 translation_key_id / locale / content 中给出的列。"""
        if not values:
            return
        values["updated_at"] = datetime.now(timezone.utc)
        stmt = (
            update(Translation)
            .where(Translation.id == translation_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session.begin_nested():
                await self._session.execute(stmt)
        except IntegrityError as e:
            key_id = values.get("translation_key_id")
            locale = values.get("locale")
            if key_id is None or locale is None:
                current = await self.locate(translation_id)
                key_id = key_id or (current.translation_key_id if current else "")
                locale = locale or (current.locale if current else "")
            raise DuplicateTranslationError(await self._key_text(key_id), locale) from e

    async def delete(self, translation_id: str) -> None:
        await self._session.execute(
            delete(Translation)
            .where(Translation.id == translation_id)
            .execution_options(synchronize_session=False)
        )

    async def search(
        self, filters: TranslationFilters, page: int, per_page: int
    ) -> Page[TranslationRecord]:
        query = TranslationQuery.from_filters(filters)
        request = PageRequest(page=page, per_page=per_page)
        total = (await self._session.execute(query.count_statement())).scalar_one()
        rows = (await self._session.execute(query.page_statement(request))).scalars()
        return Page[TranslationRecord](
            items=[TranslationRecord.from_orm_model(r) for r in rows],
            total=total,
            page=request.page,
            per_page=request.per_page,
        )

    async def _key_text(self, key_id: str) -> str:
        stmt = select(TranslationKey.key).where(TranslationKey.id == key_id)
        return (await self._session.execute(stmt)).scalar_one_or_none() or key_id

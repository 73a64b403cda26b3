# packages/server/src/lingohub/infrastructure/persistence/repositories/_key_repo.py
"""翻译键及其标签关联的 SQLAlchemy 实现。"""

from __future__ import annotations

from typing import Sequence

import structlog
from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError

from lingohub.infrastructure.db._schema import (
    TagTranslationKey,
    Translation,
    TranslationKey,
)
from lingohub_core.uow import ITranslationKeyRepository

from ._base_repo import BaseRepository

logger = structlog.get_logger(__name__)


class SqlAlchemyTranslationKeyRepository(BaseRepository, ITranslationKeyRepository):
    """翻译键仓库实现。"""

    async def find_id(self, key: str) -> str | None:
        stmt = select(TranslationKey.id).where(TranslationKey.key == key)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_or_create(self, key: str) -> tuple[str, bool]:
        """
        在当前事务中获取或创建一个翻译键，返回 (id, 是否新建)。

        插入在 SAVEPOINT 中进行；若并发事务抢先插入了同名键而触发唯一约束，
        仅回滚该 SAVEPOINT 并重新查找一次。
        """
        key_id = await self.find_id(key)
        if key_id is not None:
            return key_id, False

        try:
            async with self._session.begin_nested():
                row = TranslationKey(key=key)
                self._session.add(row)
            return row.id, True
        except IntegrityError:
            logger.warning("创建翻译键时发生唯一约束冲突，重新查找", key=key)
            key_id = await self.find_id(key)
            if key_id is None:
                raise
            return key_id, False

    async def has_translations(self, key_id: str) -> bool:
        stmt = select(exists().where(Translation.translation_key_id == key_id))
        return bool((await self._session.execute(stmt)).scalar())

    async def delete(self, key_id: str) -> None:
        """删除翻译键：先删除其全部标签关联，再删除键本身。"""
        await self._session.execute(
            delete(TagTranslationKey).where(
                TagTranslationKey.translation_key_id == key_id
            )
        )
        await self._session.execute(
            delete(TranslationKey).where(TranslationKey.id == key_id)
        )

    async def tag_ids(self, key_id: str) -> list[str]:
        stmt = select(TagTranslationKey.tag_id).where(
            TagTranslationKey.translation_key_id == key_id
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def sync_tags(self, key_id: str, tag_ids: Sequence[str]) -> None:
        """
        把键的标签集合替换为 `tag_ids`：不在列表中的关联被删除，
        缺少的关联被插入，已存在的保持不动（幂等）。
        """
        wanted = set(tag_ids)
        current = set(await self.tag_ids(key_id))

        stale = current - wanted
        if stale:
            await self._session.execute(
                delete(TagTranslationKey).where(
                    TagTranslationKey.translation_key_id == key_id,
                    TagTranslationKey.tag_id.in_(sorted(stale)),
                )
            )
        await self._insert_links(key_id, [t for t in tag_ids if t not in current])

    async def attach_tags(self, key_id: str, tag_ids: Sequence[str]) -> None:
        """只追加缺少的标签关联，不删除已有关联。"""
        current = set(await self.tag_ids(key_id))
        await self._insert_links(key_id, [t for t in tag_ids if t not in current])

    async def _insert_links(self, key_id: str, tag_ids: Sequence[str]) -> None:
        # 同一批次内去重，关联行的 id 每次都重新生成
        for tag_id in dict.fromkeys(tag_ids):
            self._session.add(
                TagTranslationKey(tag_id=tag_id, translation_key_id=key_id)
            )
        await self._session.flush()

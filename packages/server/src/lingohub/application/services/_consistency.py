# packages/server/src/lingohub/application/services/_consistency.py
"""
唯一性与引用完整性的显式前置检查。

这些检查在写入前执行并抛出领域异常；存储层的唯一约束仍然存在，
检查与插入之间若发生竞争，由仓库把 `IntegrityError` 转换为同一种领域异常。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import structlog

from lingohub_core.exceptions import (
    DuplicateNameError,
    DuplicateTranslationError,
    EntityNotFoundError,
)

if TYPE_CHECKING:
    from lingohub_core.uow import IUnitOfWork

logger = structlog.get_logger(__name__)


class ConsistencyGuard:
    async def ensure_translation_absent(
        self, uow: IUnitOfWork, key: str, locale: str
    ) -> None:
        """(键文本, 语言) 下不得已有翻译。"""
        if await uow.translations.exists_for_key(key, locale):
            logger.warning("翻译已存在，拒绝重复创建", key=key, locale=locale)
            raise DuplicateTranslationError(key, locale)

    async def ensure_locale_free(
        self,
        uow: IUnitOfWork,
        key_id: str,
        key: str,
        locale: str,
        exclude_id: str,
    ) -> None:
        """同一个键下，除 `exclude_id` 外不得有其他翻译使用 `locale`。"""
        if await uow.translations.exists(key_id, locale, exclude_id=exclude_id):
            logger.warning(
                "目标语言已被同键下的其他翻译占用",
                key=key,
                locale=locale,
                translation_id=exclude_id,
            )
            raise DuplicateTranslationError(key, locale)

    async def ensure_tag_name_free(
        self, uow: IUnitOfWork, name: str, exclude_id: str | None = None
    ) -> None:
        existing = await uow.tags.find_id_by_name(name)
        if existing is not None and existing != exclude_id:
            logger.warning("标签名称已存在", name=name)
            raise DuplicateNameError(name)

    async def ensure_tags_exist(
        self, uow: IUnitOfWork, tag_ids: Sequence[str]
    ) -> None:
        missing = await uow.tags.missing_ids(tag_ids)
        if missing:
            raise EntityNotFoundError("Tag", missing[0])

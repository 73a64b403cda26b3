# packages/server/src/lingohub/application/services/_translation_commands.py
"""翻译的创建、更新与删除。"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

import structlog

from lingohub.domain.validation import (
    validate_content,
    validate_key,
    validate_locale,
    validate_tag_ids,
)
from lingohub_core.exceptions import EntityNotFoundError
from lingohub_core.types import TranslationPatch, TranslationRecord

if TYPE_CHECKING:
    from lingohub.infrastructure.uow import UowFactory

    from ._consistency import ConsistencyGuard
    from ._export import ExportService

logger = structlog.get_logger(__name__)


class TranslationCommandService:
    """
    所有写操作都在一个 UoW 中完成，任一步失败整体回滚。
    提交成功后、返回之前同步清除导出缓存。
    """

    def __init__(
        self,
        uow_factory: UowFactory,
        guard: ConsistencyGuard,
        export_service: ExportService,
    ):
        self._uow_factory = uow_factory
        self._guard = guard
        self._export = export_service

    async def create(
        self,
        key: str,
        locale: str,
        content: str,
        tag_ids: Sequence[str] | None = None,
    ) -> TranslationRecord:
        key = validate_key(key)
        locale = validate_locale(locale)
        content = validate_content(content)
        wanted_tags = validate_tag_ids(list(tag_ids)) if tag_ids is not None else None

        async with self._uow_factory() as uow:
            await self._guard.ensure_translation_absent(uow, key, locale)
            if wanted_tags:
                await self._guard.ensure_tags_exist(uow, wanted_tags)

            key_id, key_created = await uow.keys.get_or_create(key)
            translation_id = await uow.translations.add(key_id, locale, content)
            if wanted_tags is not None:
                await uow.keys.sync_tags(key_id, wanted_tags)

        logger.info(
            "翻译已创建",
            translation_id=translation_id,
            key=key,
            locale=locale,
            key_created=key_created,
        )
        await self._export.invalidate()
        return await self._reload(translation_id)

    async def update(
        self, translation_id: str, patch: TranslationPatch
    ) -> TranslationRecord:
        new_key = validate_key(patch.key) if patch.has("key") else None
        new_locale = validate_locale(patch.locale) if patch.has("locale") else None
        new_content = validate_content(patch.content) if patch.has("content") else None
        wanted_tags = validate_tag_ids(patch.tag_ids) if patch.has_tags() else None

        async with self._uow_factory() as uow:
            current = await uow.translations.locate(translation_id)
            if current is None:
                raise EntityNotFoundError("Translation", translation_id)

            locale = new_locale if new_locale is not None else current.locale
            renamed = new_key is not None and new_key != current.key
            values: dict[str, Any] = {}

            if renamed:
                await self._guard.ensure_translation_absent(uow, new_key, locale)
            elif locale != current.locale:
                await self._guard.ensure_locale_free(
                    uow,
                    current.translation_key_id,
                    current.key,
                    locale,
                    exclude_id=translation_id,
                )
            if wanted_tags:
                await self._guard.ensure_tags_exist(uow, wanted_tags)

            target_key_id = current.translation_key_id
            if renamed:
                target_key_id, _ = await uow.keys.get_or_create(new_key)
                values["translation_key_id"] = target_key_id
            if locale != current.locale:
                values["locale"] = locale
            if new_content is not None:
                values["content"] = new_content
            await uow.translations.update(translation_id, **values)

            if wanted_tags is not None:
                await uow.keys.sync_tags(target_key_id, wanted_tags)
            elif renamed:
                # 重命名且未指定标签时，把旧键的标签带到新键上
                old_tags = await uow.keys.tag_ids(current.translation_key_id)
                await uow.keys.attach_tags(target_key_id, old_tags)

            if renamed and not await uow.keys.has_translations(
                current.translation_key_id
            ):
                await uow.keys.delete(current.translation_key_id)
                logger.debug("旧翻译键已无翻译，已删除", key=current.key)

        logger.info(
            "翻译已更新",
            translation_id=translation_id,
            fields=sorted(patch.model_fields_set),
            renamed=renamed,
        )
        await self._export.invalidate()
        return await self._reload(translation_id)

    async def delete(self, translation_id: str) -> None:
        """删除翻译；若其所属键因此不再有任何翻译，连同键及其标签关联一起删除。"""
        async with self._uow_factory() as uow:
            current = await uow.translations.locate(translation_id)
            if current is None:
                raise EntityNotFoundError("Translation", translation_id)

            await uow.translations.delete(translation_id)
            key_removed = not await uow.keys.has_translations(
                current.translation_key_id
            )
            if key_removed:
                await uow.keys.delete(current.translation_key_id)

        logger.info(
            "翻译已删除",
            translation_id=translation_id,
            key=current.key,
            key_removed=key_removed,
        )
        await self._export.invalidate()

    async def _reload(self, translation_id: str) -> TranslationRecord:
        # 在新的会话中读取，确保键与标签反映已提交的状态
        async with self._uow_factory() as uow:
            record = await uow.translations.get(translation_id)
        if record is None:
            raise EntityNotFoundError("Translation", translation_id)
        return record

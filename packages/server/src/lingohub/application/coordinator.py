# packages/server/src/lingohub/application/coordinator.py
"""
LingoHub 应用服务总协调器。
这是一个高级门面，将调用委托给具体的应用服务。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from lingohub_core.types import TagPatch, TranslationFilters, TranslationPatch

if TYPE_CHECKING:
    from lingohub_core.types import Page, TagRecord, TranslationRecord

    from .services import (
        ExportService,
        TagService,
        TranslationCommandService,
        TranslationQueryService,
    )


class Coordinator:
    """高级门面，接收已初始化的服务实例。"""

    def __init__(
        self,
        command_service: TranslationCommandService,
        query_service: TranslationQueryService,
        tag_service: TagService,
        export_service: ExportService,
    ):
        self.command_service = command_service
        self.query_service = query_service
        self.tag_service = tag_service
        self.export_service = export_service

    # --- 翻译 ---
    async def create_translation(
        self,
        key: str,
        locale: str,
        content: str,
        tag_ids: Sequence[str] | None = None,
    ) -> TranslationRecord:
        return await self.command_service.create(key, locale, content, tag_ids)

    async def get_translation(self, translation_id: str) -> TranslationRecord:
        return await self.query_service.get(translation_id)

    async def update_translation(
        self, translation_id: str, patch: TranslationPatch | dict[str, Any]
    ) -> TranslationRecord:
        """`patch` 可以是 `TranslationPatch`，也可以是只含待修改字段的字典。"""
        if isinstance(patch, dict):
            patch = TranslationPatch.model_validate(patch)
        return await self.command_service.update(translation_id, patch)

    async def delete_translation(self, translation_id: str) -> None:
        await self.command_service.delete(translation_id)

    async def search_translations(
        self,
        filters: TranslationFilters | dict[str, Any] | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page[TranslationRecord]:
        if isinstance(filters, dict):
            filters = TranslationFilters.model_validate(filters)
        return await self.query_service.search(filters, page, per_page)

    async def export_translations(self) -> list[dict[str, Any]]:
        """导出全部翻译（受 `export.max_keys` 上限约束）。"""
        return await self.export_service.export()

    # --- 标签 ---
    async def create_tag(self, name: str) -> TagRecord:
        return await self.tag_service.create(name)

    async def get_tag(self, tag_id: str) -> TagRecord:
        return await self.tag_service.get(tag_id)

    async def update_tag(
        self, tag_id: str, patch: TagPatch | dict[str, Any]
    ) -> TagRecord:
        if isinstance(patch, dict):
            patch = TagPatch.model_validate(patch)
        return await self.tag_service.update(tag_id, patch)

    async def delete_tag(self, tag_id: str) -> None:
        await self.tag_service.delete(tag_id)

    async def search_tags(
        self,
        name: str | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page[TagRecord]:
        return await self.tag_service.search(name, page, per_page)

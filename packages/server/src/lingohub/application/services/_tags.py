# packages/server/src/lingohub/application/services/_tags.py
"""标签的增删改查。"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from lingohub.domain.validation import validate_tag_name
from lingohub.infrastructure.persistence._query import PageRequest
from lingohub_core.exceptions import EntityNotFoundError
from lingohub_core.types import Page, TagPatch, TagRecord

if TYPE_CHECKING:
    from lingohub.config import LingoHubConfig
    from lingohub.infrastructure.uow import UowFactory

    from ._consistency import ConsistencyGuard
    from ._export import ExportService

logger = structlog.get_logger(__name__)


class TagService:
    def __init__(
        self,
        uow_factory: UowFactory,
        config: LingoHubConfig,
        guard: ConsistencyGuard,
        export_service: ExportService,
    ):
        self._uow_factory = uow_factory
        self._config = config
        self._guard = guard
        self._export = export_service

    async def create(self, name: str) -> TagRecord:
        name = validate_tag_name(name)
        async with self._uow_factory() as uow:
            await self._guard.ensure_tag_name_free(uow, name)
            tag_id = await uow.tags.add(name)
        logger.info("标签已创建", tag_id=tag_id, name=name)
        return await self.get(tag_id)

    async def get(self, tag_id: str) -> TagRecord:
        async with self._uow_factory() as uow:
            record = await uow.tags.get(tag_id)
        if record is None:
            raise EntityNotFoundError("Tag", tag_id)
        return record

    async def update(self, tag_id: str, patch: TagPatch) -> TagRecord:
        new_name = validate_tag_name(patch.name) if patch.has("name") else None
        async with self._uow_factory() as uow:
            record = await uow.tags.get(tag_id)
            if record is None:
                raise EntityNotFoundError("Tag", tag_id)
            renamed = new_name is not None and new_name != record.name
            if renamed:
                await self._guard.ensure_tag_name_free(uow, new_name, exclude_id=tag_id)
                await uow.tags.rename(tag_id, new_name)

        if not renamed:
            return record
        logger.info("标签已重命名", tag_id=tag_id, name=new_name)
        # 导出文档包含标签名
        await self._export.invalidate()
        return await self.get(tag_id)

    async def delete(self, tag_id: str) -> None:
        async with self._uow_factory() as uow:
            if not await uow.tags.delete(tag_id):
                raise EntityNotFoundError("Tag", tag_id)
        logger.info("标签已删除", tag_id=tag_id)
        await self._export.invalidate()

    async def search(
        self,
        name: str | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page[TagRecord]:
        cfg = self._config.pagination
        request = PageRequest.resolve(
            page, per_page, default=cfg.default_per_page, maximum=cfg.max_per_page
        )
        async with self._uow_factory() as uow:
            return await uow.tags.search(
                name, request.page, request.per_page, key_limit=cfg.tag_key_limit
            )

# packages/server/src/lingohub/application/services/_translation_query.py
"""翻译的只读查询。"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lingohub.infrastructure.persistence._query import PageRequest
from lingohub_core.exceptions import EntityNotFoundError
from lingohub_core.types import Page, TranslationFilters, TranslationRecord

if TYPE_CHECKING:
    from lingohub.config import LingoHubConfig
    from lingohub.infrastructure.uow import UowFactory


class TranslationQueryService:
    def __init__(self, uow_factory: UowFactory, config: LingoHubConfig):
        self._uow_factory = uow_factory
        self._config = config

    async def get(self, translation_id: str) -> TranslationRecord:
        async with self._uow_factory() as uow:
            record = await uow.translations.get(translation_id)
        if record is None:
            raise EntityNotFoundError("Translation", translation_id)
        return record

    async def search(
        self,
        filters: TranslationFilters | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page[TranslationRecord]:
        """按条件分页检索；页大小缺省 15，最大 100（可配置）。"""
        cfg = self._config.pagination
        request = PageRequest.resolve(
            page, per_page, default=cfg.default_per_page, maximum=cfg.max_per_page
        )
        async with self._uow_factory() as uow:
            return await uow.translations.search(
                filters or TranslationFilters(), request.page, request.per_page
            )

# packages/core/src/lingohub_core/uow.py
"""
定义了仓库 (Repository) 与单元工作 (Unit of Work) 的抽象契约。

应用服务只通过 `IUnitOfWork` 访问持久化层；一个 UoW 对应一个数据库事务，
退出上下文时无异常则提交，否则回滚并原样抛出异常。
"""

from __future__ import annotations

from typing import Any, NamedTuple, Protocol, Sequence

from .types import Page, TagRecord, TranslationFilters, TranslationRecord


class TranslationLocator(NamedTuple):
    """定位一条翻译所需的最小信息。"""

    id: str
    translation_key_id: str
    key: str
    locale: str


class ExportRow(NamedTuple):
    """导出批次查询返回的一行：(键, 语言, 译文, 标签名)，外连接列可能为 None。"""

    key: str
    locale: str | None
    content: str | None
    tag_name: str | None


class ITranslationKeyRepository(Protocol):
    async def find_id(self, key: str) -> str | None: ...

    async def get_or_create(self, key: str) -> tuple[str, bool]: ...

    async def has_translations(self, key_id: str) -> bool: ...

    async def delete(self, key_id: str) -> None: ...

    async def tag_ids(self, key_id: str) -> list[str]: ...

    async def sync_tags(self, key_id: str, tag_ids: Sequence[str]) -> None: ...

    async def attach_tags(self, key_id: str, tag_ids: Sequence[str]) -> None: ...


class ITranslationRepository(Protocol):
    async def get(self, translation_id: str) -> TranslationRecord | None: ...

    async def locate(self, translation_id: str) -> TranslationLocator | None: ...

    async def exists(
        self, key_id: str, locale: str, exclude_id: str | None = None
    ) -> bool: ...

    async def exists_for_key(self, key: str, locale: str) -> bool: ...

    async def add(self, key_id: str, locale: str, content: str) -> str: ...

    async def update(self, translation_id: str, **values: Any) -> None: ...

    async def delete(self, translation_id: str) -> None: ...

    async def search(
        self, filters: TranslationFilters, page: int, per_page: int
    ) -> Page[TranslationRecord]: ...


class ITagRepository(Protocol):
    async def add(self, name: str) -> str: ...

    async def get(
        self, tag_id: str, key_limit: int | None = None
    ) -> TagRecord | None: ...

    async def find_id_by_name(self, name: str) -> str | None: ...

    async def missing_ids(self, tag_ids: Sequence[str]) -> list[str]: ...

    async def rename(self, tag_id: str, name: str) -> None: ...

    async def delete(self, tag_id: str) -> bool: ...

    async def search(
        self, name: str | None, page: int, per_page: int, key_limit: int | None = None
    ) -> Page[TagRecord]: ...


class IExportRepository(Protocol):
    async def count_keys(self) -> int: ...

    async def list_keys(self, limit: int | None) -> list[tuple[str, str]]: ...

    async def fetch_batch(self, key_ids: Sequence[str]) -> list[ExportRow]: ...


class IUnitOfWork(Protocol):
    """一次事务范围内的全部仓库。"""

    keys: ITranslationKeyRepository
    translations: ITranslationRepository
    tags: ITagRepository
    export: IExportRepository

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

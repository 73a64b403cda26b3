# packages/server/src/lingohub/infrastructure/persistence/_query.py
"""
检索查询的组合器。

每个过滤条件都是一个可选的谓词子句：为 None 时不追加，
所有子句以 AND 组合。用户输入一律以绑定参数进入 SQL，
子串匹配使用 `autoescape`，`%` 与 `_` 按字面匹配。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import ColumnElement, Select, exists, func, select
from sqlalchemy.orm import selectinload

from lingohub.infrastructure.db._schema import (
    Tag,
    TagTranslationKey,
    Translation,
    TranslationKey,
)
from lingohub_core.types import TranslationFilters


@dataclass(frozen=True)
class PageRequest:
    """规范化后的分页参数。"""

    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @classmethod
    def resolve(
        cls,
        page: int | None,
        per_page: int | None,
        *,
        default: int = 15,
        maximum: int = 100,
    ) -> "PageRequest":
        """页码从 1 开始；页大小缺省取 default，超过 maximum 时截断。"""
        size = default if per_page is None or per_page < 1 else min(per_page, maximum)
        return cls(page=max(1, page or 1), per_page=size)


class TranslationQuery:
    """翻译检索查询：Translation ⋈ TranslationKey，标签条件走 EXISTS 子查询。"""

    def __init__(self) -> None:
        self._clauses: list[ColumnElement[bool]] = []

    @classmethod
    def from_filters(cls, filters: TranslationFilters) -> "TranslationQuery":
        if filters.is_empty():
            return cls()
        return (
            cls()
            .key_contains(filters.key)
            .value_contains(filters.value)
            .locale_is(filters.locale)
            .tagged_with(filters.tag)
        )

    @property
    def clauses(self) -> Sequence[ColumnElement[bool]]:
        return tuple(self._clauses)

    def key_contains(self, text: str | None) -> "TranslationQuery":
        if text is not None:
            self._clauses.append(TranslationKey.key.icontains(text, autoescape=True))
        return self

    def value_contains(self, text: str | None) -> "TranslationQuery":
        if text is not None:
            self._clauses.append(Translation.content.contains(text, autoescape=True))
        return self

    def locale_is(self, locale: str | None) -> "TranslationQuery":
        if locale is not None:
            self._clauses.append(Translation.locale == locale)
        return self

    def tagged_with(self, tag_name: str | None) -> "TranslationQuery":
        if tag_name is not None:
            self._clauses.append(
                exists()
                .where(TagTranslationKey.translation_key_id == Translation.translation_key_id)
                .where(TagTranslationKey.tag_id == Tag.id)
                .where(Tag.name == tag_name)
            )
        return self

    def count_statement(self) -> Select:
        return (
            select(func.count(Translation.id))
            .join(TranslationKey, Translation.translation_key_id == TranslationKey.id)
            .where(*self._clauses)
        )

    def page_statement(self, page: PageRequest) -> Select:
        return (
            select(Translation)
            .join(TranslationKey, Translation.translation_key_id == TranslationKey.id)
            .where(*self._clauses)
            .options(
                selectinload(Translation.translation_key).selectinload(
                    TranslationKey.tags
                )
            )
            .order_by(Translation.created_at, Translation.id)
            .limit(page.per_page)
            .offset(page.offset)
            .execution_options(populate_existing=True)
        )


class TagQuery:
    """标签检索查询：按名称子串过滤。"""

    def __init__(self) -> None:
        self._clauses: list[ColumnElement[bool]] = []

    def name_contains(self, text: str | None) -> "TagQuery":
        if text:
            self._clauses.append(Tag.name.icontains(text, autoescape=True))
        return self

    def count_statement(self) -> Select:
        return select(func.count(Tag.id)).where(*self._clauses)

    def page_statement(self, page: PageRequest) -> Select:
        return (
            select(Tag)
            .where(*self._clauses)
            .order_by(Tag.name, Tag.id)
            .limit(page.per_page)
            .offset(page.offset)
            .execution_options(populate_existing=True)
        )


def tagged_keys_statement(tag_ids: Sequence[str], limit: int | None) -> Select:
    """
    查询若干标签各自关联的翻译键 (tag_id, key_id, key)，按键文本排序。

    `limit` 通过窗口函数在数据库内对每个标签单独截断，
    不会把超出上限的关联行读入内存。
    """
    rank = (
        func.row_number()
        .over(
            partition_by=TagTranslationKey.tag_id,
            order_by=(TranslationKey.key, TranslationKey.id),
        )
        .label("rank")
    )
    ranked = (
        select(
            TagTranslationKey.tag_id.label("tag_id"),
            TranslationKey.id.label("key_id"),
            TranslationKey.key.label("key"),
            rank,
        )
        .join(TranslationKey, TagTranslationKey.translation_key_id == TranslationKey.id)
        .where(TagTranslationKey.tag_id.in_(list(tag_ids)))
        .subquery()
    )
    stmt = select(ranked.c.tag_id, ranked.c.key_id, ranked.c.key)
    if limit is not None:
        stmt = stmt.where(ranked.c.rank <= limit)
    return stmt.order_by(ranked.c.tag_id, ranked.c.rank)

# packages/core/src/lingohub_core/types.py
"""
本模块定义了 LingoHub 系统的核心数据类型。
这些类型是系统各层之间数据交换的契约（DTO），与 ORM 模型解耦。
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, ClassVar, Generic, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class TagRef(BaseModel):
    """挂在翻译键上的标签引用。"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class KeyRef(BaseModel):
    """挂在标签上的翻译键引用。"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    key: str


class TranslationRecord(BaseModel):
    """翻译记录的数据传输对象 (DTO)，已展开所属键与键上的标签。"""

    id: str
    key: str
    locale: str
    content: str
    tags: list[TagRef] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_orm_model(cls, orm_obj: Any) -> "TranslationRecord":
        """
        [防腐层] 从 SQLAlchemy ORM 实例创建 DTO。
        调用方必须已预加载 `translation_key.tags`。
        """
        key_obj = orm_obj.translation_key
        return cls(
            id=orm_obj.id,
            key=key_obj.key,
            locale=orm_obj.locale,
            content=orm_obj.content,
            tags=sorted(
                (TagRef.model_validate(t) for t in key_obj.tags),
                key=lambda ref: ref.name,
            ),
            created_at=orm_obj.created_at,
            updated_at=orm_obj.updated_at,
        )


class TagRecord(BaseModel):
    """标签记录的 DTO。"""

    id: str
    name: str
    translation_keys: list[KeyRef] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_orm_model(
        cls, orm_obj: Any, translation_keys: Sequence[KeyRef] = ()
    ) -> "TagRecord":
        """
        [防腐层] 从 ORM 实例创建 DTO。
        关联键由调用方单独查询并传入（已排序、已截断）。
        """
        return cls(
            id=orm_obj.id,
            name=orm_obj.name,
            translation_keys=list(translation_keys),
            created_at=orm_obj.created_at,
            updated_at=orm_obj.updated_at,
        )


class Page(BaseModel, Generic[T]):
    """基于页码的分页结果。"""

    items: list[T]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1


class ExportEntry(BaseModel):
    """导出文档中的一条记录：一个键在所有语言下的译文与标签。"""

    key: str
    translations: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class TranslationFilters(BaseModel):
    """翻译检索的可选过滤条件；为 None 的条件不参与过滤。"""

    key: str | None = None
    value: str | None = None
    locale: str | None = None
    tag: str | None = None

    def is_empty(self) -> bool:
        return all(v is None for v in (self.key, self.value, self.locale, self.tag))


class _Patch(BaseModel):
    """
    局部更新结构的基类。

    是否“提供了某字段”以 `model_fields_set` 为准，
    因此“未提供”与“提供了空字符串”可以区分。
    """

    _required_when_present: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_explicit_null(self) -> "_Patch":
        for name in self._required_when_present:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"字段 {name!r} 不允许显式设置为 null")
        return self

    def has(self, field: str) -> bool:
        """字段是否由调用方显式提供。"""
        return field in self.model_fields_set


class TranslationPatch(_Patch):
    """翻译的局部更新。`tag_ids` 为 None 或未提供时不改动标签。"""

    _required_when_present: ClassVar[tuple[str, ...]] = ("key", "locale", "content")

    key: str | None = None
    locale: str | None = None
    content: str | None = None
    tag_ids: list[str] | None = None

    def has_tags(self) -> bool:
        return self.has("tag_ids") and self.tag_ids is not None


class TagPatch(_Patch):
    """标签的局部更新。"""

    _required_when_present: ClassVar[tuple[str, ...]] = ("name",)

    name: str | None = None

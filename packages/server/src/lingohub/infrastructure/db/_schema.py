# packages/server/src/lingohub/infrastructure/db/_schema.py
"""
定义了与 Alembic 迁移完全对应的 SQLAlchemy ORM 模型。

- translation_keys      翻译键（全局唯一的 key 文本）
- translations          每个键在每种语言下的一条译文，(键, 语言) 唯一
- tags                  标签，名称唯一
- tag_translation_key   标签与翻译键的多对多关联，(标签, 键) 唯一

多对多关系在 ORM 层声明为只读 (viewonly)，关联行由仓库显式维护，
以保证关联行自身的 id 与时间戳被正确写入。
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from lingohub.domain.ids import new_id

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TranslationKey(Base):
    __tablename__ = "translation_keys"

    key: Mapped[str] = mapped_column(String(255), unique=True)
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default_factory=new_id
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=_utcnow,
        init=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=_utcnow,
        default_factory=_utcnow,
        init=False,
    )
    translations: Mapped[list["Translation"]] = relationship(
        back_populates="translation_key",
        passive_deletes=True,
        default_factory=list,
        init=False,
        repr=False,
    )
    tags: Mapped[list["Tag"]] = relationship(
        secondary="tag_translation_key",
        back_populates="translation_keys",
        viewonly=True,
        default_factory=list,
        init=False,
        repr=False,
    )

    def get_translation(self, locale: str) -> "Translation | None":
        """返回已加载集合中指定语言的译文。"""
        if len(locale) > 5:
            raise ValueError("Locale must be at most 5 characters long")
        return next((t for t in self.translations if t.locale == locale), None)

    def get_translation_with_fallback(
        self, locale: str, fallback_locale: str = "en"
    ) -> "Translation | None":
        if len(fallback_locale) > 5:
            raise ValueError("Locale must be at most 5 characters long")
        return self.get_translation(locale) or self.get_translation(fallback_locale)


class Translation(Base):
    __tablename__ = "translations"

    translation_key_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("translation_keys.id", ondelete="CASCADE"), index=True
    )
    locale: Mapped[str] = mapped_column(String(5))
    content: Mapped[str] = mapped_column(Text)
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default_factory=new_id
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=_utcnow,
        init=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=_utcnow,
        default_factory=_utcnow,
        init=False,
    )
    translation_key: Mapped[TranslationKey] = relationship(
        back_populates="translations", init=False, repr=False
    )

    __table_args__ = (
        UniqueConstraint("translation_key_id", "locale"),
    )


class Tag(Base):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(255), unique=True)
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default_factory=new_id
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=_utcnow,
        init=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=_utcnow,
        default_factory=_utcnow,
        init=False,
    )
    translation_keys: Mapped[list[TranslationKey]] = relationship(
        secondary="tag_translation_key",
        back_populates="tags",
        viewonly=True,
        default_factory=list,
        init=False,
        repr=False,
    )


class TagTranslationKey(Base):
    __tablename__ = "tag_translation_key"

    tag_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tags.id", ondelete="CASCADE")
    )
    translation_key_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("translation_keys.id", ondelete="CASCADE"), index=True
    )
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default_factory=new_id
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=_utcnow,
        init=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=_utcnow,
        default_factory=_utcnow,
        init=False,
    )

    __table_args__ = (
        UniqueConstraint("tag_id", "translation_key_id"),
    )

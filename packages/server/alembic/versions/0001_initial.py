# packages/server/alembic/versions/0001_initial.py
"""
迁移 0001: 初始表结构

- translation_keys
- translations          (translation_key_id, locale) 唯一，随键级联删除
- tags
- tag_translation_key   (tag_id, translation_key_id) 唯一，随键或标签级联删除

Revision ID: 0001
Revises:
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "translation_keys",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("key", sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_translation_keys")),
        sa.UniqueConstraint("key", name=op.f("uq_translation_keys_key")),
    )

    op.create_table(
        "translations",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("translation_key_id", sa.String(36), nullable=False),
        sa.Column("locale", sa.String(5), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_translations")),
        sa.ForeignKeyConstraint(
            ["translation_key_id"],
            ["translation_keys.id"],
            name=op.f("fk_translations_translation_key_id_translation_keys"),
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "translation_key_id",
            "locale",
            name=op.f("uq_translations_translation_key_id_locale"),
        ),
    )
    op.create_index(
        op.f("ix_translations_translation_key_id"),
        "translations",
        ["translation_key_id"],
    )

    op.create_table(
        "tags",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tags")),
        sa.UniqueConstraint("name", name=op.f("uq_tags_name")),
    )

    op.create_table(
        "tag_translation_key",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("tag_id", sa.String(36), nullable=False),
        sa.Column("translation_key_id", sa.String(36), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tag_translation_key")),
        sa.ForeignKeyConstraint(
            ["tag_id"],
            ["tags.id"],
            name=op.f("fk_tag_translation_key_tag_id_tags"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["translation_key_id"],
            ["translation_keys.id"],
            name=op.f("fk_tag_translation_key_translation_key_id_translation_keys"),
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "tag_id",
            "translation_key_id",
            name=op.f("uq_tag_translation_key_tag_id_translation_key_id"),
        ),
    )
    op.create_index(
        op.f("ix_tag_translation_key_translation_key_id"),
        "tag_translation_key",
        ["translation_key_id"],
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_tag_translation_key_translation_key_id"),
        table_name="tag_translation_key",
    )
    op.drop_table("tag_translation_key")
    op.drop_table("tags")
    op.drop_index(op.f("ix_translations_translation_key_id"), table_name="translations")
    op.drop_table("translations")
    op.drop_table("translation_keys")

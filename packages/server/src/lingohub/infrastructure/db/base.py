# packages/server/src/lingohub/infrastructure/db/base.py
"""
定义了 SQLAlchemy 的元数据 (MetaData) 和声明式基类 (DeclarativeBase)。

所有 ORM 模型都通过 `Base` 与模块级的单一 `metadata` 实例关联，
约束命名规则在此统一，保证迁移脚本与 ORM 生成的约束名一致。
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Base(MappedAsDataclass, DeclarativeBase):
    """
    项目统一的声明式基类。

    它被配置为数据类 (`MappedAsDataclass`)，并与模块级的 `metadata` 实例关联。
    """

    __abstract__ = True
    metadata = metadata

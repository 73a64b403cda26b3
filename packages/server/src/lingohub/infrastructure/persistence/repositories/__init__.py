# packages/server/src/lingohub/infrastructure/persistence/repositories/__init__.py
from ._export_repo import SqlAlchemyExportRepository
from ._key_repo import SqlAlchemyTranslationKeyRepository
from ._tag_repo import SqlAlchemyTagRepository
from ._translation_repo import SqlAlchemyTranslationRepository

__all__ = [
    "SqlAlchemyTranslationKeyRepository",
    "SqlAlchemyTranslationRepository",
    "SqlAlchemyTagRepository",
    "SqlAlchemyExportRepository",
]

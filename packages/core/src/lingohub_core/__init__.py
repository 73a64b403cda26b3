# packages/core/src/lingohub_core/__init__.py
"""
LingoHub 核心契约包。

只包含异常、协议与 DTO，不依赖任何具体基础设施。
"""
from .exceptions import (
    ConfigurationError, DatabaseError, DuplicateNameError,
    DuplicateTranslationError, EntityNotFoundError, FieldValidationError,
    LingoHubError,
)
from .interfaces import CacheHandler
from .types import (
    ExportEntry, KeyRef, Page, TagPatch, TagRecord, TagRef,
    TranslationFilters, TranslationPatch, TranslationRecord,
)
from .uow import (
    ExportRow, IExportRepository, ITagRepository, ITranslationKeyRepository,
    ITranslationRepository, IUnitOfWork, TranslationLocator,
)

__all__ = [
    # from exceptions.py
    "LingoHubError", "ConfigurationError", "DatabaseError",
    "EntityNotFoundError", "DuplicateTranslationError", "DuplicateNameError",
    "FieldValidationError",
    # from interfaces.py
    "CacheHandler",
    # from types.py
    "TagRef", "KeyRef", "TranslationRecord", "TagRecord", "Page",
    "ExportEntry", "TranslationFilters", "TranslationPatch", "TagPatch",
    # from uow.py
    "IUnitOfWork", "ITranslationKeyRepository", "ITranslationRepository",
    "ITagRepository", "IExportRepository", "TranslationLocator", "ExportRow",
]

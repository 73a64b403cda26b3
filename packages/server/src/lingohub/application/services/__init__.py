# packages/server/src/lingohub/application/services/__init__.py
"""
应用服务层。

每个服务对应一组相关的业务用例；写服务在提交后负责清除导出缓存。
"""

from ._consistency import ConsistencyGuard
from ._export import ExportService, ExportState, fold_export_rows
from ._tags import TagService
from ._translation_commands import TranslationCommandService
from ._translation_query import TranslationQueryService

__all__ = [
    "ConsistencyGuard",
    "ExportService",
    "ExportState",
    "fold_export_rows",
    "TagService",
    "TranslationCommandService",
    "TranslationQueryService",
]

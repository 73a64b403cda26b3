# packages/server/src/lingohub/infrastructure/cache/__init__.py
from .memory import MemoryCacheHandler

__all__ = ["MemoryCacheHandler"]

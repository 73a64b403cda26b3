# packages/server/src/lingohub/application/__init__.py
from .coordinator import Coordinator

__all__ = ["Coordinator"]

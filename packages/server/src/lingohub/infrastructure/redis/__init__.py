# packages/server/src/lingohub/infrastructure/redis/__init__.py
from ._client import close_redis_client, get_redis_client
from .cache import RedisCacheHandler

__all__ = ["RedisCacheHandler", "close_redis_client", "get_redis_client"]

"""Redis persistence backend."""

from .redis_client import RedisClient
from .redis_store import RedisMessageStore, RedisUserDirectory

__all__ = ["RedisClient", "RedisMessageStore", "RedisUserDirectory"]

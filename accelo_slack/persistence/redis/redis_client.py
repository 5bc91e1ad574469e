"""
Fork-safe, asyncio-native Redis connection holder.

Uvicorn workers may fork after import time; a connection pool inherited
from the parent is discarded and rebuilt in the child.
"""

import logging
import os
from typing import ClassVar

from redis.asyncio import ConnectionPool, Redis

log = logging.getLogger("RedisClient")


class RedisClient:
    """One connection pool per process, built from ``REDIS_URL``."""

    _pool: ClassVar[ConnectionPool | None] = None
    _client: ClassVar[Redis | None] = None
    _pid: ClassVar[int | None] = None

    @classmethod
    def setup(cls, url: str, *, max_connections: int = 32) -> Redis:
        """Create the pool for this process (no-op when it already exists)."""
        pid = os.getpid()
        if cls._pid is not None and cls._pid != pid:
            # process forked, discard inherited pool
            cls._pool = None
            cls._client = None
        cls._pid = pid

        if cls._client is not None:
            log.debug(f"Redis pool already exists in PID {pid}")
            return cls._client

        log.info(f"Initialising Redis pool in PID {pid} ({url})")
        cls._pool = ConnectionPool.from_url(
            url,
            decode_responses=True,
            encoding="utf-8",
            max_connections=max_connections,
        )
        cls._client = Redis(connection_pool=cls._pool)
        return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the pool for this process."""
        if cls._pool is None or cls._pid != os.getpid():
            log.debug("No Redis pool to close for PID %s", os.getpid())
            return
        log.info("Closing Redis pool in PID %s", cls._pid)
        await cls._pool.disconnect()
        cls._pool = None
        cls._client = None
        cls._pid = None

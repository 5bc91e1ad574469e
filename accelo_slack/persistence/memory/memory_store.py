"""
In-memory message store and user directory.

Default backend. Fast, but forgets everything on restart and is not shared
between worker processes.
"""

import asyncio
import logging

from accelo_slack.domain.interfaces import (
    DirectoryUser,
    IMessageStore,
    IUserDirectory,
    MessageRef,
)

logger = logging.getLogger("MemoryStore")


class MemoryMessageStore(IMessageStore):
    """Request id -> MessageRef held in a dict."""

    def __init__(self):
        self._refs: dict[str, MessageRef] = {}
        self._lock = asyncio.Lock()

    async def get(self, request_id: str) -> MessageRef | None:
        async with self._lock:
            return self._refs.get(str(request_id))

    async def set(self, request_id: str, ref: MessageRef) -> bool:
        async with self._lock:
            self._refs[str(request_id)] = ref
        logger.debug(f"Stored message ref for request {request_id}: {ref.channel}/{ref.ts}")
        return True


class MemoryUserDirectory(IUserDirectory):
    """Matched users held in a list."""

    def __init__(self, users: list[DirectoryUser] | None = None):
        self._users: list[DirectoryUser] = list(users or [])
        self._lock = asyncio.Lock()

    async def all(self) -> list[DirectoryUser]:
        async with self._lock:
            return list(self._users)

    async def replace_all(self, users: list[DirectoryUser]) -> bool:
        async with self._lock:
            self._users = list(users)
        logger.info(f"User directory replaced with {len(users)} users")
        return True

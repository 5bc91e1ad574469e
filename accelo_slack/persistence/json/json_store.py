"""
JSON file message store and user directory.

Persistent across restarts; meant for a single process.
"""

import asyncio
import logging
from pathlib import Path

from pydantic import ValidationError

from accelo_slack.domain.interfaces import (
    DirectoryUser,
    IMessageStore,
    IUserDirectory,
    MessageRef,
)

from .file_manager import FileManager

logger = logging.getLogger("JSONStore")

MESSAGES_FILE = "messages"
USERS_FILE = "users"


class JsonMessageStore(IMessageStore):
    """Request id -> MessageRef kept in ``<store_dir>/messages.json``."""

    def __init__(self, file_manager: FileManager):
        self.file_manager = file_manager
        self.file_path: Path = file_manager.path_for(MESSAGES_FILE)
        # Serializes read-modify-write; the file lock only covers single I/O calls
        self._update_lock = asyncio.Lock()

    async def get(self, request_id: str) -> MessageRef | None:
        data = await self.file_manager.read_file(self.file_path, {})
        raw = data.get(str(request_id)) if isinstance(data, dict) else None
        if raw is None:
            return None
        try:
            return MessageRef.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Corrupt message ref for request {request_id}: {e}")
            return None

    async def set(self, request_id: str, ref: MessageRef) -> bool:
        async with self._update_lock:
            data = await self.file_manager.read_file(self.file_path, {})
            if not isinstance(data, dict):
                data = {}
            data[str(request_id)] = ref.model_dump()
            return await self.file_manager.write_file(self.file_path, data)


class JsonUserDirectory(IUserDirectory):
    """Matched users kept in ``<store_dir>/users.json``."""

    def __init__(self, file_manager: FileManager):
        self.file_manager = file_manager
        self.file_path: Path = file_manager.path_for(USERS_FILE)

    async def all(self) -> list[DirectoryUser]:
        data = await self.file_manager.read_file(self.file_path, [])
        if not isinstance(data, list):
            logger.error(f"Expected a list in {self.file_path}, got {type(data).__name__}")
            return []
        users = []
        for entry in data:
            try:
                users.append(DirectoryUser.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid user entry {entry}: {e}")
        return users

    async def replace_all(self, users: list[DirectoryUser]) -> bool:
        payload = [user.model_dump() for user in users]
        return await self.file_manager.write_file(self.file_path, payload)

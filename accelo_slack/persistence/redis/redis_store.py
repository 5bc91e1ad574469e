"""
Redis message store and user directory.

Persistent and shared between processes. Message refs live in one hash
keyed by request id; the user directory is one JSON string.
"""

import json
import logging

from pydantic import ValidationError
from redis.asyncio import Redis

from accelo_slack.domain.interfaces import (
    DirectoryUser,
    IMessageStore,
    IUserDirectory,
    MessageRef,
)

logger = logging.getLogger("RedisStore")

KEY_PREFIX = "accelo_slack"
MESSAGES_KEY = f"{KEY_PREFIX}:messages"
USERS_KEY = f"{KEY_PREFIX}:users"


class RedisMessageStore(IMessageStore):
    def __init__(self, redis: Redis, key: str = MESSAGES_KEY):
        self.redis = redis
        self.key = key

    async def get(self, request_id: str) -> MessageRef | None:
        raw = await self.redis.hget(self.key, str(request_id))
        if raw is None:
            return None
        try:
            return MessageRef.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Corrupt message ref for request {request_id}: {e}")
            return None

    async def set(self, request_id: str, ref: MessageRef) -> bool:
        await self.redis.hset(self.key, str(request_id), ref.model_dump_json())
        return True


class RedisUserDirectory(IUserDirectory):
    def __init__(self, redis: Redis, key: str = USERS_KEY):
        self.redis = redis
        self.key = key

    async def all(self) -> list[DirectoryUser]:
        raw = await self.redis.get(self.key)
        if raw is None:
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt user directory in {self.key}: {e}")
            return []
        return [DirectoryUser.model_validate(entry) for entry in entries]

    async def replace_all(self, users: list[DirectoryUser]) -> bool:
        payload = json.dumps([user.model_dump() for user in users])
        return bool(await self.redis.set(self.key, payload))

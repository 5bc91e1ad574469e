"""
Tests for the message store and user directory backends.
"""

import json
from unittest.mock import AsyncMock

import pytest

from accelo_slack.core.config.settings import Settings
from accelo_slack.core.types import StoreType
from accelo_slack.domain.interfaces import MessageRef
from accelo_slack.persistence import close_stores, create_stores
from accelo_slack.persistence.json import FileManager, JsonMessageStore, JsonUserDirectory
from accelo_slack.persistence.memory import MemoryMessageStore, MemoryUserDirectory
from accelo_slack.persistence.redis import RedisClient, RedisMessageStore, RedisUserDirectory


class TestMemoryBackend:
    @pytest.mark.asyncio
    async def test_message_refs(self):
        store = MemoryMessageStore()

        assert await store.get("500") is None
        await store.set("500", MessageRef(channel="C1", ts="1.1"))
        await store.set(500, MessageRef(channel="C1", ts="2.2"))

        assert await store.get("500") == MessageRef(channel="C1", ts="2.2")

    @pytest.mark.asyncio
    async def test_directory_lookups(self, directory_users):
        directory = MemoryUserDirectory(directory_users)

        assert (await directory.by_accelo_id(7)).slack_id == "U_ADA"
        assert (await directory.by_slack_id("U_ALAN")).accelo_id == "9"
        assert (await directory.find("Ada Lovelace")).email == "ada@example.com"
        assert await directory.find("nobody") is None
        assert await directory.slack_mention("9") == "<@U_ALAN>"
        assert await directory.slack_mention("404") == "Unknown"
        assert await directory.slack_mention(None) == "Unknown"

    @pytest.mark.asyncio
    async def test_replace_all(self, directory_users):
        directory = MemoryUserDirectory(directory_users)

        await directory.replace_all(directory_users[:1])

        assert [u.accelo_id for u in await directory.all()] == ["7"]


class TestJsonBackend:
    @pytest.mark.asyncio
    async def test_message_refs_persist(self, tmp_path):
        store = JsonMessageStore(FileManager(tmp_path))
        await store.set("500", MessageRef(channel="C1", ts="1.1"))
        await store.set("501", MessageRef(channel="C2", ts="2.2"))

        reopened = JsonMessageStore(FileManager(tmp_path))

        assert await reopened.get("500") == MessageRef(channel="C1", ts="1.1")
        assert await reopened.get("501") == MessageRef(channel="C2", ts="2.2")
        assert await reopened.get("502") is None
        assert not (tmp_path / "messages.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_corrupt_file_reads_as_empty(self, tmp_path):
        (tmp_path / "messages.json").write_text("{not json", encoding="utf-8")
        store = JsonMessageStore(FileManager(tmp_path))

        assert await store.get("500") is None

    @pytest.mark.asyncio
    async def test_directory_round_trip(self, tmp_path, directory_users):
        directory = JsonUserDirectory(FileManager(tmp_path))

        assert await directory.all() == []
        await directory.replace_all(directory_users)

        stored = json.loads((tmp_path / "users.json").read_text(encoding="utf-8"))
        assert [entry["slack_id"] for entry in stored] == ["U_ADA", "U_ALAN"]
        assert await JsonUserDirectory(FileManager(tmp_path)).all() == directory_users


class TestRedisBackend:
    @pytest.mark.asyncio
    async def test_message_refs(self):
        redis = AsyncMock()
        redis.hget.return_value = json.dumps({"channel": "C1", "ts": "1.1"})
        store = RedisMessageStore(redis)

        await store.set("500", MessageRef(channel="C1", ts="1.1"))
        ref = await store.get("500")

        key, field, value = redis.hset.await_args.args
        assert key == "accelo_slack:messages"
        assert field == "500"
        assert json.loads(value) == {"channel": "C1", "ts": "1.1"}
        redis.hget.assert_awaited_once_with("accelo_slack:messages", "500")
        assert ref == MessageRef(channel="C1", ts="1.1")

    @pytest.mark.asyncio
    async def test_missing_ref(self):
        redis = AsyncMock()
        redis.hget.return_value = None

        assert await RedisMessageStore(redis).get("500") is None

    @pytest.mark.asyncio
    async def test_directory(self, directory_users):
        redis = AsyncMock()
        redis.set.return_value = True
        directory = RedisUserDirectory(redis)

        assert await directory.replace_all(directory_users) is True
        key, payload = redis.set.await_args.args
        assert key == "accelo_slack:users"

        redis.get.return_value = payload
        assert await directory.all() == directory_users

    @pytest.mark.asyncio
    async def test_empty_directory(self):
        redis = AsyncMock()
        redis.get.return_value = None

        assert await RedisUserDirectory(redis).all() == []


class TestCreateStores:
    def test_memory_is_default(self):
        stores = create_stores(Settings(env={}))

        assert stores.store_type is StoreType.MEMORY
        assert isinstance(stores.messages, MemoryMessageStore)
        assert isinstance(stores.users, MemoryUserDirectory)

    def test_json(self, tmp_path):
        stores = create_stores(Settings(env={"STORE_TYPE": "JSON", "STORE_DIR": str(tmp_path)}))

        assert stores.store_type is StoreType.JSON
        assert isinstance(stores.messages, JsonMessageStore)
        assert stores.messages.file_path == tmp_path / "messages.json"

    @pytest.mark.asyncio
    async def test_redis_shares_one_client(self):
        settings = Settings(env={"STORE_TYPE": "redis", "REDIS_URL": "redis://localhost:6379/0"})

        stores = create_stores(settings)
        try:
            assert stores.store_type is StoreType.REDIS
            assert isinstance(stores.messages, RedisMessageStore)
            assert stores.messages.redis is stores.users.redis
        finally:
            await close_stores(stores)

        assert RedisClient._client is None

    def test_redis_requires_url(self):
        with pytest.raises(ValueError, match="REDIS_URL"):
            create_stores(Settings(env={"STORE_TYPE": "redis"}))

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unsupported store type"):
            create_stores(Settings(env={"STORE_TYPE": "postgres"}))

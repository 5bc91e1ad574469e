"""
Pytest configuration and common fixtures for accelo-slack tests.

Provides a fake aiohttp session that records outbound calls and replays
queued responses, plus settings and collaborator fixtures.
"""

import json
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from accelo_slack.accelo.models import Request
from accelo_slack.core.config.settings import Settings
from accelo_slack.domain.interfaces import DirectoryUser
from accelo_slack.persistence.memory import MemoryMessageStore, MemoryUserDirectory

TEST_ENV = {
    "WEBHOOK_SECRET": "s3cret",
    "ACCELO_DOMAIN": "acme",
    "ACCELO_ACCESS_TOKEN": "accelo-token",
    "SLACK_BOT_TOKEN": "xoxb-test",
    "CHANNEL_MAP": json.dumps({"Support Request": "C_SUPPORT", "Alerts": "C_ALERTS"}),
    "DENYLIST_CHANNEL": "C_DENY",
    "STATUS_CHANGE_DELAY": "0",
    "LOG_LEVEL": "DEBUG",
    "ENVIRONMENT": "PROD",
}


class FakeResponse:
    """Async context manager standing in for aiohttp.ClientResponse."""

    def __init__(self, status: int = 200, text: str = "{}"):
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: dict[str, Any] = field(default_factory=dict)

    @property
    def params(self) -> dict[str, Any] | None:
        return self.kwargs.get("params")

    @property
    def json(self) -> Any:
        return self.kwargs.get("json")

    @property
    def data(self) -> Any:
        return self.kwargs.get("data")

    @property
    def headers(self) -> dict[str, str]:
        return self.kwargs.get("headers") or {}


class FakeSession:
    """Records requests and answers them from a queue (``{}`` when empty)."""

    def __init__(self):
        self.calls: list[RecordedCall] = []
        self._responses: list[FakeResponse] = []

    def queue_json(self, body: Any, status: int = 200) -> None:
        self._responses.append(FakeResponse(status, json.dumps(body)))

    def queue_text(self, text: str, status: int = 200) -> None:
        self._responses.append(FakeResponse(status, text))

    def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append(RecordedCall(method, url, kwargs))
        if self._responses:
            return self._responses.pop(0)
        return FakeResponse()

    def post(self, url: str, **kwargs) -> FakeResponse:
        return self.request("POST", url, **kwargs)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def settings() -> Settings:
    return Settings(env=dict(TEST_ENV))


@pytest.fixture
def directory_users() -> list[DirectoryUser]:
    return [
        DirectoryUser(
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            accelo_id="7",
            slack_id="U_ADA",
            slack_username="ada",
        ),
        DirectoryUser(
            first_name="Alan",
            last_name="Turing",
            email="alan@example.com",
            accelo_id="9",
            slack_id="U_ALAN",
            slack_username="alan",
        ),
    ]


@pytest.fixture
def directory(directory_users) -> MemoryUserDirectory:
    return MemoryUserDirectory(directory_users)


@pytest.fixture
def message_store() -> MemoryMessageStore:
    return MemoryMessageStore()


@pytest.fixture
def mock_accelo() -> MagicMock:
    """AcceloAPI stand-in with async resource operations."""
    accelo = MagicMock()
    for resource in ("requests", "issues", "tasks", "activities", "affiliations", "staff"):
        client = getattr(accelo, resource)
        client.get = AsyncMock(return_value=None)
        client.list = AsyncMock(return_value=[])
        client.update = AsyncMock(return_value=None)
    return accelo


@pytest.fixture
def mock_slack() -> MagicMock:
    slack = MagicMock()
    slack.post_message = AsyncMock(return_value={"ok": True, "channel": "C_SUPPORT", "ts": "111.222"})
    slack.update_message = AsyncMock(return_value={"ok": True})
    slack.unfurl = AsyncMock(return_value={"ok": True})
    slack.users_lookup_by_email = AsyncMock(return_value={"ok": False, "error": "users_not_found"})
    return slack


@pytest.fixture
def make_request():
    """Factory for a Request as Accelo returns it for the message builder's field set."""

    def factory(**overrides) -> Request:
        data = {
            "id": "500",
            "title": "Printer on fire",
            "body": "Smoke everywhere",
            "standing": "open",
            "claimer": "0",
            "conversion_id": "0",
            "type": {"id": "1", "title": "Support Request"},
            "affiliation": {
                "id": "31",
                "email": "grace@example.com",
                "contact": {"id": "41", "firstname": "Grace", "surname": "Hopper"},
                "company": {"id": "51", "name": "Navy"},
            },
        }
        data.update(overrides)
        return Request.model_validate(data)

    return factory

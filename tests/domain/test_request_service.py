"""
Tests for the request actions: post, update, claim, close, re-open, refresh.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from accelo_slack.domain.interfaces import MessageRef
from accelo_slack.domain.services import RequestService
from accelo_slack.slack.models import ChatMessage, InteractionPayload


@pytest.fixture
def builder() -> MagicMock:
    builder = MagicMock()
    builder.build = AsyncMock(
        side_effect=lambda request_id: ChatMessage(channel="C_SUPPORT", text=f"request {request_id}")
    )
    return builder


@pytest.fixture
def service(mock_accelo, mock_slack, builder, message_store, directory) -> RequestService:
    return RequestService(mock_accelo, mock_slack, builder, message_store, directory)


def interaction(label: str, user_id: str = "U_ADA") -> InteractionPayload:
    return InteractionPayload.model_validate(
        {
            "type": "block_actions",
            "user": {"id": user_id},
            "channel": {"id": "C_CLICKED"},
            "message": {"ts": "999.000"},
            "actions": [{"text": {"type": "plain_text", "text": label}, "value": "500"}],
        }
    )


@pytest.mark.asyncio
async def test_send_new_request_posts_and_stores_ref(service, mock_slack, message_store):
    await service.send_new_request("500")

    body = mock_slack.post_message.await_args.args[0]
    assert body["channel"] == "C_SUPPORT"
    assert body["text"] == "request 500"
    assert await message_store.get("500") == MessageRef(channel="C_SUPPORT", ts="111.222")


@pytest.mark.asyncio
async def test_send_new_request_not_stored_when_slack_fails(service, mock_slack, message_store):
    mock_slack.post_message.return_value = {"ok": False, "error": "channel_not_found"}

    await service.send_new_request("500")

    assert await message_store.get("500") is None


@pytest.mark.asyncio
async def test_update_request_rewrites_stored_message(service, mock_slack, message_store):
    await message_store.set("500", MessageRef(channel="C_OLD", ts="1.1"))

    await service.update_request("500")

    body = mock_slack.update_message.await_args.args[0]
    assert body["channel"] == "C_OLD"
    assert body["ts"] == "1.1"


@pytest.mark.asyncio
async def test_update_request_without_stored_ref_posts_nothing(service, mock_slack, builder):
    assert await service.update_request("501") is None

    mock_slack.update_message.assert_not_awaited()
    mock_slack.post_message.assert_not_awaited()
    builder.build.assert_not_awaited()


@pytest.mark.asyncio
async def test_claim_sets_claimer_and_refreshes(service, mock_accelo, mock_slack, message_store):
    await service.claim(interaction("Claim"))

    mock_accelo.requests.update.assert_awaited_once_with("500", {"claimer_id": "7"})
    body = mock_slack.update_message.await_args.args[0]
    assert (body["channel"], body["ts"]) == ("C_CLICKED", "999.000")
    assert await message_store.get("500") == MessageRef(channel="C_CLICKED", ts="999.000")


@pytest.mark.asyncio
async def test_claim_by_unmatched_user_only_refreshes(service, mock_accelo, mock_slack):
    await service.claim(interaction("Claim", user_id="U_STRANGER"))

    mock_accelo.requests.update.assert_not_awaited()
    mock_slack.update_message.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "action, label, standing",
    [("close", "Close", "closed"), ("reopen", "Re-Open", "open")],
)
async def test_close_and_reopen(service, mock_accelo, mock_slack, action, label, standing):
    await getattr(service, action)(interaction(label))

    mock_accelo.requests.update.assert_awaited_once_with("500", {"standing": standing})
    mock_slack.update_message.assert_awaited_once()


@pytest.mark.asyncio
async def test_refresh_without_message_context_does_nothing(service, mock_slack):
    payload = InteractionPayload.model_validate({"user": {"id": "U_ADA"}, "actions": []})

    assert await service.refresh(payload) is None
    mock_slack.update_message.assert_not_awaited()

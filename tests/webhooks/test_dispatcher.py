"""
Tests for the webhook dispatcher.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from accelo_slack.webhooks import DispatchResult, WebhookDispatcher, WebhookEnvelope


@pytest.fixture
def requests_service() -> MagicMock:
    service = MagicMock()
    for name in ("send_new_request", "update_request", "claim", "close", "reopen", "refresh"):
        setattr(service, name, AsyncMock(return_value={"ok": True}))
    return service


@pytest.fixture
def unfurls() -> MagicMock:
    resolver = MagicMock()
    resolver.resolve_and_submit = AsyncMock(return_value={"ok": True})
    return resolver


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def dispatcher(settings, requests_service, unfurls, sleep) -> WebhookDispatcher:
    return WebhookDispatcher(settings, requests_service, unfurls, sleep=sleep)


def envelope(app, event_type, body=None, token="s3cret") -> WebhookEnvelope:
    return WebhookEnvelope(auth_token=token, app=app, event_type=event_type, body=body or {})


def interaction_body(label: str) -> dict:
    payload = {
        "user": {"id": "U_ADA"},
        "channel": {"id": "C1"},
        "message": {"ts": "1.1"},
        "actions": [{"text": {"type": "plain_text", "text": label}, "value": "500"}],
    }
    return {"payload": json.dumps(payload)}


class TestAuthentication:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["wrong", "", None, "s3cret "])
    async def test_bad_token_is_dropped_silently(self, dispatcher, requests_service, token):
        result = await dispatcher.dispatch(
            envelope("accelo", "request_created", {"id": "500"}, token=token)
        )

        assert result == DispatchResult.empty()
        assert result.content == ""
        assert result.media_type == "application/json"
        requests_service.send_new_request.assert_not_awaited()

    def test_no_configured_secret_rejects_everything(self, settings, requests_service, unfurls):
        settings.webhook_secret = None
        dispatcher = WebhookDispatcher(settings, requests_service, unfurls)

        assert dispatcher.authenticate("anything") is False


class TestAcceloEvents:
    @pytest.mark.asyncio
    async def test_request_created(self, dispatcher, requests_service, sleep):
        result = await dispatcher.dispatch(envelope("accelo", "request_created", {"id": 500}))

        requests_service.send_new_request.assert_awaited_once_with("500")
        sleep.assert_not_awaited()
        assert result == DispatchResult.empty()

    @pytest.mark.asyncio
    async def test_status_change_waits_then_updates(self, dispatcher, requests_service, sleep, settings):
        settings.status_change_delay = 2.0
        calls = []
        sleep.side_effect = lambda seconds: calls.append(("sleep", seconds))
        requests_service.update_request.side_effect = lambda rid: calls.append(("update", rid))

        await dispatcher.dispatch(envelope("accelo", "request_status_changed", {"id": "500"}))

        assert calls == [("sleep", 2.0), ("update", "500")]

    @pytest.mark.asyncio
    async def test_handler_failure_is_acknowledged(self, dispatcher, requests_service):
        requests_service.send_new_request.side_effect = RuntimeError("Accelo is down")

        result = await dispatcher.dispatch(envelope("accelo", "request_created", {"id": "500"}))

        assert result == DispatchResult.empty()

    @pytest.mark.asyncio
    async def test_malformed_body_is_acknowledged(self, dispatcher, requests_service):
        result = await dispatcher.dispatch(envelope("accelo", "request_created", {}))

        assert result == DispatchResult.empty()
        requests_service.send_new_request.assert_not_awaited()


class TestSlackInteractions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "label, handler",
        [("Claim", "claim"), ("Close", "close"), ("Re-Open", "reopen"), ("Refresh", "refresh")],
    )
    async def test_button_routes_to_handler(self, dispatcher, requests_service, label, handler):
        await dispatcher.dispatch(envelope("slack", "interaction", interaction_body(label)))

        getattr(requests_service, handler).assert_awaited_once()
        payload = getattr(requests_service, handler).await_args.args[0]
        assert payload.request_id == "500"
        others = {"claim", "close", "reopen", "refresh"} - {handler}
        for other in others:
            getattr(requests_service, other).assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("label", ["Convert", "View Ticket"])
    async def test_link_buttons_are_ignored(self, dispatcher, requests_service, label):
        result = await dispatcher.dispatch(envelope("slack", "interaction", interaction_body(label)))

        assert result == DispatchResult.empty()
        for name in ("claim", "close", "reopen", "refresh"):
            getattr(requests_service, name).assert_not_awaited()


class TestSlackEvents:
    @pytest.mark.asyncio
    async def test_url_verification_is_idempotent(self, dispatcher):
        body = {"type": "url_verification", "challenge": "3eZbrw1aBm2rZgRNFdxV2595E9CY3gmdALWMmHkvFXO7tYXAYM8P"}

        first = await dispatcher.dispatch(envelope("slack", "event", body))
        second = await dispatcher.dispatch(envelope("slack", "event", body))

        assert first == second
        assert first.content == body["challenge"]
        assert first.media_type == "text/plain"

    @pytest.mark.asyncio
    async def test_link_shared_submits_unfurls(self, dispatcher, unfurls):
        body = {
            "type": "event_callback",
            "event": {
                "type": "link_shared",
                "channel": "C1",
                "message_ts": "1.2",
                "links": [{"url": "https://acme.accelo.com/?action=view_issue&id=1"}],
            },
        }

        result = await dispatcher.dispatch(envelope("slack", "event", body))

        unfurls.resolve_and_submit.assert_awaited_once()
        assert unfurls.resolve_and_submit.await_args.args[0].channel == "C1"
        assert result == DispatchResult.empty()

    @pytest.mark.asyncio
    async def test_unknown_app_is_ignored(self, dispatcher, requests_service, unfurls):
        result = await dispatcher.dispatch(envelope("jira", "issue_created", {"id": "1"}))

        assert result == DispatchResult.empty()
        requests_service.send_new_request.assert_not_awaited()
        unfurls.resolve_and_submit.assert_not_awaited()

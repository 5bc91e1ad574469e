"""
Typed inbound webhook events.

An inbound call arrives as a WebhookEnvelope (query tags plus body) and is
classified once into one of the event models below. Anything that does not
classify is ignored by the dispatcher.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, Field

from accelo_slack.domain.enums import WebhookApp
from accelo_slack.slack.models import InteractionPayload, LinkSharedEvent

REQUEST_CREATED = "request_created"
REQUEST_STATUS_CHANGED = "request_status_changed"
SLACK_INTERACTION = "interaction"
SLACK_EVENT = "event"


class WebhookEnvelope(BaseModel):
    """One inbound HTTP call, built by the webhook route."""

    auth_token: str | None = Field(None, description="Shared secret from ?token=")
    app: str | None = Field(None, description="Source app from ?app=")
    event_type: str | None = Field(None, description="Event tag from ?type=")
    body: dict[str, Any] = Field(default_factory=dict, description="JSON body or form fields")
    query_params: dict[str, str] = Field(default_factory=dict)


class RequestCreated(BaseModel):
    kind: Literal["request_created"] = "request_created"
    request_id: str


class RequestStatusChanged(BaseModel):
    kind: Literal["request_status_changed"] = "request_status_changed"
    request_id: str


class SlackInteraction(BaseModel):
    """A message button was clicked."""

    kind: Literal["slack_interaction"] = "slack_interaction"
    payload: InteractionPayload


class SlackEvent(BaseModel):
    """Base of the Events API callbacks."""

    kind: Literal["slack_event"] = "slack_event"


class UrlVerification(SlackEvent):
    challenge: str


class LinkShared(SlackEvent):
    event: LinkSharedEvent


class UnhandledSlackEvent(SlackEvent):
    event_type: str | None = None


WebhookEvent = RequestCreated | RequestStatusChanged | SlackInteraction | SlackEvent


def _request_id(body: dict[str, Any]) -> str:
    request_id = body.get("id")
    if request_id is None or request_id == "":
        raise ValueError("Accelo webhook body has no id")
    return str(request_id)


def _classify_accelo(envelope: WebhookEnvelope) -> WebhookEvent | None:
    if envelope.event_type == REQUEST_CREATED:
        return RequestCreated(request_id=_request_id(envelope.body))
    if envelope.event_type == REQUEST_STATUS_CHANGED:
        return RequestStatusChanged(request_id=_request_id(envelope.body))
    return None


def _classify_slack_event(body: dict[str, Any]) -> SlackEvent:
    outer_type = body.get("type")
    if outer_type == "url_verification":
        return UrlVerification(challenge=body.get("challenge", ""))

    if outer_type == "event_callback":
        inner = body.get("event") or {}
        if inner.get("type") == "link_shared":
            return LinkShared(event=LinkSharedEvent.model_validate(inner))
        return UnhandledSlackEvent(event_type=inner.get("type"))

    return UnhandledSlackEvent(event_type=outer_type)


def _classify_slack(envelope: WebhookEnvelope) -> WebhookEvent | None:
    if envelope.event_type == SLACK_INTERACTION:
        raw = envelope.body.get("payload")
        if raw is None:
            raise ValueError("Slack interaction has no payload field")
        data = json.loads(raw) if isinstance(raw, str) else raw
        return SlackInteraction(payload=InteractionPayload.model_validate(data))
    if envelope.event_type == SLACK_EVENT:
        return _classify_slack_event(envelope.body)
    return None


def classify_envelope(envelope: WebhookEnvelope) -> WebhookEvent | None:
    """
    Map an envelope to its event, or None when the tags are not recognised.

    Raises:
        ValueError: If the tags are recognised but the body is malformed
    """
    app = WebhookApp.parse(envelope.app)
    if app is WebhookApp.ACCELO:
        return _classify_accelo(envelope)
    if app is WebhookApp.SLACK:
        return _classify_slack(envelope)
    return None

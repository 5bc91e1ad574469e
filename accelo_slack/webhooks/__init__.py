"""Inbound webhook events and their dispatcher."""

from .dispatcher import DispatchResult, WebhookDispatcher
from .events import (
    LinkShared,
    RequestCreated,
    RequestStatusChanged,
    SlackEvent,
    SlackInteraction,
    UnhandledSlackEvent,
    UrlVerification,
    WebhookEnvelope,
    WebhookEvent,
    classify_envelope,
)

__all__ = [
    "DispatchResult",
    "LinkShared",
    "RequestCreated",
    "RequestStatusChanged",
    "SlackEvent",
    "SlackInteraction",
    "UnhandledSlackEvent",
    "UrlVerification",
    "WebhookDispatcher",
    "WebhookEnvelope",
    "WebhookEvent",
    "classify_envelope",
]

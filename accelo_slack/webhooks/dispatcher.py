"""
Webhook dispatcher.

Single entry point for every inbound call: checks the shared secret,
classifies the envelope and runs the matching handler. The caller always
gets an acknowledgement; the only non-empty answer is the Slack URL
verification challenge.
"""

import asyncio
import hmac
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, assert_never

from accelo_slack.core.config.settings import Settings
from accelo_slack.core.logging.logger import get_logger
from accelo_slack.domain.enums import ButtonAction
from accelo_slack.domain.services import LinkUnfurlResolver, RequestService

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

JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain"


@dataclass(frozen=True)
class DispatchResult:
    """Body and media type of the HTTP answer."""

    content: str = ""
    media_type: str = JSON_MEDIA_TYPE

    @classmethod
    def empty(cls) -> "DispatchResult":
        return cls()

    @classmethod
    def text(cls, content: str) -> "DispatchResult":
        return cls(content=content, media_type=TEXT_MEDIA_TYPE)


class WebhookDispatcher:
    """Routes authenticated webhook envelopes to the request services."""

    def __init__(
        self,
        settings: Settings,
        requests: RequestService,
        unfurls: LinkUnfurlResolver,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        logger: Any | None = None,
    ):
        self.settings = settings
        self.requests = requests
        self.unfurls = unfurls
        self._sleep = sleep
        self.logger = logger or get_logger(__name__)

        self._button_handlers: dict[ButtonAction, Callable[..., Awaitable[Any]]] = {
            ButtonAction.CLAIM: requests.claim,
            ButtonAction.CLOSE: requests.close,
            ButtonAction.REOPEN: requests.reopen,
            ButtonAction.REFRESH: requests.refresh,
        }

    def authenticate(self, token: str | None) -> bool:
        """Constant-time comparison against WEBHOOK_SECRET."""
        secret = self.settings.webhook_secret
        if not secret or token is None:
            return False
        return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))

    async def dispatch(self, envelope: WebhookEnvelope) -> DispatchResult:
        """
        Handle one inbound call.

        Never raises: bad tokens, unknown tags, malformed bodies and handler
        failures all end in the empty acknowledgement.
        """
        if not self.authenticate(envelope.auth_token):
            self.logger.warning("🔒 Dropping webhook with invalid token")
            return DispatchResult.empty()

        try:
            event = classify_envelope(envelope)
        except ValueError as e:
            self.logger.error(f"Malformed {envelope.app}/{envelope.event_type} webhook: {e}")
            return DispatchResult.empty()

        if event is None:
            self.logger.debug(f"Ignoring webhook app={envelope.app} type={envelope.event_type}")
            return DispatchResult.empty()

        try:
            return await self.handle(event)
        except Exception as e:
            self.logger.exception(f"❌ Error handling {event.kind} webhook: {e}")
            return DispatchResult.empty()

    async def handle(self, event: WebhookEvent) -> DispatchResult:
        if isinstance(event, RequestCreated):
            await self.requests.send_new_request(event.request_id)
        elif isinstance(event, RequestStatusChanged):
            # Accelo fires before the new standing is readable
            await self._sleep(self.settings.status_change_delay)
            await self.requests.update_request(event.request_id)
        elif isinstance(event, SlackInteraction):
            await self._handle_interaction(event)
        elif isinstance(event, SlackEvent):
            return await self._handle_slack_event(event)
        else:
            assert_never(event)
        return DispatchResult.empty()

    async def _handle_interaction(self, event: SlackInteraction) -> None:
        label = event.payload.button_label
        action = ButtonAction.from_label(label)
        if action is None:
            self.logger.debug(f"No handler for button {label!r}")
            return

        self.logger.info(
            f"🔘 {action.value} clicked on request {event.payload.request_id} "
            f"by {event.payload.user.id}"
        )
        await self._button_handlers[action](event.payload)

    async def _handle_slack_event(self, event: SlackEvent) -> DispatchResult:
        if isinstance(event, UrlVerification):
            self.logger.info("🤝 Answering Slack URL verification")
            return DispatchResult.text(event.challenge)
        if isinstance(event, LinkShared):
            await self.unfurls.resolve_and_submit(event.event)
        elif isinstance(event, UnhandledSlackEvent):
            self.logger.debug(f"Ignoring Slack event {event.event_type!r}")
        return DispatchResult.empty()

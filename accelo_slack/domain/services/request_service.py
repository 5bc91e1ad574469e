"""
Request actions behind the webhook events and message buttons.

Every action ends the same way: the request's message is rebuilt from
Accelo and written back to Slack.
"""

from typing import Any

from accelo_slack.accelo import AcceloAPI
from accelo_slack.core.logging.logger import get_logger
from accelo_slack.domain.builders import RequestMessageBuilder
from accelo_slack.domain.interfaces import IMessageStore, IUserDirectory, MessageRef
from accelo_slack.slack.client import SlackClient
from accelo_slack.slack.models import InteractionPayload


class RequestService:
    """Posts, updates and acts on the Slack messages of Accelo requests."""

    def __init__(
        self,
        accelo: AcceloAPI,
        slack: SlackClient,
        builder: RequestMessageBuilder,
        messages: IMessageStore,
        directory: IUserDirectory,
        logger: Any | None = None,
    ):
        self.accelo = accelo
        self.slack = slack
        self.builder = builder
        self.messages = messages
        self.directory = directory
        self.logger = logger or get_logger(__name__)

    async def send_new_request(self, request_id: str) -> dict[str, Any]:
        """Post the message for a new request and remember where it went."""
        message = await self.builder.build(request_id)
        result = await self.slack.post_message(message.to_payload())

        if result.get("ok"):
            ref = MessageRef(channel=result["channel"], ts=result["ts"])
            await self.messages.set(request_id, ref)
            self.logger.info(f"📨 Posted request {request_id} to {ref.channel} ({ref.ts})")
        return result

    async def update_request(self, request_id: str) -> dict[str, Any] | None:
        """Rebuild the stored message of a request; None when none was stored."""
        ref = await self.messages.get(request_id)
        if ref is None:
            self.logger.warning(f"No stored message for request {request_id}, skipping update")
            return None

        message = await self.builder.build(request_id)
        message.channel = ref.channel
        return await self.slack.update_message(message.to_payload(ts=ref.ts))

    async def claim(self, interaction: InteractionPayload) -> dict[str, Any] | None:
        """Make the clicking Slack user the claimer, then refresh."""
        request_id = interaction.request_id
        user = await self.directory.by_slack_id(interaction.user.id)

        if user is None:
            self.logger.warning(
                f"Slack user {interaction.user.id} is not matched to Accelo staff; "
                f"request {request_id} left unclaimed"
            )
        else:
            await self.accelo.requests.update(request_id, {"claimer_id": user.accelo_id})
            self.logger.info(f"🙋 Request {request_id} claimed by {user.accelo_id}")

        return await self.refresh(interaction)

    async def close(self, interaction: InteractionPayload) -> dict[str, Any] | None:
        await self.accelo.requests.update(interaction.request_id, {"standing": "closed"})
        return await self.refresh(interaction)

    async def reopen(self, interaction: InteractionPayload) -> dict[str, Any] | None:
        await self.accelo.requests.update(interaction.request_id, {"standing": "open"})
        return await self.refresh(interaction)

    async def refresh(self, interaction: InteractionPayload) -> dict[str, Any] | None:
        """Rebuild the message the clicked button lives in."""
        request_id = interaction.request_id
        channel = interaction.channel_id
        ts = interaction.message_ts
        if not request_id or not channel or not ts:
            self.logger.warning("Interaction is missing request id, channel or message ts")
            return None

        message = await self.builder.build(request_id)
        message.channel = channel
        result = await self.slack.update_message(message.to_payload(ts=ts))
        await self.messages.set(request_id, MessageRef(channel=channel, ts=ts))
        return result

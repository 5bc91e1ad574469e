"""
Slack message and payload models.

Outbound: ``ChatMessage`` plus small Block Kit helpers used by the message
builder. Inbound: the parts of interaction payloads and ``link_shared``
events the relay reads. Inbound models keep unknown fields so a payload can
be logged or inspected in full.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A chat message ready for ``chat.postMessage`` or ``chat.update``.

    ``text`` is the notification fallback when blocks are present.
    """

    channel: str = Field("", description="Target channel id, empty when unmapped")
    text: str = Field("", description="Message text or notification fallback")
    blocks: list[dict[str, Any]] = Field(default_factory=list)
    attachments: list[dict[str, Any]] = Field(default_factory=list)

    def to_payload(self, ts: str | None = None) -> dict[str, Any]:
        """Web API body; pass ``ts`` to address an existing message."""
        payload = self.model_dump()
        if ts is not None:
            payload["ts"] = ts
        return payload

    @property
    def buttons(self) -> list[dict[str, Any]]:
        """All buttons across the message's action blocks, in order."""
        return [
            element
            for block in self.blocks
            if block.get("type") == "actions"
            for element in block.get("elements", [])
            if element.get("type") == "button"
        ]

    @property
    def button_labels(self) -> list[str]:
        return [button["text"]["text"] for button in self.buttons]


# Block Kit helpers


def mrkdwn(text: str) -> dict[str, Any]:
    return {"type": "mrkdwn", "text": text}


def section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": mrkdwn(text)}


def fields_section(*texts: str) -> dict[str, Any]:
    return {"type": "section", "fields": [mrkdwn(text) for text in texts]}


def button(
    label: str,
    value: str,
    style: str | None = None,
    url: str | None = None,
) -> dict[str, Any]:
    """Plain-text button; ``url`` turns it into a link button."""
    element: dict[str, Any] = {
        "type": "button",
        "text": {"type": "plain_text", "emoji": True, "text": label},
    }
    if style:
        element["style"] = style
    if url:
        element["url"] = url
    element["value"] = value
    return element


def actions(*elements: dict[str, Any]) -> dict[str, Any]:
    return {"type": "actions", "elements": list(elements)}


# Inbound payloads


class SlackPayloadModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class SlackUser(SlackPayloadModel):
    id: str
    username: str | None = None
    name: str | None = None


class SlackChannel(SlackPayloadModel):
    id: str
    name: str | None = None


class ActionText(SlackPayloadModel):
    type: str | None = None
    text: str = ""


class InteractionAction(SlackPayloadModel):
    action_id: str | None = None
    type: str | None = None
    text: ActionText = Field(default_factory=ActionText)
    value: str | None = None


class InteractionMessage(SlackPayloadModel):
    ts: str
    text: str | None = None


class InteractionContainer(SlackPayloadModel):
    type: str | None = None
    message_ts: str | None = None
    channel_id: str | None = None


class InteractionPayload(SlackPayloadModel):
    """``block_actions`` payload sent when a message button is clicked."""

    type: str | None = None
    user: SlackUser
    channel: SlackChannel | None = None
    message: InteractionMessage | None = None
    container: InteractionContainer | None = None
    actions: list[InteractionAction] = Field(default_factory=list)
    response_url: str | None = None
    trigger_id: str | None = None

    @property
    def first_action(self) -> InteractionAction | None:
        return self.actions[0] if self.actions else None

    @property
    def button_label(self) -> str | None:
        action = self.first_action
        return action.text.text if action else None

    @property
    def request_id(self) -> str | None:
        """Request id carried in the clicked button's value."""
        action = self.first_action
        return action.value if action else None

    @property
    def channel_id(self) -> str | None:
        if self.channel is not None:
            return self.channel.id
        if self.container is not None:
            return self.container.channel_id
        return None

    @property
    def message_ts(self) -> str | None:
        if self.message is not None:
            return self.message.ts
        if self.container is not None:
            return self.container.message_ts
        return None


class SharedLink(SlackPayloadModel):
    url: str
    domain: str | None = None


class LinkSharedEvent(SlackPayloadModel):
    """Inner ``link_shared`` event of an ``event_callback``."""

    type: str = "link_shared"
    channel: str
    user: str | None = None
    message_ts: str
    links: list[SharedLink] = Field(default_factory=list)

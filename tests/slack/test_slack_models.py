"""
Tests for Slack message helpers and inbound payload models.
"""

from accelo_slack.slack.models import (
    ChatMessage,
    InteractionPayload,
    actions,
    button,
    section,
)


def test_chat_message_payload_and_buttons():
    message = ChatMessage(
        channel="C1",
        text="fallback",
        blocks=[section("hi"), actions(button("Refresh", "5"), button("Go", "5", url="https://x"))],
    )

    payload = message.to_payload(ts="1.2")

    assert payload["channel"] == "C1"
    assert payload["ts"] == "1.2"
    assert payload["attachments"] == []
    assert message.button_labels == ["Refresh", "Go"]
    assert message.buttons[1]["url"] == "https://x"
    assert "ts" not in message.to_payload()


def test_interaction_payload_accessors():
    payload = InteractionPayload.model_validate(
        {
            "type": "block_actions",
            "user": {"id": "U_ADA", "username": "ada"},
            "channel": {"id": "C1", "name": "support"},
            "message": {"ts": "111.222", "text": "x"},
            "actions": [
                {"action_id": "a", "type": "button", "text": {"type": "plain_text", "text": "Claim"}, "value": "500"}
            ],
        }
    )

    assert payload.button_label == "Claim"
    assert payload.request_id == "500"
    assert payload.channel_id == "C1"
    assert payload.message_ts == "111.222"


def test_interaction_payload_falls_back_to_container():
    payload = InteractionPayload.model_validate(
        {
            "user": {"id": "U1"},
            "container": {"type": "message", "message_ts": "9.9", "channel_id": "C9"},
            "actions": [],
        }
    )

    assert payload.channel_id == "C9"
    assert payload.message_ts == "9.9"
    assert payload.button_label is None
    assert payload.request_id is None

"""Slack side of the relay: Web API client and message/payload models."""

from .client import SlackClient
from .models import ChatMessage, InteractionPayload, LinkSharedEvent

__all__ = ["ChatMessage", "InteractionPayload", "LinkSharedEvent", "SlackClient"]

"""Slack Web API client."""

from .slack_client import SLACK_API_URL, SlackClient

__all__ = ["SLACK_API_URL", "SlackClient"]

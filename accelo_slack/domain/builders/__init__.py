"""Builders for outbound Slack messages."""

from .message_builder import ISSUE_FIELDS, REQUEST_FIELDS, RequestMessageBuilder

__all__ = ["ISSUE_FIELDS", "REQUEST_FIELDS", "RequestMessageBuilder"]

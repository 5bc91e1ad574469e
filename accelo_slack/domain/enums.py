"""
Closed vocabularies of the relay: webhook sources, request standings and
message button actions.
"""

from enum import Enum


class WebhookApp(str, Enum):
    """Value of the ``app`` query parameter on inbound webhooks."""

    ACCELO = "accelo"
    SLACK = "slack"

    @classmethod
    def parse(cls, value: str | None) -> "WebhookApp | None":
        try:
            return cls(value)
        except ValueError:
            return None


class Standing(str, Enum):
    """Coarse lifecycle state of a request, as shown in messages."""

    PENDING = "Pending"
    OPEN = "Open"
    CONVERTED = "Converted"
    CLOSED = "Closed"
    OTHER = "Other"

    @staticmethod
    def display(raw: str | None) -> str:
        """First letter upper-cased, the rest kept as Accelo sent it."""
        if not raw:
            return ""
        return raw[0].upper() + raw[1:]

    @classmethod
    def from_raw(cls, raw: str | None) -> "Standing":
        display = cls.display(raw)
        for member in (cls.PENDING, cls.OPEN, cls.CONVERTED, cls.CLOSED):
            if member.value == display:
                return member
        return cls.OTHER


class ButtonAction(str, Enum):
    """Labels of the message buttons that call back into the relay."""

    CLAIM = "Claim"
    CLOSE = "Close"
    REOPEN = "Re-Open"
    REFRESH = "Refresh"

    @classmethod
    def from_label(cls, label: str | None) -> "ButtonAction | None":
        """Action for a clicked label; None for link buttons and unknown labels."""
        try:
            return cls(label)
        except ValueError:
            return None

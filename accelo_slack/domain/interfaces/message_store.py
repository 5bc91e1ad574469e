"""
Message store interface.

Remembers where the Slack message for an Accelo request lives so a status
change can update it in place.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class MessageRef(BaseModel):
    """Channel and timestamp of a posted Slack message."""

    channel: str
    ts: str


class IMessageStore(ABC):
    """
    Key-value association of request id to MessageRef.

    Implementations: memory (default), JSON files, Redis.
    """

    @abstractmethod
    async def get(self, request_id: str) -> MessageRef | None:
        """Stored reference for a request, or None when never posted."""
        pass

    @abstractmethod
    async def set(self, request_id: str, ref: MessageRef) -> bool:
        """Add or replace the reference for a request."""
        pass

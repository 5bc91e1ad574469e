"""
User directory interface.

Pairs Accelo staff with Slack users so claims and mentions can cross from
one side to the other.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class DirectoryUser(BaseModel):
    """One staff member known on both sides."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    accelo_id: str
    slack_id: str
    slack_username: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def matches(self, value: str) -> bool:
        """True when any field (or the full name) equals ``value``."""
        candidates = {
            self.first_name,
            self.last_name,
            self.full_name,
            self.email,
            self.accelo_id,
            self.slack_id,
            self.slack_username,
        }
        return value in candidates


def find_user(users: list[DirectoryUser], value: str | int | None) -> DirectoryUser | None:
    """First user with any field equal to ``value``."""
    if value is None:
        return None
    needle = str(value)
    return next((user for user in users if user.matches(needle)), None)


class IUserDirectory(ABC):
    """Lookup of matched Accelo/Slack users."""

    @abstractmethod
    async def all(self) -> list[DirectoryUser]:
        """Every stored user, in stored order."""
        pass

    @abstractmethod
    async def replace_all(self, users: list[DirectoryUser]) -> bool:
        """Replace the whole directory with a fresh match."""
        pass

    async def find(self, value: str | int | None) -> DirectoryUser | None:
        """User with any field equal to ``value``."""
        return find_user(await self.all(), value)

    async def by_accelo_id(self, accelo_id: str | int | None) -> DirectoryUser | None:
        if accelo_id is None:
            return None
        needle = str(accelo_id)
        return next((u for u in await self.all() if u.accelo_id == needle), None)

    async def by_slack_id(self, slack_id: str | None) -> DirectoryUser | None:
        if slack_id is None:
            return None
        return next((u for u in await self.all() if u.slack_id == slack_id), None)

    async def slack_mention(self, accelo_id: str | int | None) -> str:
        """``<@slack_id>`` for an Accelo staff id, ``Unknown`` when unmatched."""
        user = await self.by_accelo_id(accelo_id)
        return f"<@{user.slack_id}>" if user else "Unknown"

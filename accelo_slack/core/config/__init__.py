"""Configuration for the Accelo ↔ Slack relay."""

from .settings import DEFAULT_TITLE_DENYLIST, Settings

__all__ = ["DEFAULT_TITLE_DENYLIST", "Settings"]

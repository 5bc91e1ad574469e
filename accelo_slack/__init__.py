"""
accelo-slack: relays Accelo request events into Slack messages and Slack
button clicks and link unfurls back into Accelo.
"""

from .core.app import create_app
from .core.config.settings import Settings

__all__ = ["Settings", "create_app"]

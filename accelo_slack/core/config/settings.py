"""
Settings for the Accelo ↔ Slack relay.

Simple, reliable environment variable configuration. A Settings instance is
built once at process start and handed to every component that needs it.
"""

import json
import os
import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load .env file for local development - look in current working directory
load_dotenv(".env")

DEFAULT_TITLE_DENYLIST = [
    "[macOS Updates]",
    "[Windows Update]",
    "[Root Capacity]",
    "[OpenDNS Active]",
    "[Reboot Events]",
    "[Time Machine]",
    "[Activation Lock]",
]


def _get_version_from_pyproject() -> str:
    """
    Read version from pyproject.toml file.

    Returns:
        Version string from pyproject.toml, or fallback version
    """
    current_path = Path(__file__)
    for parent in [current_path.parent, *current_path.parents]:
        pyproject_path = parent / "pyproject.toml"
        if pyproject_path.exists():
            try:
                with open(pyproject_path, "rb") as f:
                    pyproject_data = tomllib.load(f)
                    version = pyproject_data.get("project", {}).get("version")
                    if version:
                        return version
            except (OSError, tomllib.TOMLDecodeError):
                continue

    return "0.1.0"


def _load_json(env: Mapping[str, str], name: str, default: Any) -> Any:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"{name} must be valid JSON: {e}") from e


class Settings:
    """Application settings with environment-based configuration."""

    def __init__(self, env: Mapping[str, str] | None = None):
        env = os.environ if env is None else env

        # ================================================================
        # Version & Host Configuration
        # ================================================================
        self.version: str = _get_version_from_pyproject()
        self.port: int = int(env.get("PORT", "8000"))
        self.log_level: str = env.get("LOG_LEVEL", "INFO")
        self.log_dir: str = env.get("LOG_DIR", "./logs")
        self.environment: str = env.get("ENVIRONMENT", "DEV")

        # ================================================================
        # Webhook Configuration
        # ================================================================
        self.webhook_secret: str | None = env.get("WEBHOOK_SECRET")
        self.status_change_delay: float = float(env.get("STATUS_CHANGE_DELAY", "2"))

        # ================================================================
        # Accelo Configuration
        # ================================================================
        self.accelo_domain: str | None = env.get("ACCELO_DOMAIN")
        self.accelo_access_token: str | None = env.get("ACCELO_ACCESS_TOKEN")
        self.accelo_username: str | None = env.get("ACCELO_USERNAME")
        self.accelo_password: str | None = env.get("ACCELO_PASSWORD")

        # ================================================================
        # Slack Configuration
        # ================================================================
        self.slack_bot_token: str | None = env.get("SLACK_BOT_TOKEN")
        self.slack_client_id: str | None = env.get("SLACK_CLIENT_ID")
        self.slack_client_secret: str | None = env.get("SLACK_CLIENT_SECRET")

        # ================================================================
        # Routing Configuration
        # ================================================================
        self.channel_map: dict[str, str] = _load_json(env, "CHANNEL_MAP", {})
        self.denylist_channel: str = env.get("DENYLIST_CHANNEL", "")
        self.title_denylist: list[str] = _load_json(
            env, "TITLE_DENYLIST", list(DEFAULT_TITLE_DENYLIST)
        )
        self.alert_request_type: str = env.get("ALERT_REQUEST_TYPE", "Alerts")

        # ================================================================
        # Store Configuration
        # ================================================================
        self.store_type: str = env.get("STORE_TYPE", "memory")
        self.store_dir: str = env.get("STORE_DIR", "./data")
        self.redis_url: str | None = env.get("REDIS_URL")

        self._validate_settings()

    def _validate_settings(self):
        """Validate settings values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        self.log_level = self.log_level.upper()

        valid_environments = ["DEV", "PROD"]
        if self.environment.upper() not in valid_environments:
            self.environment = "DEV"  # Default fallback
        self.environment = self.environment.upper()

        if not isinstance(self.channel_map, dict):
            raise ValueError("CHANNEL_MAP must be a JSON object")
        if not isinstance(self.title_denylist, list):
            raise ValueError("TITLE_DENYLIST must be a JSON list")

    def validate_required(self) -> None:
        """Validate the credentials needed to serve webhooks."""
        if not self.webhook_secret:
            raise ValueError("WEBHOOK_SECRET is required")
        if not self.accelo_domain:
            raise ValueError("ACCELO_DOMAIN is required")
        if not self.accelo_access_token:
            raise ValueError("ACCELO_ACCESS_TOKEN is required")
        if not self.slack_bot_token:
            raise ValueError("SLACK_BOT_TOKEN is required")

    def channel_for(self, request_type: str | None) -> str:
        """Channel id for a request type title, empty when unmapped."""
        if request_type is None:
            return ""
        return self.channel_map.get(request_type, "")

    def unmapped_request_types(self, titles: Iterable[str]) -> list[str]:
        """
        List request type titles that have no channel configured.

        Unmapped types are posted with an empty channel, so this is the place
        to catch CHANNEL_MAP gaps before they show up at runtime.
        """
        return [title for title in titles if title not in self.channel_map]

    @property
    def accelo_web_url(self) -> str:
        """Browser URL of the Accelo deployment."""
        return f"https://{self.accelo_domain}.accelo.com"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "DEV"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "PROD"

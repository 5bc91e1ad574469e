"""
Tests for environment-based settings.
"""

import pytest

from accelo_slack.core.config.settings import DEFAULT_TITLE_DENYLIST, Settings


def test_defaults():
    settings = Settings(env={})

    assert settings.port == 8000
    assert settings.log_level == "INFO"
    assert settings.environment == "DEV"
    assert settings.is_development
    assert settings.status_change_delay == 2.0
    assert settings.channel_map == {}
    assert settings.title_denylist == DEFAULT_TITLE_DENYLIST
    assert settings.alert_request_type == "Alerts"
    assert settings.store_type == "memory"


def test_values_from_env(settings):
    assert settings.webhook_secret == "s3cret"
    assert settings.status_change_delay == 0.0
    assert settings.is_production
    assert settings.accelo_web_url == "https://acme.accelo.com"
    assert settings.channel_for("Support Request") == "C_SUPPORT"


def test_log_level_is_normalised():
    assert Settings(env={"LOG_LEVEL": "debug"}).log_level == "DEBUG"


def test_bad_log_level():
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        Settings(env={"LOG_LEVEL": "LOUD"})


def test_unknown_environment_falls_back_to_dev():
    assert Settings(env={"ENVIRONMENT": "staging"}).environment == "DEV"


@pytest.mark.parametrize(
    "name, raw",
    [
        ("CHANNEL_MAP", "{not json"),
        ("CHANNEL_MAP", '["C1"]'),
        ("TITLE_DENYLIST", '{"a": 1}'),
    ],
)
def test_bad_json_settings(name, raw):
    with pytest.raises(ValueError, match=name):
        Settings(env={name: raw})


def test_denylist_override():
    settings = Settings(env={"TITLE_DENYLIST": '["[Spam]"]'})

    assert settings.title_denylist == ["[Spam]"]


def test_validate_required_reports_first_missing():
    with pytest.raises(ValueError, match="WEBHOOK_SECRET"):
        Settings(env={}).validate_required()

    with pytest.raises(ValueError, match="SLACK_BOT_TOKEN"):
        Settings(
            env={
                "WEBHOOK_SECRET": "s",
                "ACCELO_DOMAIN": "acme",
                "ACCELO_ACCESS_TOKEN": "t",
            }
        ).validate_required()


def test_validate_required_passes(settings):
    settings.validate_required()


def test_channel_lookup(settings):
    assert settings.channel_for("Alerts") == "C_ALERTS"
    assert settings.channel_for("Billing") == ""
    assert settings.channel_for(None) == ""


def test_unmapped_request_types(settings):
    titles = ["Support Request", "Billing", "Alerts", "Onboarding"]

    assert settings.unmapped_request_types(titles) == ["Billing", "Onboarding"]

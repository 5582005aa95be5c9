"""
Unit tests for environment settings and SchedulerConfig.from_settings.
"""

import pytest
from pydantic import ValidationError

from recall.config import Settings
from recall.core import SchedulerConfig


def test_defaults_match_sm2():
    config = SchedulerConfig.from_settings(Settings())

    assert config == SchedulerConfig()
    assert config.initial_ease == 2.5
    assert config.minimum_ease == 1.3
    assert (config.first_interval, config.second_interval) == (1, 6)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("RECALL_MINIMUM_EASE", "1.5")
    monkeypatch.setenv("RECALL_SECOND_INTERVAL", "4")
    monkeypatch.setenv("RECALL_UPCOMING_LIMIT", "8")

    settings = Settings()
    config = SchedulerConfig.from_settings(settings)

    assert config.minimum_ease == 1.5
    assert config.second_interval == 4
    assert settings.upcoming_limit == 8


def test_invalid_interval_setting(monkeypatch):
    monkeypatch.setenv("RECALL_FIRST_INTERVAL", "0")

    with pytest.raises(ValidationError):
        Settings()

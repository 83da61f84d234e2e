"""Tests for environment-backed settings."""

import pytest
from pydantic import ValidationError

from src.floating_notifications import PipelineConfig
from src.settings import Settings, get_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.max_visible == 5
        assert settings.arrival_cap == 10
        assert settings.ledger_capacity == 100
        assert settings.trim_interval_seconds == 60.0
        assert settings.in_app_channel == "in_app"
        assert settings.max_preference_fetch_attempts == 2
        assert settings.sound_asset == "/notification-sound.mp3"
        assert settings.sound_volume == 0.5

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FLOATNOTE_LEDGER_CAPACITY", "250")
        monkeypatch.setenv("FLOATNOTE_TRIM_INTERVAL_SECONDS", "5")
        settings = Settings()
        assert settings.ledger_capacity == 250
        assert settings.trim_interval_seconds == 5.0

    def test_rejects_invalid_values(self, monkeypatch):
        monkeypatch.setenv("FLOATNOTE_MAX_VISIBLE", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_picks_up_env(self, monkeypatch):
        get_settings()
        monkeypatch.setenv("FLOATNOTE_MAX_VISIBLE", "8")
        get_settings.cache_clear()
        assert get_settings().max_visible == 8


class TestPipelineConfigFromSettings:
    def test_explicit_settings(self):
        cfg = PipelineConfig.from_settings(Settings(max_visible=2, ledger_capacity=7))
        assert cfg.max_visible == 2
        assert cfg.ledger_capacity == 7
        assert cfg.arrival_cap == 10

    def test_config_is_frozen(self):
        cfg = PipelineConfig()
        with pytest.raises(Exception):
            cfg.max_visible = 9

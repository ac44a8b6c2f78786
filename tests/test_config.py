"""Tests for settings loading."""

import logging

import pytest

from distribution_engine.config import Settings, configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
        monkeypatch.setenv("ENGINE_VERSION", "2.3.0")
        monkeypatch.setenv("MAX_QUERY_DAYS", "31")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        settings = Settings.from_env()

        assert settings.database_url == "sqlite+aiosqlite:///./test.db"
        assert settings.engine_version == "2.3.0"
        assert settings.max_query_days == 31
        assert settings.log_level == "WARNING"

    def test_invalid_max_query_days(self):
        with pytest.raises(ValueError):
            Settings("sqlite://", "1.0.0", 0, "INFO")

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            Settings("sqlite://", "1.0.0", 10, "CHATTY")

    def test_configure_logging(self, settings):
        configure_logging(settings)
        assert logging.getLogger("distribution_engine").level == logging.DEBUG

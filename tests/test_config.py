"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from remotestorage.config import AppSettings, settings


class TestAppSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "REMOTESTORAGE_LOG_LEVEL",
            "REMOTESTORAGE_SILENCED_LOGGERS",
            "REMOTESTORAGE_WIRE_PREFIX",
            "REMOTESTORAGE_SETTINGS_FILE",
        ):
            monkeypatch.delenv(name, raising=False)
        app_settings = AppSettings(_env_file=None)
        assert app_settings.REMOTESTORAGE_LOG_LEVEL == "info"
        assert app_settings.REMOTESTORAGE_SILENCED_LOGGERS == []
        assert app_settings.REMOTESTORAGE_WIRE_PREFIX == "remote_storage_wire_"
        assert app_settings.REMOTESTORAGE_SETTINGS_FILE is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("REMOTESTORAGE_LOG_LEVEL", "error")
        monkeypatch.setenv("REMOTESTORAGE_SILENCED_LOGGERS", '["sync", "wire"]')
        app_settings = AppSettings(_env_file=None)
        assert app_settings.REMOTESTORAGE_LOG_LEVEL == "error"
        assert app_settings.REMOTESTORAGE_SILENCED_LOGGERS == ["sync", "wire"]

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            AppSettings(REMOTESTORAGE_LOG_LEVEL="verbose")

    def test_settings_are_frozen(self):
        with pytest.raises(ValidationError):
            settings.REMOTESTORAGE_WIRE_PREFIX = "changed"

    def test_singleton_instance(self):
        assert AppSettings._instance is settings

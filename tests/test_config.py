"""Environment driven configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from notifyhub.config import Settings, get_settings, reset_settings_cache


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.data_dir == Path("data")
    assert settings.notifications_page_size == 50
    assert settings.cleanup_days == 30
    assert settings.ws_path == "/ws"
    assert settings.is_production is False


def test_environment_overrides_are_cached(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("NOTIFYHUB_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("NOTIFYHUB_APP_ENV", "production")
    monkeypatch.setenv("NOTIFYHUB_LOG_LEVEL", " debug ")
    monkeypatch.setenv("NOTIFYHUB_CORS_ORIGINS", '["https://example.com"]')

    settings = get_settings()

    assert settings.data_dir == tmp_path
    assert settings.is_production is True
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["https://example.com"]

    monkeypatch.setenv("NOTIFYHUB_APP_ENV", "development")
    assert get_settings() is settings
    reset_settings_cache()
    assert get_settings().is_production is False


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, notifications_page_size=0)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="staging")

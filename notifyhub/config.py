"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        env_prefix="NOTIFYHUB_",
        extra="ignore",
    )

    app_name: str = Field(default="Realtime Notification Service", min_length=1)
    app_env: Literal["development", "production"] = Field(
        default="development",
        description="Runtime environment; stack traces are only exposed outside production",
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the notifications, comments and settings JSON documents",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Origins allowed to call the HTTP API from a browser",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    seed_sample_data: bool = Field(
        default=True,
        description="Populate the comments and notifications documents on first run",
    )
    notifications_page_size: int = Field(
        default=50,
        gt=0,
        le=100,
        description="Default number of notifications returned by the listing endpoint",
    )
    cleanup_days: int = Field(
        default=30,
        ge=0,
        description="Default retention window, in days, for the cleanup endpoint",
    )
    bulk_comment_interval_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Delay between notifications generated by the bulk comment demo",
    )
    ws_path: str = Field(default="/ws", description="Path of the websocket endpoint")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

"""Schemas for the notification settings endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from .common import CamelModel, IsoDatetime, OperationResult


class NotificationTypesPatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    comment: bool | None = None
    like: bool | None = None
    follow: bool | None = None
    system: bool | None = None


class NotificationPreferencesPatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool | None = None
    sound: bool | None = None
    desktop: bool | None = None
    types: NotificationTypesPatch | None = None


class SettingsUpdate(BaseModel):
    """Partial settings document; omitted keys keep their current value."""

    model_config = ConfigDict(extra="ignore")

    notifications: NotificationPreferencesPatch

    def as_patch(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ImportedSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    notifications: NotificationPreferencesPatch


class SettingsImport(BaseModel):
    """Document previously produced by the export endpoint."""

    model_config = ConfigDict(extra="ignore")

    settings: ImportedSettings
    version: str | None = None


class SettingsResponse(CamelModel):
    settings: dict[str, Any]
    timestamp: IsoDatetime


class SettingsChangeResponse(OperationResult):
    settings: dict[str, Any]
    type: str | None = None
    enabled: bool | None = None
    sound_enabled: bool | None = None


__all__ = [
    "ImportedSettings",
    "NotificationPreferencesPatch",
    "NotificationTypesPatch",
    "SettingsChangeResponse",
    "SettingsImport",
    "SettingsResponse",
    "SettingsUpdate",
]

"""Domain entities describing the process-wide notification settings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from notifyhub.domain.exceptions import ValidationError
from notifyhub.utils import now_utc, parse_iso, to_iso

from .notification import NOTIFICATION_TYPES, ensure_notification_type


def _switch(patch: Mapping[str, Any], name: str, path: str) -> bool:
    value = patch[name]
    if not isinstance(value, bool):
        raise ValidationError(
            "Settings payload is invalid",
            details=[{"field": f"{path}.{name}", "message": "must be a boolean"}],
        )
    return value


@dataclass(frozen=True)
class NotificationTypeToggles:
    """Per-type switches; a type is delivered only when its switch is on."""

    comment: bool = True
    like: bool = False
    follow: bool = False
    system: bool = True

    def is_enabled(self, notification_type: str) -> bool:
        return bool(getattr(self, ensure_notification_type(notification_type)))

    def to_dict(self) -> dict[str, bool]:
        return {name: getattr(self, name) for name in NOTIFICATION_TYPES}

    def merged(self, patch: Mapping[str, Any]) -> "NotificationTypeToggles":
        changes = {
            name: _switch(patch, name, "notifications.types")
            for name in NOTIFICATION_TYPES
            if name in patch
        }
        return replace(self, **changes)


@dataclass(frozen=True)
class NotificationPreferences:
    """Master switch, presentation hints and per-type switches."""

    enabled: bool = True
    sound: bool = True
    desktop: bool = False
    types: NotificationTypeToggles = field(default_factory=NotificationTypeToggles)

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "sound": self.sound,
            "desktop": self.desktop,
            "types": self.types.to_dict(),
        }

    def merged(self, patch: Mapping[str, Any]) -> "NotificationPreferences":
        changes: dict[str, Any] = {
            name: _switch(patch, name, "notifications")
            for name in ("enabled", "sound", "desktop")
            if name in patch
        }
        types_patch = patch.get("types")
        if isinstance(types_patch, Mapping):
            changes["types"] = self.types.merged(types_patch)
        return replace(self, **changes)


@dataclass(frozen=True)
class NotificationSettings:
    """Single settings record shared by the whole process."""

    notifications: NotificationPreferences = field(default_factory=NotificationPreferences)
    last_updated: datetime = field(default_factory=now_utc)

    @classmethod
    def default(cls, when: datetime | None = None) -> "NotificationSettings":
        return cls(last_updated=when or now_utc())

    def allows(self, notification_type: str) -> bool:
        """Return ``True`` when both the master and the type switch are on."""

        return self.notifications.enabled and self.notifications.types.is_enabled(
            notification_type
        )

    def merged(self, patch: Mapping[str, Any], *, when: datetime) -> "NotificationSettings":
        """Deep-merge a partial camelCase document into a new record."""

        preferences = self.notifications
        notifications_patch = patch.get("notifications")
        if isinstance(notifications_patch, Mapping):
            preferences = preferences.merged(notifications_patch)
        return NotificationSettings(notifications=preferences, last_updated=when)

    def to_dict(self) -> dict[str, Any]:
        return {
            "notifications": self.notifications.to_dict(),
            "lastUpdated": to_iso(self.last_updated),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "NotificationSettings":
        base = cls.default(parse_iso(raw.get("lastUpdated")))
        return base.merged(raw, when=base.last_updated)


__all__ = [
    "NotificationTypeToggles",
    "NotificationPreferences",
    "NotificationSettings",
]

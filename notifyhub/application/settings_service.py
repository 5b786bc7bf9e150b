"""Use cases for reading and mutating the notification settings record."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Final, Protocol

import anyio

from notifyhub.domain.entities import NOTIFICATION_TYPES, NotificationSettings
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.notifications import EventType
from notifyhub.infrastructure.repositories import SettingsRepository
from notifyhub.infrastructure.storage import SCHEMA_VERSION
from notifyhub.utils import now_utc, to_iso

logger = logging.getLogger(__name__)

EXPORT_FORMAT_VERSION: Final[str] = "1.0.0"


class EventPublisher(Protocol):
    def publish(self, event_type: str, payload: Any) -> None: ...


class SettingsService:
    """Own the process-wide settings record.

    Every mutation is a deep merge (never a replace), stamps ``last_updated``,
    is persisted before the cached copy changes and is broadcast to every
    subscriber.
    """

    def __init__(
        self,
        repository: SettingsRepository,
        publisher: EventPublisher,
        *,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._repository = repository
        self._publisher = publisher
        self._clock = clock
        self._settings: NotificationSettings | None = None
        self._lock = anyio.Lock()

    async def initialize(self) -> NotificationSettings:
        """Load the stored settings, creating defaults on first run."""

        async with self._lock:
            if self._settings is None:
                stored = await self._repository.load()
                if stored is None:
                    logger.info("No settings document found; writing defaults")
                    stored = await self._repository.save(NotificationSettings.default(self._clock()))
                self._settings = stored
            return self._settings

    async def get_settings(self) -> NotificationSettings:
        if self._settings is None:
            return await self.initialize()
        return self._settings

    async def update_settings(self, patch: Mapping[str, Any]) -> NotificationSettings:
        """Deep-merge ``patch`` into the current settings."""

        if not isinstance(patch.get("notifications"), Mapping):
            raise ValidationError(
                "Settings payload is invalid",
                details=[{"field": "notifications", "message": "notifications object is required"}],
            )
        settings = await self._commit(lambda current, now: current.merged(patch, when=now))
        self._publisher.publish(EventType.SETTINGS_UPDATED, self._settings_payload(settings))
        return settings

    async def toggle_notifications(self) -> NotificationSettings:
        settings = await self._commit(
            lambda current, now: current.merged(
                {"notifications": {"enabled": not current.notifications.enabled}}, when=now
            )
        )
        logger.info("Notifications %s", "enabled" if settings.notifications.enabled else "disabled")
        self._publisher.publish(
            EventType.SETTINGS_TOGGLE,
            {"enabled": settings.notifications.enabled, "timestamp": to_iso(settings.last_updated)},
        )
        return settings

    async def toggle_sound(self) -> NotificationSettings:
        settings = await self._commit(
            lambda current, now: current.merged(
                {"notifications": {"sound": not current.notifications.sound}}, when=now
            )
        )
        self._publisher.publish(
            EventType.SETTINGS_SOUND_TOGGLE,
            {"soundEnabled": settings.notifications.sound, "timestamp": to_iso(settings.last_updated)},
        )
        return settings

    async def toggle_type(self, notification_type: str) -> NotificationSettings:
        if notification_type not in NOTIFICATION_TYPES:
            raise ValidationError(
                f"Invalid notification type. Valid types: {', '.join(NOTIFICATION_TYPES)}",
                details=[{"field": "type", "message": f"must be one of {', '.join(NOTIFICATION_TYPES)}"}],
            )

        def _toggle(current: NotificationSettings, now: datetime) -> NotificationSettings:
            enabled = current.notifications.types.is_enabled(notification_type)
            return current.merged(
                {"notifications": {"types": {notification_type: not enabled}}}, when=now
            )

        settings = await self._commit(_toggle)
        self._publisher.publish(
            EventType.SETTINGS_TYPE_TOGGLE,
            {
                "type": notification_type,
                "enabled": settings.notifications.types.is_enabled(notification_type),
                "timestamp": to_iso(settings.last_updated),
            },
        )
        return settings

    async def reset(self) -> NotificationSettings:
        settings = await self._commit(lambda _current, now: NotificationSettings.default(now))
        logger.info("Settings reset to defaults")
        self._publisher.publish(EventType.SETTINGS_RESET, self._settings_payload(settings))
        return settings

    async def export(self) -> dict[str, Any]:
        settings = await self.get_settings()
        return {
            "exportedAt": to_iso(self._clock()),
            "version": EXPORT_FORMAT_VERSION,
            "schemaVersion": SCHEMA_VERSION,
            "settings": settings.to_dict(),
        }

    async def import_settings(self, document: Mapping[str, Any]) -> NotificationSettings:
        """Merge an exported settings document into the current settings."""

        imported = document.get("settings") if isinstance(document, Mapping) else None
        if not isinstance(imported, Mapping) or not isinstance(imported.get("notifications"), Mapping):
            raise ValidationError(
                "Invalid settings file",
                details=[{"field": "settings.notifications", "message": "notifications object is required"}],
            )
        settings = await self._commit(lambda current, now: current.merged(imported, when=now))
        logger.info("Settings imported")
        self._publisher.publish(EventType.SETTINGS_IMPORTED, self._settings_payload(settings))
        return settings

    async def _commit(
        self, change: Callable[[NotificationSettings, datetime], NotificationSettings]
    ) -> NotificationSettings:
        current = await self.get_settings()
        async with self._lock:
            current = self._settings or current
            updated = change(current, self._clock())
            await self._repository.save(updated)
            self._settings = updated
        return updated

    @staticmethod
    def _settings_payload(settings: NotificationSettings) -> dict[str, Any]:
        return {"settings": settings.to_dict(), "timestamp": to_iso(settings.last_updated)}


__all__ = ["EventPublisher", "SettingsService", "EXPORT_FORMAT_VERSION"]

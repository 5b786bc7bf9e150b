"""Persistence helpers for the notification settings record."""

from __future__ import annotations

from notifyhub.domain.entities import NotificationSettings
from notifyhub.domain.exceptions import StorageCorruptError
from notifyhub.infrastructure.storage import Collection, JsonDocumentStore


class SettingsRepository:
    """Load and overwrite the single settings document."""

    def __init__(self, store: JsonDocumentStore) -> None:
        self.store = store

    async def load(self) -> NotificationSettings | None:
        """Return the stored settings or ``None`` when none were saved yet."""

        raw = await self.store.read(Collection.SETTINGS)
        if raw is None:
            return None
        try:
            return NotificationSettings.from_dict(raw)
        except (TypeError, ValueError) as exc:
            raise StorageCorruptError(f"Settings document is invalid: {exc}") from exc

    async def save(self, settings: NotificationSettings) -> NotificationSettings:
        async with self.store.lock(Collection.SETTINGS):
            await self.store.write(Collection.SETTINGS, settings.to_dict())
        return settings


__all__ = ["SettingsRepository"]

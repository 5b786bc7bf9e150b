"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import StorageCorruptError
from notifyhub.infrastructure.storage import Collection, JsonDocumentStore


class NotificationRepository:
    """Load and persist the full notification list as one document."""

    def __init__(self, store: JsonDocumentStore) -> None:
        self.store = store

    async def exists(self) -> bool:
        return await self.store.exists(Collection.NOTIFICATIONS)

    async def list_all(self) -> list[Notification]:
        raw = await self.store.read(Collection.NOTIFICATIONS)
        try:
            return [Notification.from_dict(entry) for entry in raw]
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"Notification document contains an invalid record: {exc}"
            raise StorageCorruptError(msg) from exc

    async def save_all(self, notifications: Sequence[Notification]) -> None:
        async with self.store.lock(Collection.NOTIFICATIONS):
            await self.store.write(
                Collection.NOTIFICATIONS,
                [notification.to_dict() for notification in notifications],
            )


__all__ = ["NotificationRepository"]

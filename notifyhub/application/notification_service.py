"""Notification engine: creation policy, read state and derived views."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from typing import Any, Final
from uuid import uuid4

import anyio

from notifyhub.domain.entities import (
    NOTIFICATION_TYPE_COMMENT,
    Comment,
    CommentNotificationData,
    Notification,
    NotificationData,
    NotificationStats,
    ensure_notification_type,
    parse_notification_data,
)
from notifyhub.infrastructure.notifications import EventType
from notifyhub.infrastructure.repositories import NotificationRepository
from notifyhub.utils import now_utc, to_iso

from .settings_service import EventPublisher, SettingsService

logger = logging.getLogger(__name__)

COMMENT_NOTIFICATION_TITLE: Final[str] = "New comment"
MESSAGE_EXCERPT_LENGTH: Final[int] = 50
PREVIEW_LENGTH: Final[int] = 100
DEFAULT_DAYS_TO_KEEP: Final[int] = 30


def excerpt(text: str, length: int = MESSAGE_EXCERPT_LENGTH) -> str:
    """Return the first ``length`` characters of ``text``, marking truncation."""

    if len(text) > length:
        return f"{text[:length]}..."
    return text


def comment_message(comment: Comment) -> str:
    """Return the human readable message announcing ``comment``."""

    return (
        f"{comment.commenter_name} commented on '{comment.post_title}': "
        f'"{excerpt(comment.content)}"'
    )


class NotificationService:
    """Create, mutate and query notifications.

    The service keeps an in-memory mirror of the persisted list ordered newest
    first. Mutations build the next list, persist it and only then swap the
    mirror, so a failed write leaves the mirror untouched. All mutations are
    serialized through a single lock.
    """

    def __init__(
        self,
        repository: NotificationRepository,
        settings: SettingsService,
        publisher: EventPublisher,
        *,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._repository = repository
        self._settings = settings
        self._publisher = publisher
        self._clock = clock
        self._notifications: list[Notification] = []
        self._initialized = False
        self._lock = anyio.Lock()

    async def initialize(self) -> None:
        """Load notifications and settings into memory. Safe to call repeatedly."""

        if self._initialized:
            return
        async with self._lock:
            if self._initialized:
                return
            self._notifications = await self._repository.list_all()
            await self._settings.initialize()
            self._initialized = True
        logger.info("Loaded %d notifications", len(self._notifications))

    async def close(self) -> None:
        """Flush the in-memory mirror to disk on shutdown."""

        if not self._initialized:
            return
        async with self._lock:
            await self._repository.save_all(self._notifications)
        logger.info("Flushed %d notifications", len(self._notifications))

    async def create_notification(
        self,
        notification_type: str,
        title: str,
        message: str,
        data: NotificationData | Mapping[str, Any] | None = None,
    ) -> Notification | None:
        """Create and broadcast a notification unless settings disable ``notification_type``.

        Returns ``None`` without persisting or broadcasting anything when either
        the master switch or the per-type switch is off.
        """

        ensure_notification_type(notification_type)
        payload = parse_notification_data(notification_type, data)
        await self.initialize()

        settings = await self._settings.get_settings()
        if not settings.allows(notification_type):
            logger.info("Notification disabled for type: %s", notification_type)
            return None

        notification = Notification(
            id=str(uuid4()),
            type=notification_type,
            title=title,
            message=message,
            data=payload,
            created_at=self._clock(),
        )
        async with self._lock:
            await self._commit([notification, *self._notifications])
            unread_count = self._count_unread()

        logger.info("Created notification %s - %s", notification.id, title)
        self._publisher.publish(EventType.NOTIFICATION_NEW, notification.to_dict())
        self._publish_count(unread_count)
        return notification

    async def create_comment_notification(self, comment: Comment) -> Notification | None:
        """Create the ``comment`` notification announcing ``comment``."""

        data = CommentNotificationData(
            comment_id=comment.id,
            post_title=comment.post_title,
            commenter_name=comment.commenter_name,
            comment_preview=comment.content[:PREVIEW_LENGTH],
        )
        return await self.create_notification(
            NOTIFICATION_TYPE_COMMENT, COMMENT_NOTIFICATION_TITLE, comment_message(comment), data
        )

    async def get_all_notifications(self, limit: int | None = None) -> list[Notification]:
        """Return notifications newest first, at most ``limit`` of them.

        Ties on ``created_at`` keep insertion order, newest insertion first.
        """

        await self.initialize()
        ordered = sorted(self._notifications, key=lambda item: item.created_at, reverse=True)
        if limit is not None:
            ordered = ordered[: max(limit, 0)]
        return ordered

    async def get_unread_notifications(self) -> list[Notification]:
        notifications = await self.get_all_notifications()
        return [notification for notification in notifications if not notification.is_read]

    async def get_unread_count(self) -> int:
        """Return the unread count; errors are logged and reported as ``0``."""

        try:
            return len(await self.get_unread_notifications())
        except Exception:
            logger.exception("Could not compute the unread notification count")
            return 0

    async def mark_as_read(self, notification_id: str) -> bool:
        """Mark one notification as read.

        Returns ``False`` for unknown ids. A notification that is already read
        is left untouched and nothing is broadcast.
        """

        await self.initialize()
        async with self._lock:
            current = self._find(notification_id)
            if current is None:
                logger.warning("Notification not found: %s", notification_id)
                return False
            if current.is_read:
                logger.debug("Notification already read: %s", notification_id)
                return True

            updated = current.mark_read(self._clock())
            await self._commit(
                [updated if item.id == notification_id else item for item in self._notifications]
            )
            unread_count = self._count_unread()

        logger.info("Marked as read: %s", notification_id)
        self._publisher.publish(
            EventType.NOTIFICATION_READ,
            {"notificationId": notification_id, "timestamp": to_iso(updated.read_at)},
        )
        self._publish_count(unread_count)
        return True

    async def mark_all_as_read(self) -> int:
        """Mark every unread notification as read and return how many changed."""

        await self.initialize()
        async with self._lock:
            now = self._clock()
            changed_count = sum(1 for item in self._notifications if not item.is_read)
            if changed_count == 0:
                return 0
            await self._commit(
                [item if item.is_read else item.mark_read(now) for item in self._notifications]
            )

        logger.info("Marked %d notifications as read", changed_count)
        self._publisher.publish(
            EventType.ALL_READ, {"changedCount": changed_count, "timestamp": to_iso(now)}
        )
        self._publish_count(0)
        return changed_count

    async def delete_notification(self, notification_id: str) -> bool:
        await self.initialize()
        async with self._lock:
            remaining = [item for item in self._notifications if item.id != notification_id]
            if len(remaining) == len(self._notifications):
                return False
            await self._commit(remaining)
            unread_count = self._count_unread()

        logger.info("Deleted notification: %s", notification_id)
        self._publisher.publish(
            EventType.NOTIFICATION_DELETED,
            {"notificationId": notification_id, "timestamp": to_iso(self._clock())},
        )
        self._publish_count(unread_count)
        return True

    async def cleanup_old_notifications(self, days_to_keep: int = DEFAULT_DAYS_TO_KEEP) -> int:
        """Remove notifications created more than ``days_to_keep`` days ago.

        A notification exactly ``days_to_keep`` days old is kept.
        """

        await self.initialize()
        cutoff = self._clock() - timedelta(days=days_to_keep)
        async with self._lock:
            unread_before = self._count_unread()
            kept = [item for item in self._notifications if item.created_at >= cutoff]
            removed_count = len(self._notifications) - len(kept)
            if removed_count == 0:
                return 0
            await self._commit(kept)
            unread_after = self._count_unread()

        logger.info("Cleaned up %d old notifications", removed_count)
        if unread_after != unread_before:
            self._publish_count(unread_after)
        return removed_count

    async def get_notification_stats(self) -> NotificationStats:
        notifications = await self.get_all_notifications()
        unread = sum(1 for item in notifications if not item.is_read)
        one_day_ago = self._clock() - timedelta(hours=24)
        return NotificationStats(
            total=len(notifications),
            read=len(notifications) - unread,
            unread=unread,
            type_stats=dict(Counter(item.type for item in notifications)),
            recent_24h=sum(1 for item in notifications if item.created_at > one_day_ago),
            last_notification_at=notifications[0].created_at if notifications else None,
        )

    async def seed(self, notifications: list[Notification]) -> None:
        """Replace the stored list with ``notifications`` (first-run sample data)."""

        async with self._lock:
            await self._commit(list(notifications))
            self._initialized = True

    async def _commit(self, notifications: list[Notification]) -> None:
        await self._repository.save_all(notifications)
        self._notifications = notifications

    def _find(self, notification_id: str) -> Notification | None:
        for notification in self._notifications:
            if notification.id == notification_id:
                return notification
        return None

    def _count_unread(self) -> int:
        return sum(1 for item in self._notifications if not item.is_read)

    def _publish_count(self, unread_count: int) -> None:
        self._publisher.publish(
            EventType.COUNT_UPDATED,
            {"unreadCount": unread_count, "timestamp": to_iso(self._clock())},
        )


__all__ = [
    "NotificationService",
    "COMMENT_NOTIFICATION_TITLE",
    "DEFAULT_DAYS_TO_KEEP",
    "comment_message",
    "excerpt",
]

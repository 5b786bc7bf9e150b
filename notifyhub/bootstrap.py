"""Wire the store, repositories, broadcast layer and services together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from notifyhub.application.comment_service import CommentService
from notifyhub.application.notification_service import (
    COMMENT_NOTIFICATION_TITLE,
    NotificationService,
    comment_message,
)
from notifyhub.application.settings_service import SettingsService
from notifyhub.config import Settings
from notifyhub.domain.entities import (
    NOTIFICATION_TYPE_COMMENT,
    Comment,
    CommentNotificationData,
    Notification,
)
from notifyhub.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationEventPublisher,
)
from notifyhub.infrastructure.repositories import (
    CommentRepository,
    NotificationRepository,
    SettingsRepository,
)
from notifyhub.infrastructure.storage import JsonDocumentStore
from notifyhub.utils import now_utc

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Process-wide service graph stored on ``app.state``."""

    settings: Settings
    store: JsonDocumentStore
    manager: NotificationConnectionManager
    publisher: NotificationEventPublisher
    notification_repository: NotificationRepository
    comment_repository: CommentRepository
    settings_service: SettingsService
    notification_service: NotificationService
    comment_service: CommentService
    started_at: datetime = field(default_factory=now_utc)

    async def startup(self) -> None:
        if self.settings.seed_sample_data:
            await seed_sample_data(self)
        await self.settings_service.initialize()
        await self.notification_service.initialize()

    async def shutdown(self) -> None:
        await self.comment_service.wait_background()
        await self.publisher.drain()
        await self.notification_service.close()


def build_container(settings: Settings) -> Container:
    """Create every collaborator for ``settings`` without touching the disk."""

    store = JsonDocumentStore(settings.data_dir)
    manager = NotificationConnectionManager()
    publisher = NotificationEventPublisher(manager)
    notification_repository = NotificationRepository(store)
    comment_repository = CommentRepository(store)
    settings_service = SettingsService(SettingsRepository(store), publisher)
    notification_service = NotificationService(notification_repository, settings_service, publisher)
    comment_service = CommentService(comment_repository, notification_service, publisher)
    return Container(
        settings=settings,
        store=store,
        manager=manager,
        publisher=publisher,
        notification_repository=notification_repository,
        comment_repository=comment_repository,
        settings_service=settings_service,
        notification_service=notification_service,
        comment_service=comment_service,
    )


def sample_comments() -> list[Comment]:
    now = now_utc()
    return [
        Comment(
            id="comment-1",
            post_title="Mastering React hooks",
            commenter_name="Kim Dev",
            commenter_email="kimdev@example.com",
            content="Really useful post! Hook usage finally makes sense to me.",
            created_at=now,
        ),
        Comment(
            id="comment-2",
            post_title="TypeScript in practice",
            commenter_name="Lee Type",
            commenter_email="letype@example.com",
            content="The type definitions helped a lot. Thank you!",
            created_at=now - timedelta(minutes=1),
        ),
    ]


def sample_notifications(comments: list[Comment]) -> list[Notification]:
    notifications = []
    for index, comment in enumerate(comments, start=1):
        notifications.append(
            Notification(
                id=f"notification-{index}",
                type=NOTIFICATION_TYPE_COMMENT,
                title=COMMENT_NOTIFICATION_TITLE,
                message=comment_message(comment),
                data=CommentNotificationData(
                    comment_id=comment.id,
                    post_title=comment.post_title,
                    commenter_name=comment.commenter_name,
                    comment_preview=comment.content,
                ),
                created_at=comment.created_at,
                is_read=index > 1,
                read_at=comment.created_at if index > 1 else None,
            )
        )
    return notifications


async def seed_sample_data(container: Container) -> None:
    """Populate the comment and notification documents when they do not exist yet."""

    samples = sample_comments()
    if not await container.comment_repository.exists():
        logger.info("Creating comments document with sample data")
        await container.comment_repository.save_all(samples)

    if not await container.notification_repository.exists():
        logger.info("Creating notifications document with sample data")
        await container.notification_service.seed(sample_notifications(samples))


__all__ = ["Container", "build_container", "seed_sample_data"]

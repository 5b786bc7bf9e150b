"""Use cases for comments and the notifications they trigger."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Final

import anyio

from notifyhub.domain.entities import Comment, Notification
from notifyhub.infrastructure.notifications import EventType
from notifyhub.infrastructure.repositories import CommentRepository
from notifyhub.utils import now_utc

from .notification_service import NotificationService
from .settings_service import EventPublisher

logger = logging.getLogger(__name__)

DEFAULT_COMMENT_LIMIT: Final[int] = 20

SAMPLE_COMMENTS: Final[tuple[dict[str, str], ...]] = (
    {
        "post_title": "Mastering React hooks",
        "commenter_name": "Kim React",
        "commenter_email": "kimreact@example.com",
        "content": "So that is how useState and useEffect fit together! Really helpful.",
    },
    {
        "post_title": "Typing with TypeScript",
        "commenter_name": "Lee Type",
        "commenter_email": "letype@example.com",
        "content": "Thanks for explaining the difference between interface and type so clearly!",
    },
    {
        "post_title": "Asynchronous Node.js",
        "commenter_name": "Park Node",
        "commenter_email": "parknode@example.com",
        "content": "The async/await pattern reads much better than chained Promise.then calls.",
    },
)


class CommentService:
    """Persist comments and announce them through the notification engine."""

    def __init__(
        self,
        repository: CommentRepository,
        notifications: NotificationService,
        publisher: EventPublisher,
        *,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._repository = repository
        self._notifications = notifications
        self._publisher = publisher
        self._clock = clock
        self._background: set[asyncio.Task[None]] = set()

    async def create_comment(
        self,
        post_title: str,
        commenter_name: str,
        content: str,
        commenter_email: str | None = None,
    ) -> tuple[Comment, Notification | None]:
        """Store a new comment and create its notification.

        The notification is ``None`` when comment notifications are disabled.
        """

        comment = await self._repository.add(
            lambda comment_id: Comment(
                id=comment_id,
                post_title=post_title,
                commenter_name=commenter_name,
                commenter_email=commenter_email,
                content=content,
                created_at=self._clock(),
            )
        )
        logger.info("Comment %s created by %s", comment.id, commenter_name)

        notification = await self._notifications.create_comment_notification(comment)
        self._publisher.publish(EventType.COMMENT_NEW, comment.to_dict())
        return comment, notification

    async def list_comments(self, limit: int = DEFAULT_COMMENT_LIMIT) -> tuple[list[Comment], int]:
        """Return up to ``limit`` comments, newest first, and the total count."""

        comments = await self._repository.list_all()
        ordered = sorted(comments, key=lambda item: item.created_at, reverse=True)
        return ordered[: max(limit, 0)], len(comments)

    async def get_comment(self, comment_id: str) -> Comment | None:
        return await self._repository.get(comment_id)

    async def delete_comment(self, comment_id: str) -> Comment | None:
        removed = await self._repository.delete(comment_id)
        if removed is None:
            return None
        logger.info("Comment %s deleted", comment_id)
        self._publisher.publish(EventType.COMMENT_DELETED, removed.to_dict())
        return removed

    async def create_sample_comments(self, interval: float) -> list[Comment]:
        """Create the demo comments now and notify about them ``interval`` seconds apart.

        The notifications are generated by a background task so the caller
        returns as soon as the comments are stored.
        """

        comments = await self._repository.add_many(
            [self._sample_builder(**sample) for sample in SAMPLE_COMMENTS]
        )
        task = asyncio.get_running_loop().create_task(self._notify_in_sequence(comments, interval))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        logger.info("Created %d sample comments", len(comments))
        return comments

    async def wait_background(self) -> None:
        """Wait until the pending sample notifications have been generated."""

        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _sample_builder(
        self, post_title: str, commenter_name: str, commenter_email: str, content: str
    ) -> Callable[[str], Comment]:
        def build(comment_id: str) -> Comment:
            return Comment(
                id=comment_id,
                post_title=post_title,
                commenter_name=commenter_name,
                commenter_email=commenter_email,
                content=content,
                created_at=self._clock(),
            )

        return build

    async def _notify_in_sequence(self, comments: list[Comment], interval: float) -> None:
        for index, comment in enumerate(comments):
            if index and interval > 0:
                await anyio.sleep(interval)
            try:
                await self._notifications.create_comment_notification(comment)
            except Exception:
                logger.exception("Could not notify about sample comment %s", comment.id)
                continue
            self._publisher.publish(EventType.COMMENT_NEW, comment.to_dict())


__all__ = ["CommentService", "DEFAULT_COMMENT_LIMIT", "SAMPLE_COMMENTS"]

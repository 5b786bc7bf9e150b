"""Tests for the comment flow."""

from __future__ import annotations

import anyio
import pytest

from notifyhub.application.comment_service import SAMPLE_COMMENTS
from notifyhub.infrastructure.notifications import EventType
from notifyhub.infrastructure.repositories import CommentRepository, NotificationRepository

pytestmark = pytest.mark.anyio


async def test_create_comment_triggers_notification(comment_service, publisher) -> None:
    comment, notification = await comment_service.create_comment(
        post_title="Realtime apps",
        commenter_name="Kim",
        content="Hello world",
        commenter_email="kim@example.com",
    )

    assert comment.id == "comment-1"
    assert notification is not None
    assert notification.data.comment_id == comment.id
    assert publisher.types == [
        EventType.NOTIFICATION_NEW,
        EventType.COUNT_UPDATED,
        EventType.COMMENT_NEW,
    ]
    assert publisher.payloads(EventType.COMMENT_NEW)[0]["commenterEmail"] == "kim@example.com"


async def test_comment_is_stored_when_notifications_are_disabled(
    comment_service, settings_service, publisher
) -> None:
    await settings_service.toggle_type("comment")
    publisher.clear()

    comment, notification = await comment_service.create_comment("Post", "Kim", "Hi")

    assert notification is None
    assert await comment_service.get_comment(comment.id) == comment
    assert publisher.types == [EventType.COMMENT_NEW]


async def test_list_comments_newest_first_with_total(comment_service, clock) -> None:
    for index in range(3):
        await comment_service.create_comment("Post", f"user{index}", f"comment {index}")
        clock.advance(minutes=1)

    comments, total = await comment_service.list_comments(limit=2)

    assert total == 3
    assert [comment.commenter_name for comment in comments] == ["user2", "user1"]


async def test_delete_comment_broadcasts_removed_comment(comment_service, publisher) -> None:
    comment, _ = await comment_service.create_comment("Post", "Kim", "Bye")
    publisher.clear()

    removed = await comment_service.delete_comment(comment.id)

    assert removed == comment
    assert await comment_service.delete_comment(comment.id) is None
    assert publisher.payloads(EventType.COMMENT_DELETED) == [comment.to_dict()]


async def test_sample_comments_are_notified_in_sequence(
    comment_service, notification_service
) -> None:
    comments = await comment_service.create_sample_comments(interval=0)
    await comment_service.wait_background()

    assert [comment.id for comment in comments] == ["comment-1", "comment-2", "comment-3"]
    assert len(comments) == len(SAMPLE_COMMENTS)
    notifications = await notification_service.get_all_notifications()
    assert {item.data.comment_id for item in notifications} == {comment.id for comment in comments}


async def test_concurrent_comments_get_distinct_ids_and_notifications(
    comment_service, notification_service, store
) -> None:
    async def create(index: int) -> None:
        await comment_service.create_comment(f"Post {index}", f"Reader {index}", "Great read")

    async with anyio.create_task_group() as tg:
        for index in range(20):
            tg.start_soon(create, index)

    expected_ids = {f"comment-{n}" for n in range(1, 21)}
    comments, total = await comment_service.list_comments(limit=50)
    assert total == 20
    assert {comment.id for comment in comments} == expected_ids
    assert len(await notification_service.get_all_notifications(50)) == 20

    stored_comments = await CommentRepository(store).list_all()
    stored_notifications = await NotificationRepository(store).list_all()
    assert {comment.id for comment in stored_comments} == expected_ids
    assert len(stored_notifications) == 20
    assert {item.data.comment_id for item in stored_notifications} == expected_ids

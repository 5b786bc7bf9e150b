"""Tests for the websocket room and the event publisher."""

from __future__ import annotations

import pytest
from anyio import to_thread

from notifyhub.infrastructure.notifications import (
    EventType,
    NotificationConnectionManager,
    NotificationEventPublisher,
    build_message,
)

pytestmark = pytest.mark.anyio


class FakeSocket:
    def __init__(self, *, fail: bool = False) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self.fail = fail

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


def test_build_message_copies_payload() -> None:
    payload = {"notificationId": "n-1"}
    message = build_message(EventType.NOTIFICATION_READ, payload)
    payload["notificationId"] = "changed"

    assert message == {"type": "notification:read", "payload": {"notificationId": "n-1"}}


async def test_connect_accepts_and_joins_room() -> None:
    manager = NotificationConnectionManager()
    socket = FakeSocket()

    await manager.connect(socket)

    assert socket.accepted is True
    assert manager.connection_count == 1
    manager.disconnect(socket)
    manager.disconnect(socket)
    assert manager.connection_count == 0


async def test_broadcast_reaches_every_subscriber_and_drops_failures() -> None:
    manager = NotificationConnectionManager()
    healthy, other, broken = FakeSocket(), FakeSocket(), FakeSocket(fail=True)
    for socket in (healthy, other, broken):
        await manager.connect(socket)

    await manager.broadcast(build_message(EventType.COUNT_UPDATED, {"unreadCount": 3}))

    assert healthy.sent == other.sent == [
        {"type": "notifications:count_updated", "payload": {"unreadCount": 3}}
    ]
    assert manager.connection_count == 2


async def test_publisher_schedules_without_waiting() -> None:
    manager = NotificationConnectionManager()
    socket = FakeSocket()
    await manager.connect(socket)
    publisher = NotificationEventPublisher(manager)

    publisher.publish(EventType.NOTIFICATION_DELETED, {"notificationId": "n-1"})
    assert socket.sent == []

    await publisher.drain()
    assert socket.sent == [
        {"type": "notification:deleted", "payload": {"notificationId": "n-1"}}
    ]


async def test_publish_without_subscribers_is_a_no_op() -> None:
    publisher = NotificationEventPublisher(NotificationConnectionManager())

    publisher.publish(EventType.SETTINGS_RESET, {"settings": {}})
    await publisher.drain()


async def test_publish_from_worker_thread_schedules_on_the_loop() -> None:
    manager = NotificationConnectionManager()
    socket = FakeSocket()
    await manager.connect(socket)
    publisher = NotificationEventPublisher(manager)

    await to_thread.run_sync(
        publisher.publish, EventType.NOTIFICATION_DELETED, {"notificationId": "n-2"}
    )

    await publisher.drain()
    assert socket.sent == [
        {"type": "notification:deleted", "payload": {"notificationId": "n-2"}}
    ]

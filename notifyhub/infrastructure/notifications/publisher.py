"""Utility helpers to push lifecycle events to websocket subscribers."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Final

from anyio import from_thread

from .manager import NotificationConnectionManager

logger = logging.getLogger(__name__)


class EventType:
    """Names of the messages exchanged over the notification channel."""

    NOTIFICATION_NEW: Final[str] = "notification:new"
    NOTIFICATION_READ: Final[str] = "notification:read"
    NOTIFICATION_DELETED: Final[str] = "notification:deleted"
    ALL_READ: Final[str] = "notifications:all_read"
    COUNT_UPDATED: Final[str] = "notifications:count_updated"
    SNAPSHOT: Final[str] = "notifications:snapshot"
    SETTINGS_UPDATED: Final[str] = "settings:updated"
    SETTINGS_TOGGLE: Final[str] = "settings:toggle"
    SETTINGS_SOUND_TOGGLE: Final[str] = "settings:sound_toggle"
    SETTINGS_TYPE_TOGGLE: Final[str] = "settings:type_toggle"
    SETTINGS_RESET: Final[str] = "settings:reset"
    SETTINGS_IMPORTED: Final[str] = "settings:imported"
    COMMENT_NEW: Final[str] = "comment:new"
    COMMENT_DELETED: Final[str] = "comment:deleted"
    CONNECTION_STATUS: Final[str] = "connection:status"
    PONG: Final[str] = "pong"

    # Inbound messages understood by the websocket endpoint.
    PING: Final[str] = "ping"
    MARK_READ: Final[str] = "notification:mark_read"
    MARK_ALL_READ: Final[str] = "notifications:mark_all_read"


def build_message(event_type: str, payload: Any) -> dict[str, Any]:
    """Return the ``{type, payload}`` envelope used on the wire."""

    return {"type": event_type, "payload": copy.deepcopy(payload)}


class NotificationEventPublisher:
    """Serialize events and schedule their fan-out without awaiting delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task[None]] = set()

    def publish(self, event_type: str, payload: Any) -> None:
        """Schedule ``event_type`` to be delivered to every subscriber."""

        message = build_message(event_type, payload)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Worker thread: hop onto the event loop only to schedule the task.
            from_thread.run_sync(self._schedule, message)
        else:
            self._schedule(message)

    def _schedule(self, message: dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(self._manager.broadcast(message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for broadcasts that are still in flight."""

        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


__all__ = [
    "EventType",
    "NotificationEventPublisher",
    "build_message",
]

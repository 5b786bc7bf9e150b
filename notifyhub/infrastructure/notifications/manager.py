"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from typing import Any, Protocol, Set


logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """Minimal websocket surface needed to deliver broadcast messages."""

    async def accept(self) -> None: ...

    async def send_json(self, data: Any) -> None: ...


class NotificationConnectionManager:
    """Manage the active websocket connections of the shared notification room."""

    def __init__(self) -> None:
        self._connections: Set[Subscriber] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: Subscriber) -> None:
        """Accept the websocket connection and add it to the room."""

        await websocket.accept()
        self._connections.add(websocket)
        logger.info("Websocket subscriber connected (%d active)", self.connection_count)

    def disconnect(self, websocket: Subscriber) -> None:
        """Remove ``websocket`` from the room."""

        if websocket in self._connections:
            self._connections.discard(websocket)
            logger.info("Websocket subscriber disconnected (%d active)", self.connection_count)

    async def send(self, websocket: Subscriber, message: dict[str, Any]) -> None:
        """Send ``message`` to a single subscriber."""

        await websocket.send_json(message)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection in the room.

        Connections that fail to receive the message are dropped from the room.
        """

        connections = list(self._connections)
        logger.debug("Broadcasting %s to %d subscribers", message.get("type"), len(connections))
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception as exc:
                logger.warning("Dropping subscriber after failed send: %s", exc)
                self.disconnect(connection)


__all__ = ["NotificationConnectionManager", "Subscriber"]

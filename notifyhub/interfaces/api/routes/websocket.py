"""Websocket endpoint streaming notification events to every subscriber."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect, status

from notifyhub.bootstrap import Container
from notifyhub.infrastructure.notifications import EventType, build_message
from notifyhub.utils import now_utc, to_iso

logger = logging.getLogger(__name__)

CONNECTED = "connected"


async def _send_snapshot(websocket: WebSocket, container: Container) -> None:
    service = container.notification_service
    notifications = await service.get_all_notifications(container.settings.notifications_page_size)
    await container.manager.send(
        websocket,
        build_message(
            EventType.SNAPSHOT,
            {
                "notifications": [notification.to_dict() for notification in notifications],
                "unreadCount": await service.get_unread_count(),
            },
        ),
    )


async def _handle_message(websocket: WebSocket, container: Container, message: Any) -> None:
    if not isinstance(message, dict):
        logger.debug("Ignoring websocket message that is not an object")
        return

    message_type = message.get("type")
    payload = message.get("payload")
    service = container.notification_service

    if message_type == EventType.PING:
        await container.manager.send(
            websocket, build_message(EventType.PONG, {"timestamp": to_iso(now_utc())})
        )
    elif message_type == EventType.MARK_READ:
        notification_id = payload.get("notificationId") if isinstance(payload, dict) else payload
        if isinstance(notification_id, str) and notification_id:
            await service.mark_as_read(notification_id)
        else:
            logger.debug("Ignoring mark_read without a notification id")
    elif message_type == EventType.MARK_ALL_READ:
        await service.mark_all_as_read()
    else:
        logger.debug("Ignoring unknown websocket message type: %r", message_type)


async def notifications_websocket(websocket: WebSocket) -> None:
    """Join the shared room and relay inbound commands to the notification engine."""

    container: Container | None = getattr(websocket.app.state, "container", None)
    if container is None:
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    manager = container.manager
    await manager.connect(websocket)
    try:
        await manager.send(websocket, build_message(EventType.CONNECTION_STATUS, CONNECTED))
        await _send_snapshot(websocket, container)
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            text = frame.get("text")
            if text is None:
                logger.debug("Ignoring binary websocket frame")
                continue
            try:
                message = json.loads(text)
            except ValueError:
                logger.warning("Dropping unparseable websocket message")
                continue
            try:
                await _handle_message(websocket, container, message)
            except Exception:
                logger.exception("Could not process websocket message %r", message.get("type"))
    except WebSocketDisconnect:
        logger.debug("Websocket subscriber went away")
    finally:
        manager.disconnect(websocket)


__all__ = ["notifications_websocket"]

"""Client side of the notification channel."""

from .clock import Clock, LoopClock, ManualClock
from .connection import ConnectionStatus, NotificationClient
from .transport import (
    SYNCED_EVENT,
    AiohttpWebSocketTransport,
    HttpReconciler,
    WebSocketTransport,
)

__all__ = [
    "AiohttpWebSocketTransport",
    "Clock",
    "ConnectionStatus",
    "HttpReconciler",
    "LoopClock",
    "ManualClock",
    "NotificationClient",
    "SYNCED_EVENT",
    "WebSocketTransport",
]

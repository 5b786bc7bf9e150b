"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, Subscriber
from .publisher import EventType, NotificationEventPublisher, build_message

__all__ = [
    "EventType",
    "NotificationConnectionManager",
    "NotificationEventPublisher",
    "Subscriber",
    "build_message",
]

"""Pydantic models describing notification payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from notifyhub.domain.entities import Notification, NotificationStats

from .common import CamelModel, IsoDatetime, OperationResult, TimestampedResponse

NotificationType = Literal["comment", "like", "follow", "system"]


class NotificationRead(CamelModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    created_at: IsoDatetime
    read_at: IsoDatetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            data=notification.data.to_dict(),
            is_read=notification.is_read,
            created_at=notification.created_at,
            read_at=notification.read_at,
        )


class NotificationListResponse(TimestampedResponse):
    notifications: list[NotificationRead]
    unread_count: int
    total: int


class MarkReadResponse(OperationResult):
    unread_count: int


class MarkAllReadResponse(OperationResult):
    changed_count: int
    unread_count: int = 0


class NotificationStatsResponse(TimestampedResponse):
    total: int
    read: int
    unread: int
    type_stats: dict[str, int]
    recent_24h: int
    last_notification_at: IsoDatetime | None = None

    @classmethod
    def from_stats(cls, stats: NotificationStats) -> "NotificationStatsResponse":
        return cls(
            total=stats.total,
            read=stats.read,
            unread=stats.unread,
            type_stats=stats.type_stats,
            recent_24h=stats.recent_24h,
            last_notification_at=stats.last_notification_at,
        )


class NotificationTestRequest(CamelModel):
    """Payload accepted by the test notification endpoint."""

    type: NotificationType = "system"
    title: str | None = Field(default=None, min_length=1, max_length=100)
    message: str | None = Field(default=None, min_length=1, max_length=500)


class NotificationTestResponse(OperationResult):
    notification: NotificationRead


class CleanupResponse(OperationResult):
    removed_count: int
    days_kept: int


__all__ = [
    "CleanupResponse",
    "MarkAllReadResponse",
    "MarkReadResponse",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationStatsResponse",
    "NotificationType",
    "NotificationTestRequest",
    "NotificationTestResponse",
]

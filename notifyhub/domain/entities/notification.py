"""Domain entities representing notifications and their typed payloads."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Final, Union

from notifyhub.domain.exceptions import ValidationError
from notifyhub.utils import parse_iso, to_iso

NOTIFICATION_TYPE_COMMENT: Final[str] = "comment"
NOTIFICATION_TYPE_LIKE: Final[str] = "like"
NOTIFICATION_TYPE_FOLLOW: Final[str] = "follow"
NOTIFICATION_TYPE_SYSTEM: Final[str] = "system"

NOTIFICATION_TYPES: Final[tuple[str, ...]] = (
    NOTIFICATION_TYPE_COMMENT,
    NOTIFICATION_TYPE_LIKE,
    NOTIFICATION_TYPE_FOLLOW,
    NOTIFICATION_TYPE_SYSTEM,
)


def ensure_notification_type(value: str) -> str:
    """Return ``value`` when it names a known notification type."""

    if value not in NOTIFICATION_TYPES:
        raise ValidationError(
            f"Unknown notification type '{value}'. Valid types: {', '.join(NOTIFICATION_TYPES)}",
            details=[{"field": "type", "message": f"must be one of {', '.join(NOTIFICATION_TYPES)}"}],
        )
    return value


@dataclass(frozen=True)
class CommentNotificationData:
    """Context attached to notifications generated by a new comment."""

    comment_id: str
    post_title: str
    commenter_name: str
    comment_preview: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "commentId": self.comment_id,
            "postTitle": self.post_title,
            "commenterName": self.commenter_name,
            "commentPreview": self.comment_preview,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CommentNotificationData":
        return cls(
            comment_id=str(raw.get("commentId") or ""),
            post_title=str(raw.get("postTitle") or ""),
            commenter_name=str(raw.get("commenterName") or ""),
            comment_preview=str(raw.get("commentPreview") or ""),
        )


@dataclass(frozen=True)
class LikeNotificationData:
    """Context attached to notifications generated by a like."""

    post_title: str | None = None
    liker_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"postTitle": self.post_title, "likerName": self.liker_name}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "LikeNotificationData":
        return cls(post_title=raw.get("postTitle"), liker_name=raw.get("likerName"))


@dataclass(frozen=True)
class FollowNotificationData:
    """Context attached to notifications generated by a new follower."""

    follower_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"followerName": self.follower_name}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "FollowNotificationData":
        return cls(follower_name=raw.get("followerName"))


@dataclass(frozen=True)
class SystemNotificationData:
    """Context attached to system notifications.

    ``details`` keeps any additional keys so operator-provided context survives
    a round trip through the JSON document.
    """

    is_test: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {**self.details, "isTest": self.is_test}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SystemNotificationData":
        details = {key: value for key, value in raw.items() if key != "isTest"}
        return cls(is_test=bool(raw.get("isTest", False)), details=details)


NotificationData = Union[
    CommentNotificationData,
    LikeNotificationData,
    FollowNotificationData,
    SystemNotificationData,
]

_DATA_TYPES: Final[dict[str, type]] = {
    NOTIFICATION_TYPE_COMMENT: CommentNotificationData,
    NOTIFICATION_TYPE_LIKE: LikeNotificationData,
    NOTIFICATION_TYPE_FOLLOW: FollowNotificationData,
    NOTIFICATION_TYPE_SYSTEM: SystemNotificationData,
}


def parse_notification_data(
    notification_type: str, raw: NotificationData | Mapping[str, Any] | None
) -> NotificationData:
    """Return the payload variant matching ``notification_type``."""

    data_type = _DATA_TYPES[ensure_notification_type(notification_type)]
    if isinstance(raw, data_type):
        return raw
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        msg = f"Payload for '{notification_type}' notifications must be an object"
        raise ValidationError(msg, details=[{"field": "data", "message": msg}])
    return data_type.from_dict(raw)


@dataclass
class Notification:
    """Information message broadcast to every connected subscriber."""

    id: str
    type: str
    title: str
    message: str
    data: NotificationData
    created_at: datetime
    is_read: bool = False
    read_at: datetime | None = None

    def mark_read(self, when: datetime) -> "Notification":
        """Return a read copy of this notification stamped with ``when``."""

        return replace(self, is_read=True, read_at=when)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "data": self.data.to_dict(),
            "isRead": self.is_read,
            "createdAt": to_iso(self.created_at),
        }
        if self.read_at is not None:
            payload["readAt"] = to_iso(self.read_at)
        return payload

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Notification":
        notification_type = str(raw["type"])
        created_at = parse_iso(raw.get("createdAt"))
        if created_at is None:
            raise ValueError(f"Notification {raw.get('id')!r} has no createdAt")
        return cls(
            id=str(raw["id"]),
            type=notification_type,
            title=str(raw.get("title", "")),
            message=str(raw.get("message", "")),
            data=parse_notification_data(notification_type, raw.get("data")),
            created_at=created_at,
            is_read=bool(raw.get("isRead", False)),
            read_at=parse_iso(raw.get("readAt")),
        )


@dataclass(frozen=True)
class NotificationStats:
    """Aggregated view over the notification list."""

    total: int
    read: int
    unread: int
    type_stats: dict[str, int]
    recent_24h: int
    last_notification_at: datetime | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "read": self.read,
            "unread": self.unread,
            "typeStats": dict(self.type_stats),
            "recent24h": self.recent_24h,
            "lastNotificationAt": to_iso(self.last_notification_at),
        }


__all__ = [
    "NOTIFICATION_TYPE_COMMENT",
    "NOTIFICATION_TYPE_LIKE",
    "NOTIFICATION_TYPE_FOLLOW",
    "NOTIFICATION_TYPE_SYSTEM",
    "NOTIFICATION_TYPES",
    "CommentNotificationData",
    "LikeNotificationData",
    "FollowNotificationData",
    "SystemNotificationData",
    "NotificationData",
    "Notification",
    "NotificationStats",
    "ensure_notification_type",
    "parse_notification_data",
]

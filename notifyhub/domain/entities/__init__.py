"""Domain entities exposed by the application."""

from .comment import Comment
from .notification import (
    NOTIFICATION_TYPE_COMMENT,
    NOTIFICATION_TYPE_FOLLOW,
    NOTIFICATION_TYPE_LIKE,
    NOTIFICATION_TYPE_SYSTEM,
    NOTIFICATION_TYPES,
    CommentNotificationData,
    FollowNotificationData,
    LikeNotificationData,
    Notification,
    NotificationData,
    NotificationStats,
    SystemNotificationData,
    ensure_notification_type,
    parse_notification_data,
)
from .settings import NotificationPreferences, NotificationSettings, NotificationTypeToggles

__all__ = [
    "Comment",
    "Notification",
    "NotificationData",
    "NotificationStats",
    "CommentNotificationData",
    "LikeNotificationData",
    "FollowNotificationData",
    "SystemNotificationData",
    "NOTIFICATION_TYPE_COMMENT",
    "NOTIFICATION_TYPE_LIKE",
    "NOTIFICATION_TYPE_FOLLOW",
    "NOTIFICATION_TYPE_SYSTEM",
    "NOTIFICATION_TYPES",
    "NotificationPreferences",
    "NotificationSettings",
    "NotificationTypeToggles",
    "ensure_notification_type",
    "parse_notification_data",
]

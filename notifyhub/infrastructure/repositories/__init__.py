"""Repository implementations for infrastructure layer."""

from .comment_repository import CommentRepository, next_comment_id
from .notification_repository import NotificationRepository
from .settings_repository import SettingsRepository

__all__ = [
    "CommentRepository",
    "NotificationRepository",
    "SettingsRepository",
    "next_comment_id",
]

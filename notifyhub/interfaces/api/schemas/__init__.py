from .comment import (
    BulkCommentResponse,
    CommentCreate,
    CommentCreateResponse,
    CommentDeleteResponse,
    CommentDetailResponse,
    CommentListResponse,
    CommentRead,
    CreatedNotificationSummary,
)
from .common import (
    CamelModel,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    IsoDatetime,
    OperationResult,
    TimestampedResponse,
)
from .notification import (
    CleanupResponse,
    MarkAllReadResponse,
    MarkReadResponse,
    NotificationListResponse,
    NotificationRead,
    NotificationStatsResponse,
    NotificationTestRequest,
    NotificationTestResponse,
    NotificationType,
)
from .settings import (
    ImportedSettings,
    SettingsChangeResponse,
    SettingsImport,
    SettingsResponse,
    SettingsUpdate,
)

__all__ = [
    "BulkCommentResponse",
    "CamelModel",
    "CleanupResponse",
    "CommentCreate",
    "CommentCreateResponse",
    "CommentDeleteResponse",
    "CommentDetailResponse",
    "CommentListResponse",
    "CommentRead",
    "CreatedNotificationSummary",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "ImportedSettings",
    "IsoDatetime",
    "MarkAllReadResponse",
    "MarkReadResponse",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationStatsResponse",
    "NotificationTestRequest",
    "NotificationTestResponse",
    "NotificationType",
    "OperationResult",
    "SettingsChangeResponse",
    "SettingsImport",
    "SettingsResponse",
    "SettingsUpdate",
    "TimestampedResponse",
]

"""Schemas for comment endpoints."""

from __future__ import annotations

from pydantic import EmailStr, Field

from notifyhub.domain.entities import Comment

from .common import CamelModel, IsoDatetime, OperationResult, TimestampedResponse


class CommentCreate(CamelModel):
    """Payload required to create a comment."""

    post_title: str = Field(..., min_length=1, max_length=200)
    commenter_name: str = Field(..., min_length=1, max_length=50)
    commenter_email: EmailStr | None = Field(default=None, max_length=100)
    content: str = Field(..., min_length=1, max_length=1000)


class CommentRead(CamelModel):
    id: str
    post_title: str
    commenter_name: str
    commenter_email: str | None = None
    content: str
    created_at: IsoDatetime

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentRead":
        return cls(
            id=comment.id,
            post_title=comment.post_title,
            commenter_name=comment.commenter_name,
            commenter_email=comment.commenter_email,
            content=comment.content,
            created_at=comment.created_at,
        )


class CreatedNotificationSummary(CamelModel):
    """Short description of the notification triggered by a new comment."""

    created: bool
    id: str | None = None
    title: str | None = None
    reason: str | None = None


class CommentCreateResponse(OperationResult):
    comment: CommentRead
    notification: CreatedNotificationSummary


class CommentListResponse(TimestampedResponse):
    comments: list[CommentRead]
    total: int


class CommentDetailResponse(TimestampedResponse):
    comment: CommentRead


class CommentDeleteResponse(OperationResult):
    comment: CommentRead


class BulkCommentResponse(OperationResult):
    created_comments: list[CommentRead]
    note: str


__all__ = [
    "BulkCommentResponse",
    "CommentCreate",
    "CommentCreateResponse",
    "CommentDeleteResponse",
    "CommentDetailResponse",
    "CommentListResponse",
    "CommentRead",
    "CreatedNotificationSummary",
]

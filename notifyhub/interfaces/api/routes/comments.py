"""Endpoints for creating and browsing comments."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notifyhub.application.comment_service import DEFAULT_COMMENT_LIMIT, CommentService
from notifyhub.config import Settings
from notifyhub.interfaces.api.dependencies import get_app_settings, get_comment_service
from notifyhub.interfaces.api.schemas import (
    BulkCommentResponse,
    CommentCreate,
    CommentCreateResponse,
    CommentDeleteResponse,
    CommentDetailResponse,
    CommentListResponse,
    CommentRead,
    CreatedNotificationSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/comments", tags=["comments"])

COMMENT_NOT_FOUND = "Comment not found"


@router.get("", response_model=CommentListResponse)
async def list_comments(
    limit: int = Query(default=DEFAULT_COMMENT_LIMIT, ge=1, le=100),
    service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    comments, total = await service.list_comments(limit)
    return CommentListResponse(
        comments=[CommentRead.from_entity(comment) for comment in comments],
        total=total,
    )


@router.post("", response_model=CommentCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    service: CommentService = Depends(get_comment_service),
) -> CommentCreateResponse:
    """Store a comment and report whether a notification was generated for it."""

    comment, notification = await service.create_comment(
        post_title=payload.post_title,
        commenter_name=payload.commenter_name,
        content=payload.content,
        commenter_email=str(payload.commenter_email) if payload.commenter_email else None,
    )
    if notification is None:
        summary = CreatedNotificationSummary(
            created=False, reason="Comment notifications are disabled"
        )
    else:
        summary = CreatedNotificationSummary(
            created=True, id=notification.id, title=notification.title
        )
    return CommentCreateResponse(
        message="Comment created",
        comment=CommentRead.from_entity(comment),
        notification=summary,
    )


@router.post(
    "/bulk-create",
    response_model=BulkCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def bulk_create_comments(
    service: CommentService = Depends(get_comment_service),
    settings: Settings = Depends(get_app_settings),
) -> BulkCommentResponse:
    """Create the demo comments; their notifications follow in the background."""

    interval = settings.bulk_comment_interval_seconds
    comments = await service.create_sample_comments(interval)
    return BulkCommentResponse(
        message=f"Created {len(comments)} test comments",
        created_comments=[CommentRead.from_entity(comment) for comment in comments],
        note=f"Notifications are generated {interval:g} seconds apart",
    )


@router.get("/{comment_id}", response_model=CommentDetailResponse)
async def get_comment(
    comment_id: str,
    service: CommentService = Depends(get_comment_service),
) -> CommentDetailResponse:
    comment = await service.get_comment(comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COMMENT_NOT_FOUND)
    return CommentDetailResponse(comment=CommentRead.from_entity(comment))


@router.delete("/{comment_id}", response_model=CommentDeleteResponse)
async def delete_comment(
    comment_id: str,
    service: CommentService = Depends(get_comment_service),
) -> CommentDeleteResponse:
    removed = await service.delete_comment(comment_id)
    if removed is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=COMMENT_NOT_FOUND)
    return CommentDeleteResponse(
        message="Comment deleted",
        comment=CommentRead.from_entity(removed),
    )

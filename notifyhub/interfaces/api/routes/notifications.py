"""Endpoints for listing and managing notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notifyhub.application.notification_service import NotificationService
from notifyhub.config import Settings
from notifyhub.interfaces.api.dependencies import get_app_settings, get_notification_service
from notifyhub.interfaces.api.schemas import (
    CleanupResponse,
    MarkAllReadResponse,
    MarkReadResponse,
    NotificationListResponse,
    NotificationRead,
    NotificationStatsResponse,
    NotificationTestRequest,
    NotificationTestResponse,
    OperationResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

NOTIFICATION_NOT_FOUND = "Notification not found"
DEFAULT_TEST_TITLE = "Test notification"
DEFAULT_TEST_MESSAGE = "This is a test notification."


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int | None = Query(default=None, ge=1, le=100),
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    service: NotificationService = Depends(get_notification_service),
    settings: Settings = Depends(get_app_settings),
) -> NotificationListResponse:
    """Return the most recent notifications, newest first."""

    page_size = limit or settings.notifications_page_size
    if unread_only:
        notifications = (await service.get_unread_notifications())[:page_size]
    else:
        notifications = await service.get_all_notifications(page_size)
    all_notifications = await service.get_all_notifications()
    return NotificationListResponse(
        notifications=[NotificationRead.from_entity(item) for item in notifications],
        unread_count=await service.get_unread_count(),
        total=len(all_notifications),
    )


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    service: NotificationService = Depends(get_notification_service),
) -> MarkAllReadResponse:
    changed_count = await service.mark_all_as_read()
    return MarkAllReadResponse(
        message=f"Marked {changed_count} notifications as read",
        changed_count=changed_count,
        unread_count=0,
    )


@router.get("/stats", response_model=NotificationStatsResponse)
async def notification_stats(
    service: NotificationService = Depends(get_notification_service),
) -> NotificationStatsResponse:
    return NotificationStatsResponse.from_stats(await service.get_notification_stats())


@router.post(
    "/test",
    response_model=NotificationTestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_test_notification(
    payload: NotificationTestRequest | None = None,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationTestResponse:
    """Create a notification flagged as a test through the regular creation path."""

    payload = payload or NotificationTestRequest()
    title = payload.title or DEFAULT_TEST_TITLE
    logger.info("Creating test notification: %s", title)
    notification = await service.create_notification(
        payload.type,
        title,
        payload.message or DEFAULT_TEST_MESSAGE,
        {"isTest": True},
    )
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Notifications of this type are disabled",
        )
    return NotificationTestResponse(
        message="Test notification created",
        notification=NotificationRead.from_entity(notification),
    )


@router.delete("/cleanup", response_model=CleanupResponse)
async def cleanup_notifications(
    days: int | None = Query(default=None, ge=0),
    service: NotificationService = Depends(get_notification_service),
    settings: Settings = Depends(get_app_settings),
) -> CleanupResponse:
    days_to_keep = settings.cleanup_days if days is None else days
    removed_count = await service.cleanup_old_notifications(days_to_keep)
    return CleanupResponse(
        message=f"Removed {removed_count} old notifications",
        removed_count=removed_count,
        days_kept=days_to_keep,
    )


@router.put("/{notification_id}/read", response_model=MarkReadResponse)
async def mark_notification_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> MarkReadResponse:
    if not await service.mark_as_read(notification_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOTIFICATION_NOT_FOUND)
    return MarkReadResponse(
        message="Notification marked as read",
        unread_count=await service.get_unread_count(),
    )


@router.delete("/{notification_id}", response_model=OperationResult)
async def delete_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> OperationResult:
    if not await service.delete_notification(notification_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOTIFICATION_NOT_FOUND)
    return OperationResult(message="Notification deleted")

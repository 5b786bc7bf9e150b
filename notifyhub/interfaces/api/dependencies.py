"""FastAPI dependency utilities."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from notifyhub.application.comment_service import CommentService
from notifyhub.application.notification_service import NotificationService
from notifyhub.application.settings_service import SettingsService
from notifyhub.bootstrap import Container
from notifyhub.config import Settings


def _container_from_app(app) -> Container:
    container = getattr(app.state, "container", None)
    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is still starting",
        )
    return container


def get_container(request: Request) -> Container:
    """Return the service container created during application startup."""

    return _container_from_app(request.app)


def get_app_settings(request: Request) -> Settings:
    return get_container(request).settings


def get_notification_service(request: Request) -> NotificationService:
    return get_container(request).notification_service


def get_settings_service(request: Request) -> SettingsService:
    return get_container(request).settings_service


def get_comment_service(request: Request) -> CommentService:
    return get_container(request).comment_service


__all__ = [
    "get_app_settings",
    "get_comment_service",
    "get_container",
    "get_notification_service",
    "get_settings_service",
]

"""Endpoints for reading and changing the notification settings."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from notifyhub.application.settings_service import SettingsService
from notifyhub.domain.entities import NotificationSettings
from notifyhub.interfaces.api.dependencies import get_settings_service
from notifyhub.interfaces.api.schemas import (
    SettingsChangeResponse,
    SettingsImport,
    SettingsResponse,
    SettingsUpdate,
)
from notifyhub.utils import now_utc

router = APIRouter(prefix="/api/settings", tags=["settings"])

EXPORT_FILENAME = "notification-settings.json"


def _change_response(message: str, settings: NotificationSettings, **extra) -> SettingsChangeResponse:
    return SettingsChangeResponse(message=message, settings=settings.to_dict(), **extra)


@router.get("", response_model=SettingsResponse)
async def read_settings(
    service: SettingsService = Depends(get_settings_service),
) -> SettingsResponse:
    settings = await service.get_settings()
    return SettingsResponse(settings=settings.to_dict(), timestamp=now_utc())


@router.put("", response_model=SettingsChangeResponse, response_model_exclude_none=True)
async def update_settings(
    payload: SettingsUpdate,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsChangeResponse:
    settings = await service.update_settings(payload.as_patch())
    return _change_response("Notification settings updated", settings)


@router.patch(
    "/notifications/toggle",
    response_model=SettingsChangeResponse,
    response_model_exclude_none=True,
)
async def toggle_notifications(
    service: SettingsService = Depends(get_settings_service),
) -> SettingsChangeResponse:
    settings = await service.toggle_notifications()
    enabled = settings.notifications.enabled
    return _change_response(
        f"Notifications {'enabled' if enabled else 'disabled'}", settings, enabled=enabled
    )


@router.patch(
    "/notifications/sound/toggle",
    response_model=SettingsChangeResponse,
    response_model_exclude_none=True,
)
async def toggle_sound(
    service: SettingsService = Depends(get_settings_service),
) -> SettingsChangeResponse:
    settings = await service.toggle_sound()
    sound_enabled = settings.notifications.sound
    return _change_response(
        f"Notification sound {'enabled' if sound_enabled else 'disabled'}",
        settings,
        sound_enabled=sound_enabled,
    )


@router.patch(
    "/notifications/types/{notification_type}/toggle",
    response_model=SettingsChangeResponse,
    response_model_exclude_none=True,
)
async def toggle_notification_type(
    notification_type: str,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsChangeResponse:
    settings = await service.toggle_type(notification_type)
    enabled = settings.notifications.types.is_enabled(notification_type)
    return _change_response(
        f"{notification_type} notifications {'enabled' if enabled else 'disabled'}",
        settings,
        type=notification_type,
        enabled=enabled,
    )


@router.post("/reset", response_model=SettingsChangeResponse, response_model_exclude_none=True)
async def reset_settings(
    service: SettingsService = Depends(get_settings_service),
) -> SettingsChangeResponse:
    settings = await service.reset()
    return _change_response("Settings reset to defaults", settings)


@router.get("/export")
async def export_settings(
    service: SettingsService = Depends(get_settings_service),
) -> JSONResponse:
    document = await service.export()
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )


@router.post("/import", response_model=SettingsChangeResponse, response_model_exclude_none=True)
async def import_settings(
    payload: SettingsImport,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsChangeResponse:
    settings = await service.import_settings(payload.model_dump(exclude_none=True))
    return _change_response("Settings imported", settings)

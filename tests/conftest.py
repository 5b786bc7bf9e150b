"""Shared fixtures for the notification service tests."""

from __future__ import annotations

import copy
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from notifyhub.application.comment_service import CommentService  # noqa: E402
from notifyhub.application.notification_service import NotificationService  # noqa: E402
from notifyhub.application.settings_service import SettingsService  # noqa: E402
from notifyhub.infrastructure.repositories import (  # noqa: E402
    CommentRepository,
    NotificationRepository,
    SettingsRepository,
)
from notifyhub.infrastructure.storage import JsonDocumentStore  # noqa: E402

START = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now


class RecordingPublisher:
    """Publisher double keeping every event in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def publish(self, event_type: str, payload: Any) -> None:
        self.events.append((event_type, copy.deepcopy(payload)))

    @property
    def types(self) -> list[str]:
        return [event_type for event_type, _ in self.events]

    def payloads(self, event_type: str) -> list[Any]:
        return [payload for name, payload in self.events if name == event_type]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def store(tmp_path: Path) -> JsonDocumentStore:
    return JsonDocumentStore(tmp_path / "data")


@pytest.fixture
def settings_service(store, publisher, clock) -> SettingsService:
    return SettingsService(SettingsRepository(store), publisher, clock=clock)


@pytest.fixture
def notification_service(store, settings_service, publisher, clock) -> NotificationService:
    return NotificationService(NotificationRepository(store), settings_service, publisher, clock=clock)


@pytest.fixture
def comment_service(store, notification_service, publisher, clock) -> CommentService:
    return CommentService(CommentRepository(store), notification_service, publisher, clock=clock)


@pytest.fixture
def app_settings(tmp_path: Path):
    from notifyhub.config import Settings

    return Settings(
        _env_file=None,
        data_dir=tmp_path / "api-data",
        seed_sample_data=False,
        bulk_comment_interval_seconds=0,
    )


@pytest.fixture
def api_client(app_settings):
    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app(app_settings)) as client:
        yield client

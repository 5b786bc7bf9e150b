"""Error taxonomy shared by the service layers."""

from __future__ import annotations

from typing import Any


class NotifyHubError(Exception):
    """Base class for every error raised by the notification service."""


class ValidationError(NotifyHubError, ValueError):
    """A request payload did not satisfy the expected shape."""

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class StorageError(NotifyHubError):
    """Base class for persistence failures."""


class StorageIOError(StorageError):
    """A document could not be read from or written to disk."""


class StorageCorruptError(StorageError):
    """A stored document exists but cannot be parsed."""


class TransportError(NotifyHubError):
    """The client websocket channel is closed or broken."""


__all__ = [
    "NotifyHubError",
    "ValidationError",
    "StorageError",
    "StorageIOError",
    "StorageCorruptError",
    "TransportError",
]

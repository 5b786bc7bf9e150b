"""JSON document storage for the notification, comment and settings collections."""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Final
from uuid import uuid4

import anyio

from notifyhub.domain.exceptions import StorageCorruptError, StorageIOError

logger = logging.getLogger(__name__)

SCHEMA_VERSION: Final[int] = 1
_VERSION_KEY: Final[str] = "schemaVersion"
_DATA_KEY: Final[str] = "data"


class Collection(str, Enum):
    """Independent documents persisted by the service."""

    NOTIFICATIONS = "notifications"
    COMMENTS = "comments"
    SETTINGS = "settings"

    @property
    def filename(self) -> str:
        return f"{self.value}.json"

    @property
    def is_list(self) -> bool:
        return self is not Collection.SETTINGS


class JsonDocumentStore:
    """Read and atomically overwrite one JSON document per :class:`Collection`.

    Every document is wrapped in a ``{"schemaVersion": 1, "data": ...}``
    envelope. Bare documents written before versioning was introduced are still
    accepted on read. The store provides one lock per collection; callers that
    perform read-modify-write cycles must hold it for the whole cycle.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self._locks: dict[Collection, anyio.Lock] = {
            collection: anyio.Lock() for collection in Collection
        }

    def path_for(self, collection: Collection) -> Path:
        return self.data_dir / collection.filename

    def lock(self, collection: Collection) -> anyio.Lock:
        """Return the lock guarding ``collection``."""

        return self._locks[collection]

    async def exists(self, collection: Collection) -> bool:
        return await anyio.Path(self.path_for(collection)).exists()

    async def read(self, collection: Collection) -> Any:
        """Return the parsed contents of ``collection``.

        Missing documents yield an empty list for list collections and ``None``
        for the settings record.
        """

        path = anyio.Path(self.path_for(collection))
        try:
            text = await path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return [] if collection.is_list else None
        except OSError as exc:
            raise StorageIOError(f"Could not read {path}: {exc}") from exc

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageCorruptError(f"Document {path} is not valid JSON: {exc}") from exc
        return self._unwrap(collection, raw, path)

    async def write(self, collection: Collection, data: Any) -> None:
        """Serialize ``data`` and atomically replace the backing file."""

        target = self.path_for(collection)
        document = {_VERSION_KEY: SCHEMA_VERSION, _DATA_KEY: data}
        try:
            payload = json.dumps(document, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageIOError(f"Could not serialize {collection.value}: {exc}") from exc

        temporary = anyio.Path(target.with_name(f".{target.name}.{uuid4().hex}.tmp"))
        try:
            await anyio.Path(self.data_dir).mkdir(parents=True, exist_ok=True)
            await temporary.write_text(payload, encoding="utf-8")
            await anyio.to_thread.run_sync(os.replace, str(temporary), str(target))
        except OSError as exc:
            await self._discard(temporary)
            raise StorageIOError(f"Could not write {target}: {exc}") from exc
        logger.debug("Wrote %s (%d bytes)", target, len(payload))

    @staticmethod
    async def _discard(path: anyio.Path) -> None:
        try:
            await path.unlink()
        except OSError:
            logger.debug("Temporary file %s already gone", path)

    @staticmethod
    def _unwrap(collection: Collection, raw: Any, path: Path) -> Any:
        if isinstance(raw, dict) and _VERSION_KEY in raw:
            version = raw.get(_VERSION_KEY)
            if not isinstance(version, int) or version > SCHEMA_VERSION:
                raise StorageCorruptError(
                    f"Document {path} has unsupported schema version {version!r}"
                )
            raw = raw.get(_DATA_KEY)

        if collection.is_list:
            if not isinstance(raw, list):
                raise StorageCorruptError(f"Document {path} must contain a list")
            return raw
        if raw is not None and not isinstance(raw, dict):
            raise StorageCorruptError(f"Document {path} must contain an object")
        return raw


__all__ = ["Collection", "JsonDocumentStore", "SCHEMA_VERSION"]

"""Websocket and HTTP plumbing used by :class:`~notifyhub.client.NotificationClient`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final, Protocol

import aiohttp

from notifyhub.domain.exceptions import TransportError

if TYPE_CHECKING:
    from .connection import NotificationClient

logger = logging.getLogger(__name__)

NORMAL_CLOSURE: Final[int] = 1000
SYNCED_EVENT: Final[str] = "notifications:synced"

_CLOSED_TYPES = (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED)


class WebSocketTransport(Protocol):
    """One bidirectional text channel. Every failure surfaces as :class:`TransportError`."""

    async def open(self) -> None: ...

    async def send(self, data: str) -> None: ...

    async def receive(self) -> str: ...

    async def close(self, code: int = NORMAL_CLOSURE) -> None: ...


class AiohttpWebSocketTransport:
    """:class:`WebSocketTransport` built on ``aiohttp.ClientSession.ws_connect``."""

    def __init__(
        self,
        url: str,
        *,
        session: aiohttp.ClientSession | None = None,
        heartbeat: float | None = 30.0,
    ) -> None:
        self.url = url
        self.heartbeat = heartbeat
        self._session = session
        self._owns_session = session is None
        self._ws: aiohttp.ClientWebSocketResponse | None = None

    @property
    def close_code(self) -> int | None:
        return self._ws.close_code if self._ws is not None else None

    async def open(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        try:
            self._ws = await self._session.ws_connect(self.url, heartbeat=self.heartbeat)
        except (aiohttp.ClientError, OSError) as exc:
            raise TransportError(f"Could not open websocket {self.url}: {exc}") from exc

    async def send(self, data: str) -> None:
        ws = self._require_open()
        try:
            await ws.send_str(data)
        except (aiohttp.ClientError, ConnectionResetError) as exc:
            raise TransportError(f"Could not send on websocket {self.url}: {exc}") from exc

    async def receive(self) -> str:
        ws = self._require_open()
        while True:
            message = await ws.receive()
            if message.type == aiohttp.WSMsgType.TEXT:
                return message.data
            if message.type == aiohttp.WSMsgType.BINARY:
                return message.data.decode("utf-8", errors="replace")
            if message.type in _CLOSED_TYPES:
                raise TransportError(f"Websocket closed with code {ws.close_code}")
            if message.type == aiohttp.WSMsgType.ERROR:
                raise TransportError(f"Websocket error: {ws.exception()}")

    async def close(self, code: int = NORMAL_CLOSURE) -> None:
        ws, self._ws = self._ws, None
        if ws is not None and not ws.closed:
            await ws.close(code=code)
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _require_open(self) -> aiohttp.ClientWebSocketResponse:
        if self._ws is None or self._ws.closed:
            raise TransportError("Websocket is not open")
        return self._ws


class HttpReconciler:
    """Fetch the notification list after every (re)connect.

    Events broadcast while the client was offline are never replayed, so the
    client replaces its view with a full fetch and announces it locally as a
    ``notifications:synced`` event.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: aiohttp.ClientSession | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/api/notifications"
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch(self) -> dict[str, Any]:
        if self._session is not None:
            return await self._get(self._session)
        async with aiohttp.ClientSession() as session:
            return await self._get(session)

    async def __call__(self, client: "NotificationClient") -> None:
        snapshot = await self.fetch()
        logger.info("Reconciled %d notifications", len(snapshot.get("notifications", [])))
        client.dispatch(SYNCED_EVENT, snapshot)

    async def _get(self, session: aiohttp.ClientSession) -> dict[str, Any]:
        async with session.get(self.url, timeout=self._timeout) as response:
            response.raise_for_status()
            return await response.json()


__all__ = [
    "AiohttpWebSocketTransport",
    "HttpReconciler",
    "NORMAL_CLOSURE",
    "SYNCED_EVENT",
    "WebSocketTransport",
]

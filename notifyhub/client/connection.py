"""Reconnecting websocket client for the notification channel."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Coroutine
from enum import Enum
from typing import Any

from notifyhub.domain.exceptions import TransportError

from .clock import Clock, LoopClock, TimerHandle
from .transport import NORMAL_CLOSURE, WebSocketTransport

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]
StatusListener = Callable[["ConnectionStatus"], None]
Reconcile = Callable[["NotificationClient"], Awaitable[None]]


class ConnectionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    RECONNECTING = "reconnecting"
    CONNECTED = "connected"


class NotificationClient:
    """Keep a websocket channel open and fan inbound events out to listeners.

    The client is a small state machine::

        disconnected --connect()--> reconnecting --open--> connected
        connected --transport closed--> disconnected --timer--> reconnecting

    A lost connection is retried after ``min(base_delay * 2**attempt,
    max_delay)`` seconds. The attempt counter grows with every failed cycle and
    is reset once a connection opens. After ``max_reconnect_attempts`` cycles
    the client stays disconnected until :meth:`connect` is called again. Only
    one reconnect timer exists at a time and :meth:`disconnect` cancels it.
    """

    def __init__(
        self,
        transport: WebSocketTransport,
        *,
        clock: Clock | None = None,
        max_reconnect_attempts: int = 5,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        reconcile: Reconcile | None = None,
    ) -> None:
        self._transport = transport
        self._clock = clock or LoopClock()
        self.max_reconnect_attempts = max_reconnect_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._reconcile = reconcile

        self._status = ConnectionStatus.DISCONNECTED
        self._attempts = 0
        self._timer: TimerHandle | None = None
        self._closing = False
        self._reader: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._listeners: dict[str, list[Listener]] = {}
        self._status_listeners: list[StatusListener] = []

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def is_connected(self) -> bool:
        return self._status is ConnectionStatus.CONNECTED

    @property
    def reconnect_attempts(self) -> int:
        return self._attempts

    @property
    def reconnect_scheduled(self) -> bool:
        return self._timer is not None

    def backoff_delay(self, attempt: int) -> float:
        return min(self.base_delay * 2**attempt, self.max_delay)

    async def connect(self) -> None:
        """Open the channel, resuming automatic reconnects if they were exhausted."""

        if self.is_connected:
            logger.debug("Websocket already connected")
            return
        self._attempts = 0
        await self._open()

    async def disconnect(self) -> None:
        """Close the channel with a normal closure and stop reconnecting."""

        self._closing = True
        self._cancel_timer()
        reader, self._reader = self._reader, None
        await self._transport.close(NORMAL_CLOSURE)
        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            await asyncio.gather(reader, return_exceptions=True)
        self._attempts = 0
        self._set_status(ConnectionStatus.DISCONNECTED)
        logger.info("Websocket disconnected")

    async def reconnect(self) -> None:
        await self.disconnect()
        await self.connect()

    def on(self, event: str, callback: Listener) -> None:
        """Register ``callback`` for ``event``; callbacks accumulate."""

        self._listeners.setdefault(event, []).append(callback)

    def off(self, event: str, callback: Listener | None = None) -> None:
        """Remove ``callback`` from ``event``, or every callback when omitted."""

        if callback is None:
            self._listeners.pop(event, None)
            return
        remaining = [listener for listener in self._listeners.get(event, []) if listener != callback]
        if remaining:
            self._listeners[event] = remaining
        else:
            self._listeners.pop(event, None)

    def on_status_change(self, callback: StatusListener) -> Callable[[], None]:
        """Register ``callback`` for status transitions and return an unsubscribe function."""

        self._status_listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._status_listeners:
                self._status_listeners.remove(callback)

        return unsubscribe

    async def emit(self, event: str, data: Any = None) -> bool:
        """Send ``{type, payload}``; returns ``False`` when the message was dropped."""

        if not self.is_connected:
            logger.warning("Websocket not connected; dropping %s", event)
            return False
        try:
            await self._transport.send(json.dumps({"type": event, "payload": data}))
        except TransportError as exc:
            logger.warning("Could not send %s: %s", event, exc)
            return False
        return True

    def dispatch(self, event: str, payload: Any) -> None:
        """Invoke the listeners registered for ``event`` with ``payload``."""

        for listener in list(self._listeners.get(event, [])):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener for %s failed", event)

    async def wait_pending(self) -> None:
        """Wait for scheduled connection attempts and reconcile runs to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _open(self) -> None:
        self._cancel_timer()
        self._closing = False
        self._set_status(ConnectionStatus.RECONNECTING)
        try:
            await self._transport.open()
        except TransportError as exc:
            logger.warning("Websocket connection failed: %s", exc)
            self._set_status(ConnectionStatus.DISCONNECTED)
            self._schedule_reconnect()
            return

        if self._closing:
            await self._transport.close(NORMAL_CLOSURE)
            return
        self._attempts = 0
        self._set_status(ConnectionStatus.CONNECTED)
        logger.info("Websocket connected")
        self._reader = asyncio.get_running_loop().create_task(self._read_loop())
        if self._reconcile is not None:
            self._spawn(self._run_reconcile())

    async def _read_loop(self) -> None:
        while True:
            try:
                text = await self._transport.receive()
            except TransportError as exc:
                self._handle_closed(exc)
                return
            self._handle_message(text)

    def _handle_message(self, text: str) -> None:
        try:
            message = json.loads(text)
        except ValueError:
            logger.warning("Dropping unparseable websocket message")
            return
        if not isinstance(message, dict) or not isinstance(message.get("type"), str):
            logger.warning("Dropping websocket message without a type")
            return
        self.dispatch(message["type"], message.get("payload"))

    def _handle_closed(self, exc: TransportError) -> None:
        self._reader = None
        if self._closing:
            return
        logger.warning("Websocket connection lost: %s", exc)
        self._set_status(ConnectionStatus.DISCONNECTED)
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if self._closing or self._timer is not None:
            return
        if self._attempts >= self.max_reconnect_attempts:
            logger.error("Giving up after %d reconnect attempts", self._attempts)
            return
        delay = self.backoff_delay(self._attempts)
        logger.info(
            "Reconnecting in %.1fs (%d/%d)", delay, self._attempts + 1, self.max_reconnect_attempts
        )
        self._timer = self._clock.call_later(delay, self._on_reconnect_timer)

    def _on_reconnect_timer(self) -> None:
        self._timer = None
        self._attempts += 1
        self._set_status(ConnectionStatus.RECONNECTING)
        self._spawn(self._open())

    async def _run_reconcile(self) -> None:
        try:
            await self._reconcile(self)
        except Exception:
            logger.exception("Reconciling notifications after connect failed")

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _spawn(self, coroutine: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _set_status(self, status: ConnectionStatus) -> None:
        if status is self._status:
            return
        self._status = status
        for listener in list(self._status_listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Status listener failed")


__all__ = ["ConnectionStatus", "NotificationClient"]

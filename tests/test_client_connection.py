"""State machine tests for the reconnecting notification client."""

from __future__ import annotations

import asyncio
import json

import pytest

from notifyhub.client import ConnectionStatus, ManualClock, NotificationClient
from notifyhub.domain.exceptions import TransportError

pytestmark = pytest.mark.anyio

_CLOSED = object()


class FakeTransport:
    """In-memory transport whose peer is driven by the test."""

    def __init__(self, *, failures: int = 0) -> None:
        self.failures = failures
        self.open_calls = 0
        self.sent: list[dict] = []
        self.close_codes: list[int] = []
        self._inbox: asyncio.Queue = asyncio.Queue()
        self._open = False

    async def open(self) -> None:
        self.open_calls += 1
        if self.failures:
            self.failures -= 1
            raise TransportError("connection refused")
        self._inbox = asyncio.Queue()
        self._open = True

    async def send(self, data: str) -> None:
        if not self._open:
            raise TransportError("closed")
        self.sent.append(json.loads(data))

    async def receive(self) -> str:
        item = await self._inbox.get()
        if item is _CLOSED:
            self._open = False
            raise TransportError("closed by peer")
        return item

    async def close(self, code: int = 1000) -> None:
        self.close_codes.append(code)
        if self._open:
            self._open = False
            self._inbox.put_nowait(_CLOSED)

    def push(self, message) -> None:
        self._inbox.put_nowait(message if isinstance(message, str) else json.dumps(message))

    def drop(self) -> None:
        self._inbox.put_nowait(_CLOSED)


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport, manual_clock) -> NotificationClient:
    return NotificationClient(transport, clock=manual_clock)


async def test_connect_moves_through_reconnecting_to_connected(client, transport) -> None:
    statuses: list[ConnectionStatus] = []
    client.on_status_change(statuses.append)

    assert client.status is ConnectionStatus.DISCONNECTED
    await client.connect()

    assert statuses == [ConnectionStatus.RECONNECTING, ConnectionStatus.CONNECTED]
    assert client.reconnect_attempts == 0
    await client.disconnect()


async def test_lost_connection_reconnects_within_first_backoff(
    client, transport, manual_clock
) -> None:
    statuses: list[ConnectionStatus] = []
    await client.connect()
    client.on_status_change(statuses.append)

    transport.drop()
    await _settle()

    assert statuses == [ConnectionStatus.DISCONNECTED]
    assert manual_clock.pending == [1.0]

    manual_clock.advance(0.999)
    assert client.status is ConnectionStatus.DISCONNECTED

    manual_clock.advance(0.002)
    assert client.status is ConnectionStatus.RECONNECTING

    await client.wait_pending()
    assert client.status is ConnectionStatus.CONNECTED
    assert client.reconnect_attempts == 0
    assert transport.open_calls == 2
    await client.disconnect()


async def test_backoff_doubles_and_gives_up_after_max_attempts(manual_clock) -> None:
    transport = FakeTransport(failures=10)
    client = NotificationClient(transport, clock=manual_clock, max_reconnect_attempts=5)

    await client.connect()
    delays = []
    while manual_clock.pending:
        [delay] = manual_clock.pending
        delays.append(delay)
        manual_clock.advance(delay)
        await client.wait_pending()

    assert delays == [1.0, 2.0, 4.0, 8.0, 16.0]
    assert client.status is ConnectionStatus.DISCONNECTED
    assert client.reconnect_attempts == 5
    assert transport.open_calls == 6
    assert client.reconnect_scheduled is False


async def test_backoff_is_capped(manual_clock) -> None:
    client = NotificationClient(FakeTransport(), clock=manual_clock)

    assert [client.backoff_delay(attempt) for attempt in range(7)] == [
        1.0, 2.0, 4.0, 8.0, 16.0, 30.0, 30.0,
    ]


async def test_manual_connect_resumes_after_giving_up(manual_clock) -> None:
    transport = FakeTransport(failures=6)
    client = NotificationClient(transport, clock=manual_clock, max_reconnect_attempts=5)
    await client.connect()
    while manual_clock.pending:
        manual_clock.advance(manual_clock.pending[0])
        await client.wait_pending()

    await client.connect()

    assert client.status is ConnectionStatus.CONNECTED
    await client.disconnect()


async def test_disconnect_cancels_timer_and_uses_normal_closure(
    client, transport, manual_clock
) -> None:
    await client.connect()
    transport.drop()
    await _settle()
    assert client.reconnect_scheduled is True

    await client.disconnect()

    assert client.reconnect_scheduled is False
    assert manual_clock.pending == []
    assert transport.close_codes[-1] == 1000
    assert client.status is ConnectionStatus.DISCONNECTED


async def test_manual_disconnect_does_not_reconnect(client, transport, manual_clock) -> None:
    await client.connect()

    await client.disconnect()
    await _settle()

    assert manual_clock.pending == []
    assert client.status is ConnectionStatus.DISCONNECTED


async def test_listeners_receive_payloads(client, transport) -> None:
    received: list = []
    other: list = []
    client.on("notification:new", received.append)
    client.on("notification:new", other.append)
    await client.connect()

    transport.push({"type": "notification:new", "payload": {"id": "n-1"}})
    await _settle()

    assert received == other == [{"id": "n-1"}]

    client.off("notification:new", received.append)
    transport.push({"type": "notification:new", "payload": {"id": "n-2"}})
    await _settle()
    assert received == [{"id": "n-1"}]
    assert other == [{"id": "n-1"}, {"id": "n-2"}]

    client.off("notification:new")
    transport.push({"type": "notification:new", "payload": {"id": "n-3"}})
    await _settle()
    assert other == [{"id": "n-1"}, {"id": "n-2"}]
    await client.disconnect()


async def test_bad_messages_and_failing_listeners_do_not_break_the_channel(
    client, transport
) -> None:
    received: list = []

    def explode(payload):
        raise ValueError("listener bug")

    client.on("pong", explode)
    client.on("pong", received.append)
    await client.connect()

    transport.push("not json")
    transport.push({"payload": "no type"})
    transport.push({"type": "pong", "payload": {"ok": True}})
    await _settle()

    assert received == [{"ok": True}]
    assert client.status is ConnectionStatus.CONNECTED
    await client.disconnect()


async def test_emit_is_dropped_while_disconnected(client, transport) -> None:
    assert await client.emit("ping") is False
    assert transport.sent == []

    await client.connect()
    assert await client.emit("notification:mark_read", {"notificationId": "n-1"}) is True
    assert transport.sent == [
        {"type": "notification:mark_read", "payload": {"notificationId": "n-1"}}
    ]
    await client.disconnect()


async def test_reconcile_runs_after_every_connect(transport, manual_clock) -> None:
    calls: list[ConnectionStatus] = []

    async def reconcile(client: NotificationClient) -> None:
        calls.append(client.status)
        client.dispatch("notifications:synced", {"notifications": []})

    synced: list = []
    client = NotificationClient(transport, clock=manual_clock, reconcile=reconcile)
    client.on("notifications:synced", synced.append)

    await client.connect()
    await client.wait_pending()
    transport.drop()
    await _settle()
    manual_clock.advance(1.0)
    await client.wait_pending()

    assert calls == [ConnectionStatus.CONNECTED, ConnectionStatus.CONNECTED]
    assert synced == [{"notifications": []}, {"notifications": []}]
    await client.disconnect()

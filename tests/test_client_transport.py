"""aiohttp transport and HTTP reconciliation against a local aiohttp server."""

from __future__ import annotations

import pytest
from aiohttp import WSMsgType, web
from aiohttp.test_utils import TestServer as AiohttpTestServer

from notifyhub.client import AiohttpWebSocketTransport, HttpReconciler, ManualClock, NotificationClient
from notifyhub.domain.exceptions import TransportError

pytestmark = pytest.mark.anyio

SNAPSHOT = {"notifications": [{"id": "n-1"}], "unreadCount": 1, "total": 1}


async def _list_notifications(request: web.Request) -> web.Response:
    return web.json_response(SNAPSHOT)


async def _echo(request: web.Request) -> web.WebSocketResponse:
    ws = web.WebSocketResponse()
    await ws.prepare(request)
    async for message in ws:
        if message.type == WSMsgType.TEXT:
            if message.data == "close":
                await ws.close(code=4000)
            else:
                await ws.send_str(message.data)
    return ws


@pytest.fixture
async def server():
    app = web.Application()
    app.router.add_get("/api/notifications", _list_notifications)
    app.router.add_get("/ws", _echo)
    async with AiohttpTestServer(app) as test_server:
        yield test_server


async def test_transport_round_trip_and_peer_close(server) -> None:
    transport = AiohttpWebSocketTransport(str(server.make_url("/ws")), heartbeat=None)

    await transport.open()
    await transport.send('{"type": "ping"}')
    assert await transport.receive() == '{"type": "ping"}'

    await transport.send("close")
    with pytest.raises(TransportError):
        await transport.receive()
    await transport.close()

    with pytest.raises(TransportError):
        await transport.send("late")


async def test_transport_open_failure(server) -> None:
    transport = AiohttpWebSocketTransport(str(server.make_url("/missing")), heartbeat=None)

    with pytest.raises(TransportError):
        await transport.open()
    await transport.close()


async def test_reconciler_dispatches_snapshot(server) -> None:
    reconciler = HttpReconciler(str(server.make_url("/")))
    client = NotificationClient(
        AiohttpWebSocketTransport(str(server.make_url("/ws")), heartbeat=None),
        clock=ManualClock(),
        reconcile=reconciler,
    )
    synced: list = []
    client.on("notifications:synced", synced.append)

    await client.connect()
    await client.wait_pending()
    await client.disconnect()

    assert synced == [SNAPSHOT]

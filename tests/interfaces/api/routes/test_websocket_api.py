"""Websocket channel behaviour."""

from __future__ import annotations


def test_connect_sends_status_and_snapshot(api_client) -> None:
    created = api_client.post("/api/notifications/test", json={}).json()["notification"]

    with api_client.websocket_connect("/ws") as websocket:
        assert websocket.receive_json()["payload"] == "connected"
        snapshot = websocket.receive_json()

    assert snapshot["payload"]["unreadCount"] == 1
    assert [item["id"] for item in snapshot["payload"]["notifications"]] == [created["id"]]


def test_new_notifications_are_broadcast(api_client) -> None:
    with api_client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        websocket.receive_json()
        assert api_client.get("/health").json()["websocketClients"] == 1

        created = api_client.post("/api/notifications/test", json={}).json()["notification"]

        new = websocket.receive_json()
        count = websocket.receive_json()

    assert new["type"] == "notification:new"
    assert new["payload"]["id"] == created["id"]
    assert new["payload"]["data"] == {"isTest": True}
    assert count["type"] == "notifications:count_updated"
    assert count["payload"]["unreadCount"] == 1


def test_ping_and_mark_read_over_websocket(api_client) -> None:
    created = api_client.post("/api/notifications/test", json={}).json()["notification"]

    with api_client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        websocket.receive_json()

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json()["type"] == "pong"

        websocket.send_text("not json")
        websocket.send_bytes(b"\x00")
        websocket.send_json({"type": "notification:mark_read", "payload": {"notificationId": created["id"]}})
        read = websocket.receive_json()
        count = websocket.receive_json()

    assert read["type"] == "notification:read"
    assert read["payload"]["notificationId"] == created["id"]
    assert count["payload"]["unreadCount"] == 0
    assert api_client.get("/api/notifications").json()["unreadCount"] == 0


def test_mark_all_read_over_websocket(api_client) -> None:
    api_client.post("/api/notifications/test", json={})
    api_client.post("/api/notifications/test", json={})

    with api_client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        websocket.receive_json()
        websocket.send_json({"type": "notifications:mark_all_read"})
        all_read = websocket.receive_json()
        count = websocket.receive_json()

    assert all_read["type"] == "notifications:all_read"
    assert all_read["payload"]["changedCount"] == 2
    assert count["payload"]["unreadCount"] == 0


def test_failing_command_keeps_the_connection_open(api_client, monkeypatch) -> None:
    service = api_client.app.state.container.notification_service

    async def broken_mark_all_as_read():
        raise RuntimeError("disk unplugged")

    monkeypatch.setattr(service, "mark_all_as_read", broken_mark_all_as_read)

    with api_client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        websocket.receive_json()
        websocket.send_json({"type": "notifications:mark_all_read"})
        websocket.send_json({"type": "ping"})
        pong = websocket.receive_json()

    assert pong["type"] == "pong"

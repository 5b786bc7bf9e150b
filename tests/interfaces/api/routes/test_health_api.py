"""Health endpoint."""

from __future__ import annotations


def test_health_reports_runtime_information(api_client) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["uptime"] >= 0
    assert body["environment"] == "development"
    assert body["websocketClients"] == 0


def test_unknown_route_uses_error_body(api_client) -> None:
    response = api_client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"

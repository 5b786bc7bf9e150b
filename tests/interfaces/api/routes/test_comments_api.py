"""HTTP behaviour of the comment endpoints."""

from __future__ import annotations


COMMENT = {
    "postTitle": "Realtime apps",
    "commenterName": "Kim",
    "commenterEmail": "kim@example.com",
    "content": "Hello world",
}


def test_create_comment_generates_notification(api_client) -> None:
    response = api_client.post("/api/comments", json=COMMENT)

    assert response.status_code == 201
    body = response.json()
    assert body["comment"]["id"] == "comment-1"
    assert body["comment"]["commenterEmail"] == "kim@example.com"
    assert body["notification"]["created"] is True
    assert body["notification"]["title"] == "New comment"

    [notification] = api_client.get("/api/notifications").json()["notifications"]
    assert notification["data"]["commentId"] == "comment-1"
    assert notification["message"] == "Kim commented on 'Realtime apps': \"Hello world\""


def test_comment_without_notification_when_type_disabled(api_client) -> None:
    api_client.patch("/api/settings/notifications/types/comment/toggle")

    body = api_client.post("/api/comments", json=COMMENT).json()

    assert body["notification"]["created"] is False
    assert body["notification"]["reason"]
    assert api_client.get("/api/notifications").json()["total"] == 0


def test_create_comment_validation(api_client) -> None:
    response = api_client.post(
        "/api/comments",
        json={"postTitle": "", "commenterName": "x" * 51, "content": "hi", "commenterEmail": "nope"},
    )

    assert response.status_code == 400
    fields = {detail["field"] for detail in response.json()["details"]}
    assert {"postTitle", "commenterName", "commenterEmail"} <= fields


def test_list_get_and_delete(api_client) -> None:
    api_client.post("/api/comments", json=COMMENT)
    api_client.post("/api/comments", json={**COMMENT, "content": "Second"})

    listing = api_client.get("/api/comments", params={"limit": 1}).json()
    assert listing["total"] == 2
    assert len(listing["comments"]) == 1

    assert api_client.get("/api/comments/comment-1").json()["comment"]["content"] == "Hello world"
    assert api_client.delete("/api/comments/comment-1").json()["comment"]["id"] == "comment-1"
    assert api_client.get("/api/comments/comment-1").status_code == 404
    assert api_client.delete("/api/comments/comment-1").status_code == 404


def test_bulk_create(api_client) -> None:
    response = api_client.post("/api/comments/bulk-create")

    assert response.status_code == 201
    body = response.json()
    assert len(body["createdComments"]) == 3
    assert body["note"]
    assert api_client.get("/api/comments").json()["total"] == 3

"""Domain entity representing a comment left on a post."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from notifyhub.utils import parse_iso, to_iso


@dataclass(frozen=True)
class Comment:
    """Comment whose creation triggers a ``comment`` notification."""

    id: str
    post_title: str
    commenter_name: str
    content: str
    created_at: datetime
    commenter_email: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "postTitle": self.post_title,
            "commenterName": self.commenter_name,
            "commenterEmail": self.commenter_email,
            "content": self.content,
            "createdAt": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Comment":
        created_at = parse_iso(raw.get("createdAt"))
        if created_at is None:
            raise ValueError(f"Comment {raw.get('id')!r} has no createdAt")
        return cls(
            id=str(raw["id"]),
            post_title=str(raw.get("postTitle", "")),
            commenter_name=str(raw.get("commenterName", "")),
            commenter_email=raw.get("commenterEmail"),
            content=str(raw.get("content", "")),
            created_at=created_at,
        )


__all__ = ["Comment"]

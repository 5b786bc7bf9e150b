"""Persistence helpers for comment entities."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from notifyhub.domain.entities import Comment
from notifyhub.domain.exceptions import StorageCorruptError
from notifyhub.infrastructure.storage import Collection, JsonDocumentStore

_COMMENT_ID_PATTERN = re.compile(r"^comment-(\d+)$")


def next_comment_id(comments: Sequence[Comment]) -> str:
    """Return ``comment-<n>`` where ``n`` follows the highest numeric suffix."""

    highest = 0
    for comment in comments:
        match = _COMMENT_ID_PATTERN.match(comment.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"comment-{highest + 1}"


class CommentRepository:
    """Provide CRUD operations for :class:`Comment` objects.

    Every mutating call performs its read-modify-write cycle while holding the
    comments collection lock.
    """

    def __init__(self, store: JsonDocumentStore) -> None:
        self.store = store

    async def exists(self) -> bool:
        return await self.store.exists(Collection.COMMENTS)

    async def list_all(self) -> list[Comment]:
        raw = await self.store.read(Collection.COMMENTS)
        try:
            return [Comment.from_dict(entry) for entry in raw]
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageCorruptError(f"Comment document contains an invalid record: {exc}") from exc

    async def get(self, comment_id: str) -> Comment | None:
        for comment in await self.list_all():
            if comment.id == comment_id:
                return comment
        return None

    async def add(self, build: Callable[[str], Comment]) -> Comment:
        """Create a comment through ``build`` using the next free identifier."""

        async with self.store.lock(Collection.COMMENTS):
            comments = await self.list_all()
            comment = build(next_comment_id(comments))
            await self._write([comment, *comments])
        return comment

    async def add_many(self, builders: Sequence[Callable[[str], Comment]]) -> list[Comment]:
        async with self.store.lock(Collection.COMMENTS):
            comments = await self.list_all()
            created: list[Comment] = []
            for build in builders:
                comment = build(next_comment_id([*created, *comments]))
                created.insert(0, comment)
            await self._write([*created, *comments])
        return list(reversed(created))

    async def delete(self, comment_id: str) -> Comment | None:
        async with self.store.lock(Collection.COMMENTS):
            comments = await self.list_all()
            remaining = [comment for comment in comments if comment.id != comment_id]
            if len(remaining) == len(comments):
                return None
            removed = next(comment for comment in comments if comment.id == comment_id)
            await self._write(remaining)
        return removed

    async def save_all(self, comments: Sequence[Comment]) -> None:
        async with self.store.lock(Collection.COMMENTS):
            await self._write(comments)

    async def _write(self, comments: Sequence[Comment]) -> None:
        await self.store.write(Collection.COMMENTS, [comment.to_dict() for comment in comments])


__all__ = ["CommentRepository", "next_comment_id"]

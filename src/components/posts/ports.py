"""
Posts component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from src.domain.entities import Post, PostPage, User


class PostRepoPort(Protocol):
    """Sole gateway to post storage. Performs no authorization."""

    def create(
        self,
        author_id: UUID,
        title: str,
        content: str,
        is_draft: bool = False,
        published_at: datetime | None = None,
    ) -> Post:
        """Insert a post and return it with its generated id."""
        ...

    def get_by_id(self, post_id: UUID) -> Post | None:
        """Get a post by id, or None if absent."""
        ...

    def list_visible(self, now: datetime, page: int = 1, page_size: int = 20) -> PostPage:
        """Publicly visible posts in insertion order, 1-indexed pages."""
        ...

    def update(self, post_id: UUID, fields: dict[str, Any]) -> Post | None:
        """Partial update of title/content/is_draft/published_at. None if absent."""
        ...

    def delete(self, post_id: UUID) -> bool:
        """Hard delete. False if absent."""
        ...


class UserLookupPort(Protocol):
    """Resolves post authors for rendering."""

    def get_many(self, user_ids: Iterable[UUID]) -> dict[UUID, User]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...

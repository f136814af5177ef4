"""
Posts component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from src.domain.entities import Post, User

PostErrorCode = Literal["validation_failed", "unauthenticated", "forbidden", "not_found"]

# --- Error ---


@dataclass(frozen=True)
class PostError:
    """A single failure reported by a posts operation."""

    code: PostErrorCode
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ListPostsInput:
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class GetPostInput:
    post_id: UUID


@dataclass(frozen=True)
class CreatePostInput:
    actor: User | None
    title: str
    content: str
    is_draft: bool = False
    published_at: datetime | None = None


@dataclass(frozen=True)
class UpdatePostInput:
    """Partial update; only keys present in `updates` are changed."""

    actor: User | None
    post_id: UUID
    updates: dict[str, Any]


@dataclass(frozen=True)
class DeletePostInput:
    actor: User | None
    post_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class PostOutput:
    """Output carrying a single post and its author."""

    post: Post | None = None
    author: User | None = None
    errors: list[PostError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class PostListOutput:
    """One page of visible posts with pagination counts."""

    items: list[Post]
    authors: dict[UUID, User]
    total: int
    page: int
    page_size: int
    errors: list[PostError] = field(default_factory=list)
    success: bool = True

    @property
    def last_page(self) -> int:
        return max(1, -(-self.total // self.page_size))


@dataclass(frozen=True)
class DeletePostOutput:
    errors: list[PostError] = field(default_factory=list)
    success: bool = True

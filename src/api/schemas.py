from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, StrictBool, StringConstraints, field_validator

from src.domain.entities import Post, User

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# --- Auth ---
class LoginRequest(BaseModel):
    email: NonEmptyStr
    password: NonEmptyStr


class UserSummary(BaseModel):
    id: UUID
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(id=user.id, name=user.display_name, email=user.email)


class UserEnvelope(BaseModel):
    user: UserSummary


# --- Posts ---
class PostCreateRequest(BaseModel):
    title: NonEmptyStr
    content: NonEmptyStr
    is_draft: StrictBool
    published_at: datetime | None = None


class PostUpdateRequest(BaseModel):
    """
    Every field is optional, but title/content/is_draft may not be sent as null.

    Blank and overlong text is checked by the posts component, after the post
    has been found and its ownership confirmed.
    """

    title: str | None = None
    content: str | None = None
    is_draft: StrictBool | None = None
    published_at: datetime | None = None

    @field_validator("title", "content", "is_draft", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field may not be null")
        return value


class PostResponse(BaseModel):
    id: UUID
    title: str
    content: str
    is_draft: bool
    published_at: datetime | None = None
    user: UserSummary | None = None

    @classmethod
    def from_post(cls, post: Post, author: User | None) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            is_draft=post.is_draft,
            published_at=post.published_at,
            user=UserSummary.from_user(author) if author else None,
        )


class PostEnvelope(BaseModel):
    data: PostResponse


class PaginationMeta(BaseModel):
    total: int
    page: int
    per_page: int
    last_page: int


class PaginationLinks(BaseModel):
    first: str
    last: str
    prev: str | None = None
    next: str | None = None


class PostListResponse(BaseModel):
    data: list[PostResponse]
    meta: PaginationMeta
    links: PaginationLinks

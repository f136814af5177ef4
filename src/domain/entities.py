from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

UserStatus = Literal["active", "disabled"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- User & Auth ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    display_name: str
    password_hash: str
    status: UserStatus = "active"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

class Session(BaseModel):
    id: str
    user_id: UUID
    token_hash: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=_utcnow)

# --- Posts ---

class Post(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    author_id: UUID
    title: str
    content: str
    is_draft: bool = False

    # None means "publish as soon as it is not a draft"
    published_at: datetime | None = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

class PostPage(BaseModel):
    """One page of visible posts plus the counts needed to paginate."""

    items: list[Post]
    total: int
    page: int
    page_size: int

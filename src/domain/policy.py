"""
Post visibility and ownership rules.

Every place that decides whether a post may be shown publicly calls
is_visible; every mutation gate calls is_owned_by. Nothing else in the
codebase re-states these conditions.
"""

from datetime import UTC, datetime

from src.domain.entities import Post, User


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_visible(post: Post, now: datetime) -> bool:
    """
    A post is public when it is not a draft and its publish time, if any,
    has been reached. The boundary is inclusive.
    """
    if post.is_draft:
        return False
    if post.published_at is None:
        return True
    return as_utc(post.published_at) <= as_utc(now)


def is_owned_by(post: Post, user: User | None) -> bool:
    if user is None:
        return False
    return str(post.author_id) == str(user.id)


class PostPolicy:
    """Per-action checks for posts, all built on the two predicates above."""

    def view(self, user: User | None, post: Post, now: datetime) -> bool:
        # Owners get no bypass on the public read path.
        return is_visible(post, now)

    def create(self, user: User | None) -> bool:
        return user is not None

    def update(self, user: User | None, post: Post) -> bool:
        return is_owned_by(post, user)

    def delete(self, user: User | None, post: Post) -> bool:
        return is_owned_by(post, user)

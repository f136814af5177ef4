"""
Posts component - Public listing and owner-only mutation of posts.

Read paths (list, get) need no actor and only ever return posts that pass
is_visible. Write paths need an authenticated actor; update and delete
additionally require that the actor owns the post.

Hidden posts and missing posts produce the same not_found error so that
drafts and scheduled posts leak nothing about their existence.
"""

from __future__ import annotations

import logging
from typing import Any

from src.domain.entities import Post, User
from src.domain.policy import PostPolicy, as_utc

from .models import (
    CreatePostInput,
    DeletePostInput,
    DeletePostOutput,
    GetPostInput,
    ListPostsInput,
    PostError,
    PostListOutput,
    PostOutput,
    UpdatePostInput,
)
from .ports import PostRepoPort, TimePort, UserLookupPort

logger = logging.getLogger(__name__)

DEFAULT_TITLE_MAX_LENGTH = 255
MUTABLE_FIELDS = frozenset({"title", "content", "is_draft", "published_at"})

_policy = PostPolicy()


# --- Errors ---


def _not_found() -> PostError:
    return PostError(code="not_found", message="Post not found")


def _unauthenticated() -> PostError:
    return PostError(code="unauthenticated", message="Not authenticated")


def _forbidden(action: str) -> PostError:
    return PostError(code="forbidden", message=f"You are not authorized to {action} this post")


# --- Validation ---


def _validate_text(name: str, value: Any, max_length: int | None) -> PostError | None:
    if not isinstance(value, str) or not value.strip():
        return PostError(
            code="validation_failed", message=f"The {name} field is required.", field=name
        )
    if max_length is not None and len(value.strip()) > max_length:
        return PostError(
            code="validation_failed",
            message=f"The {name} field must not be greater than {max_length} characters.",
            field=name,
        )
    return None


def _validate_fields(fields: dict[str, Any], title_max_length: int) -> list[PostError]:
    """Validate whichever post fields are present in `fields`."""
    errors: list[PostError] = []

    if "title" in fields:
        err = _validate_text("title", fields["title"], title_max_length)
        if err:
            errors.append(err)

    if "content" in fields:
        err = _validate_text("content", fields["content"], None)
        if err:
            errors.append(err)

    if "is_draft" in fields and not isinstance(fields["is_draft"], bool):
        errors.append(
            PostError(
                code="validation_failed",
                message="The is_draft field must be true or false.",
                field="is_draft",
            )
        )

    return errors


def _author_of(post: Post, users: UserLookupPort) -> User | None:
    return users.get_many([post.author_id]).get(post.author_id)


# --- Component Entry Points ---


def run_list(
    inp: ListPostsInput,
    *,
    repo: PostRepoPort,
    users: UserLookupPort,
    time: TimePort,
) -> PostListOutput:
    """
    List publicly visible posts, one page at a time.

    Pages are 1-indexed; anything below 1 is treated as the first page.
    """
    page = max(inp.page, 1)
    result = repo.list_visible(time.now_utc(), page, inp.page_size)
    authors = users.get_many({post.author_id for post in result.items})

    return PostListOutput(
        items=result.items,
        authors=authors,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


def run_get(
    inp: GetPostInput,
    *,
    repo: PostRepoPort,
    users: UserLookupPort,
    time: TimePort,
) -> PostOutput:
    """Fetch one post if it is publicly visible."""
    post = repo.get_by_id(inp.post_id)
    if post is None or not _policy.view(None, post, time.now_utc()):
        return PostOutput(errors=[_not_found()], success=False)

    return PostOutput(post=post, author=_author_of(post, users))


def run_create(
    inp: CreatePostInput,
    *,
    repo: PostRepoPort,
    title_max_length: int = DEFAULT_TITLE_MAX_LENGTH,
) -> PostOutput:
    """Create a post owned by the acting user."""
    if inp.actor is None or not _policy.create(inp.actor):
        return PostOutput(errors=[_unauthenticated()], success=False)

    errors = _validate_fields(
        {"title": inp.title, "content": inp.content, "is_draft": inp.is_draft},
        title_max_length,
    )
    if errors:
        return PostOutput(errors=errors, success=False)

    post = repo.create(
        author_id=inp.actor.id,
        title=inp.title.strip(),
        content=inp.content.strip(),
        is_draft=inp.is_draft,
        published_at=as_utc(inp.published_at) if inp.published_at else None,
    )
    logger.info("Post %s created by user %s", post.id, inp.actor.id)
    return PostOutput(post=post, author=inp.actor)


def run_update(
    inp: UpdatePostInput,
    *,
    repo: PostRepoPort,
    users: UserLookupPort,
    title_max_length: int = DEFAULT_TITLE_MAX_LENGTH,
) -> PostOutput:
    """Apply a partial update after checking ownership."""
    if inp.actor is None:
        return PostOutput(errors=[_unauthenticated()], success=False)

    existing = repo.get_by_id(inp.post_id)
    if existing is None:
        return PostOutput(errors=[_not_found()], success=False)

    if not _policy.update(inp.actor, existing):
        logger.warning("User %s denied update of post %s", inp.actor.id, existing.id)
        return PostOutput(errors=[_forbidden("update")], success=False)

    updates = {k: v for k, v in inp.updates.items() if k in MUTABLE_FIELDS}
    errors = _validate_fields(updates, title_max_length)
    if errors:
        return PostOutput(errors=errors, success=False)

    for key in ("title", "content"):
        if key in updates:
            updates[key] = updates[key].strip()
    if updates.get("published_at") is not None:
        updates["published_at"] = as_utc(updates["published_at"])

    updated = repo.update(inp.post_id, updates)
    if updated is None:
        # Deleted between the ownership check and the write
        return PostOutput(errors=[_not_found()], success=False)

    logger.info("Post %s updated by user %s (%s)", updated.id, inp.actor.id, sorted(updates))
    return PostOutput(post=updated, author=_author_of(updated, users) or inp.actor)


def run_delete(
    inp: DeletePostInput,
    *,
    repo: PostRepoPort,
) -> DeletePostOutput:
    """Hard-delete a post after checking ownership."""
    if inp.actor is None:
        return DeletePostOutput(errors=[_unauthenticated()], success=False)

    existing = repo.get_by_id(inp.post_id)
    if existing is None:
        return DeletePostOutput(errors=[_not_found()], success=False)

    if not _policy.delete(inp.actor, existing):
        logger.warning("User %s denied delete of post %s", inp.actor.id, existing.id)
        return DeletePostOutput(errors=[_forbidden("delete")], success=False)

    if not repo.delete(inp.post_id):
        return DeletePostOutput(errors=[_not_found()], success=False)

    logger.info("Post %s deleted by user %s", inp.post_id, inp.actor.id)
    return DeletePostOutput()


def run(
    inp: ListPostsInput | GetPostInput | CreatePostInput | UpdatePostInput | DeletePostInput,
    *,
    repo: PostRepoPort,
    users: UserLookupPort | None = None,
    time: TimePort | None = None,
    title_max_length: int = DEFAULT_TITLE_MAX_LENGTH,
) -> PostListOutput | PostOutput | DeletePostOutput:
    """Dispatch to the entry point matching the input type."""
    if isinstance(inp, ListPostsInput):
        assert users and time
        return run_list(inp, repo=repo, users=users, time=time)

    elif isinstance(inp, GetPostInput):
        assert users and time
        return run_get(inp, repo=repo, users=users, time=time)

    elif isinstance(inp, CreatePostInput):
        return run_create(inp, repo=repo, title_max_length=title_max_length)

    elif isinstance(inp, UpdatePostInput):
        assert users
        return run_update(inp, repo=repo, users=users, title_max_length=title_max_length)

    elif isinstance(inp, DeletePostInput):
        return run_delete(inp, repo=repo)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")

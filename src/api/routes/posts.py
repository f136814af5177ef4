from typing import NoReturn
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLitePostRepo, SQLiteUserRepo
from src.api.deps import get_clock, get_current_user, get_post_repo, get_rules, get_user_repo
from src.api.schemas import (
    PaginationLinks,
    PaginationMeta,
    PostCreateRequest,
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostUpdateRequest,
)
from src.components.posts import (
    CreatePostInput,
    DeletePostInput,
    GetPostInput,
    ListPostsInput,
    PostError,
    UpdatePostInput,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_update,
)
from src.domain.entities import User
from src.rules.models import Rules

router = APIRouter()

ERROR_STATUS = {
    "validation_failed": 422,
    "unauthenticated": 401,
    "forbidden": 403,
    "not_found": 404,
}


def _raise_for(errors: list[PostError]) -> NoReturn:
    """Translate component errors into an HTTPException."""
    first = errors[0]
    status_code = ERROR_STATUS[first.code]

    if first.code == "validation_failed":
        # Same shape FastAPI uses for request validation errors
        detail = [
            {"loc": ["body", e.field], "msg": e.message, "type": e.code}
            for e in errors
            if e.code == "validation_failed"
        ]
        raise HTTPException(status_code=status_code, detail=detail)

    headers = {"WWW-Authenticate": "Bearer"} if first.code == "unauthenticated" else None
    raise HTTPException(status_code=status_code, detail=first.message, headers=headers)


def _parse_post_id(post_id: str) -> UUID:
    # A malformed id cannot name an existing post.
    try:
        return UUID(post_id)
    except ValueError as err:
        raise HTTPException(status_code=404, detail="Post not found") from err


def _parse_page(page: str | None) -> int:
    try:
        return max(int(page), 1) if page is not None else 1
    except ValueError:
        return 1


@router.get("", response_model=PostListResponse)
def list_posts(
    request: Request,
    page: str | None = None,
    repo: SQLitePostRepo = Depends(get_post_repo),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> PostListResponse:
    """List publicly visible posts, paginated."""
    inp = ListPostsInput(page=_parse_page(page), page_size=rules.posts.page_size)
    result = run_list(inp, repo=repo, users=user_repo, time=clock)

    def page_url(n: int) -> str:
        return str(request.url.include_query_params(page=n))

    last_page = result.last_page
    return PostListResponse(
        data=[
            PostResponse.from_post(post, result.authors.get(post.author_id))
            for post in result.items
        ],
        meta=PaginationMeta(
            total=result.total,
            page=result.page,
            per_page=result.page_size,
            last_page=last_page,
        ),
        links=PaginationLinks(
            first=page_url(1),
            last=page_url(last_page),
            prev=page_url(result.page - 1) if result.page > 1 else None,
            next=page_url(result.page + 1) if result.page < last_page else None,
        ),
    )


@router.get("/{post_id}", response_model=PostEnvelope)
def show_post(
    post_id: str,
    repo: SQLitePostRepo = Depends(get_post_repo),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    clock: SystemClock = Depends(get_clock),
) -> PostEnvelope:
    """Get a single post. Drafts and scheduled posts are reported as missing."""
    inp = GetPostInput(post_id=_parse_post_id(post_id))
    result = run_get(inp, repo=repo, users=user_repo, time=clock)
    if not result.success or result.post is None:
        _raise_for(result.errors)

    return PostEnvelope(data=PostResponse.from_post(result.post, result.author))


@router.post("", response_model=PostEnvelope, status_code=201)
def create_post(
    req: PostCreateRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLitePostRepo = Depends(get_post_repo),
    rules: Rules = Depends(get_rules),
) -> PostEnvelope:
    """Create a post owned by the current user."""
    inp = CreatePostInput(
        actor=current_user,
        title=req.title,
        content=req.content,
        is_draft=req.is_draft,
        published_at=req.published_at,
    )
    result = run_create(inp, repo=repo, title_max_length=rules.posts.title_max_length)
    if not result.success or result.post is None:
        _raise_for(result.errors)

    return PostEnvelope(data=PostResponse.from_post(result.post, result.author))


@router.put("/{post_id}", response_model=PostEnvelope)
def update_post(
    post_id: str,
    req: PostUpdateRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLitePostRepo = Depends(get_post_repo),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    rules: Rules = Depends(get_rules),
) -> PostEnvelope:
    """Update fields of a post the current user owns."""
    inp = UpdatePostInput(
        actor=current_user,
        post_id=_parse_post_id(post_id),
        updates=req.model_dump(exclude_unset=True),
    )
    result = run_update(
        inp, repo=repo, users=user_repo, title_max_length=rules.posts.title_max_length
    )
    if not result.success or result.post is None:
        _raise_for(result.errors)

    return PostEnvelope(data=PostResponse.from_post(result.post, result.author))


@router.delete("/{post_id}", status_code=204)
def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    repo: SQLitePostRepo = Depends(get_post_repo),
) -> Response:
    """Delete a post the current user owns."""
    inp = DeletePostInput(actor=current_user, post_id=_parse_post_id(post_id))
    result = run_delete(inp, repo=repo)
    if not result.success:
        _raise_for(result.errors)

    return Response(status_code=status.HTTP_204_NO_CONTENT)

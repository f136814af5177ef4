"""Cross-layer checks that listing, single fetch and mutation agree with the predicates."""

from datetime import UTC, datetime, timedelta

import pytest

from src.adapters.clock import FixedClock
from src.adapters.sqlite.repos import SQLitePostRepo, SQLiteUserRepo
from src.components.posts import (
    DeletePostInput,
    GetPostInput,
    ListPostsInput,
    UpdatePostInput,
    run_delete,
    run_get,
    run_list,
    run_update,
)
from src.domain.policy import is_visible

BASE = datetime(2026, 6, 15, 12, 0, 0, tzinfo=UTC)
OFFSETS = [
    None,
    -timedelta(days=30),
    -timedelta(seconds=1),
    timedelta(0),
    timedelta(seconds=1),
    timedelta(days=30),
]


@pytest.fixture
def seeded(post_repo: SQLitePostRepo, make_user):
    author = make_user("author@example.com")
    posts = []
    for is_draft in (False, True):
        for offset in OFFSETS:
            published_at = None if offset is None else BASE + offset
            posts.append(
                post_repo.create(
                    author.id,
                    f"draft={is_draft} offset={offset}",
                    "body",
                    is_draft=is_draft,
                    published_at=published_at,
                )
            )
    return author, posts


@pytest.mark.parametrize(
    "now",
    [BASE - timedelta(days=60), BASE - timedelta(seconds=1), BASE, BASE + timedelta(days=60)],
)
def test_listing_and_fetch_agree_with_is_visible(
    seeded, post_repo: SQLitePostRepo, user_repo: SQLiteUserRepo, now
):
    _, posts = seeded
    clock = FixedClock(now)

    listed = run_list(
        ListPostsInput(page=1, page_size=100), repo=post_repo, users=user_repo, time=clock
    )
    listed_ids = [p.id for p in listed.items]

    expected = [p.id for p in posts if is_visible(p, now)]
    assert listed_ids == expected
    assert listed.total == len(expected)
    assert all(is_visible(p, now) for p in listed.items)

    for post in posts:
        inp = GetPostInput(post_id=post.id)
        fetched = run_get(inp, repo=post_repo, users=user_repo, time=clock)
        assert fetched.success is is_visible(post, now)


def test_only_the_author_mutates(seeded, post_repo: SQLitePostRepo, user_repo, make_user):
    author, posts = seeded
    intruder = make_user("intruder@example.com")

    for post in posts:
        upd = run_update(
            UpdatePostInput(actor=intruder, post_id=post.id, updates={"title": "x"}),
            repo=post_repo,
            users=user_repo,
        )
        rm = run_delete(DeletePostInput(actor=intruder, post_id=post.id), repo=post_repo)
        assert upd.errors[0].code == "forbidden"
        assert rm.errors[0].code == "forbidden"
        assert post_repo.get_by_id(post.id) == post

    for post in posts:
        rm = run_delete(DeletePostInput(actor=author, post_id=post.id), repo=post_repo)
        assert rm.success is True

    assert post_repo.list_visible(BASE + timedelta(days=60)).total == 0

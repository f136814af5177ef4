from datetime import UTC, datetime
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.api.schemas import PostCreateRequest, PostResponse, PostUpdateRequest
from src.domain.entities import Post, User


class TestPostCreateRequest:
    def test_all_required_fields_reported(self):
        with pytest.raises(ValidationError) as exc:
            PostCreateRequest.model_validate({})

        fields = {err["loc"][0] for err in exc.value.errors()}
        assert fields == {"title", "content", "is_draft"}

    def test_whitespace_only_text_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            PostCreateRequest.model_validate({"title": "   ", "content": "\n", "is_draft": False})

        assert {err["loc"][0] for err in exc.value.errors()} == {"title", "content"}

    @pytest.mark.parametrize("value", ["not-a-boolean", "yes", "true", "on", 1, 0])
    def test_is_draft_must_be_boolean(self, value):
        with pytest.raises(ValidationError):
            PostCreateRequest.model_validate({"title": "T", "content": "C", "is_draft": value})

    def test_published_at_is_optional(self):
        req = PostCreateRequest.model_validate({"title": " T ", "content": "C", "is_draft": False})

        assert req.title == "T"
        assert req.published_at is None


class TestPostUpdateRequest:
    def test_empty_body_sets_nothing(self):
        assert PostUpdateRequest.model_validate({}).model_dump(exclude_unset=True) == {}

    def test_explicit_null_published_at_is_kept(self):
        req = PostUpdateRequest.model_validate({"published_at": None})

        assert req.model_dump(exclude_unset=True) == {"published_at": None}

    @pytest.mark.parametrize("field", ["title", "content", "is_draft"])
    def test_required_fields_may_not_be_null(self, field):
        with pytest.raises(ValidationError):
            PostUpdateRequest.model_validate({field: None})

    def test_blank_text_is_left_to_the_component(self):
        req = PostUpdateRequest.model_validate({"title": "", "content": "  "})

        assert req.model_dump(exclude_unset=True) == {"title": "", "content": "  "}

    @pytest.mark.parametrize("value", ["nope", "yes", "false", 1])
    def test_is_draft_must_be_boolean(self, value):
        with pytest.raises(ValidationError):
            PostUpdateRequest.model_validate({"is_draft": value})


def test_post_response_shape():
    author = User(email="a@example.com", display_name="Alice", password_hash="x")
    post = Post(
        id=uuid4(),
        author_id=author.id,
        title="T",
        content="C",
        published_at=datetime(2026, 1, 1, tzinfo=UTC),
    )

    body = PostResponse.from_post(post, author).model_dump(mode="json")

    assert set(body) == {"id", "title", "content", "is_draft", "published_at", "user"}
    assert body["user"] == {"id": str(author.id), "name": "Alice", "email": "a@example.com"}

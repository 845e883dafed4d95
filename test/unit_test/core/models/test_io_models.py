"""Unit tests for request and response schemas."""

import pytest
from pydantic import ValidationError

from scriptorium.core.models.domain.enums import ReportTarget, VoteValue
from scriptorium.core.models.io import (
    BlogPostCreate,
    CodeTemplateRead,
    CommentCreate,
    Page,
    ReportCreate,
    ReportRead,
    UserRegister,
    VoteRequest,
    VoteStats,
)
from scriptorium.core.models.io.common import coerce_tags, page_offset


class TestUserRegister:
    """Test registration validation."""

    def test_valid(self):
        payload = UserRegister(firstname="Ada", lastname="Lovelace", email="ada@example.com", password="secret")
        assert payload.email == "ada@example.com"

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError):
            UserRegister(firstname="Ada", lastname="Lovelace", email="ada@example.com", password="12345")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            UserRegister(firstname="   ", lastname="Lovelace", email="ada@example.com", password="secret")

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            UserRegister(firstname="Ada", lastname="Lovelace", email="not-an-email", password="secret")


class TestContentSchemas:
    """Test blog post, comment and vote schemas."""

    def test_blank_comment_rejected(self):
        with pytest.raises(ValidationError):
            CommentCreate(blog_post_id=1, content=" \n ")

    def test_blog_post_defaults(self):
        post = BlogPostCreate(title="T", description="D", content="C")
        assert post.tags == []
        assert post.code_template_ids == []

    @pytest.mark.parametrize("value", [2, -2, "up"])
    def test_vote_value_must_be_known(self, value):
        with pytest.raises(ValidationError):
            VoteRequest(value=value)

    def test_vote_clear(self):
        assert VoteRequest(value=0).value == VoteValue.clear

    def test_vote_stats_score(self):
        stats = VoteStats.from_counts(5, 2)
        assert (stats.upvotes, stats.downvotes, stats.score) == (5, 2, 3)


class TestReports:
    """Test report target validation."""

    def test_exactly_one_target(self):
        with pytest.raises(ValidationError):
            ReportCreate(reason="spam")
        with pytest.raises(ValidationError):
            ReportCreate(reason="spam", blog_post_id=1, comment_id=2)

    def test_target_computed(self):
        report = ReportRead(id=1, reason="spam", reporter_id=1, comment_id=3, created_at="2026-01-01T00:00:00")
        assert report.target == ReportTarget.comment
        assert report.model_dump()["target"] == ReportTarget.comment


class TestTags:
    """Test tag coercion on reads."""

    @pytest.mark.parametrize(
        "value,expected",
        [(None, []), ('["a", "b"]', ["a", "b"]), ("a,b", ["a", "b"]), (["a", " a ", "b"], ["a", "b"])],
    )
    def test_coerce_tags(self, value, expected):
        assert coerce_tags(value) == expected

    def test_template_read_parses_stored_tags(self):
        template = CodeTemplateRead(
            id=1,
            title="T",
            description="",
            code="x",
            language="python",
            tags='["algo"]',
            author_id=1,
            is_forked=False,
            created_at="2026-01-01T00:00:00",
            updated_at="2026-01-01T00:00:00",
        )
        assert template.tags == ["algo"]


class TestPage:
    """Test pagination envelope."""

    def test_build_computes_pages(self):
        page = Page[int].build([1, 2], total=5, page=1, limit=2)
        assert page.pages == 3

    def test_empty_page(self):
        assert Page[int].build([], total=0, page=1, limit=10).pages == 0

    def test_page_offset(self):
        assert page_offset(3, 10) == 20

"""
Unit tests for content reporting.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

REPORTS_URL = "/api/v1/reports"


async def create_post(client: AsyncClient, user) -> dict:
    response = await client.post(
        "/api/v1/blog-posts", json={"title": "T", "description": "D", "content": "C"}, headers=user.headers
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateReport:
    """Test reporting blog posts and comments."""

    async def test_report_blog_post(self, client: AsyncClient, make_user):
        author = await make_user("author@example.com")
        reporter = await make_user("reporter@example.com")
        post = await create_post(client, author)

        response = await client.post(
            REPORTS_URL,
            json={"reason": " Spam ", "additional_info": "Link farm", "blog_post_id": post["id"]},
            headers=reporter.headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["reason"] == "Spam"
        assert data["additional_info"] == "Link farm"
        assert data["reporter_id"] == reporter.id
        assert data["blog_post_id"] == post["id"]
        assert data["comment_id"] is None
        assert data["target"] == "blog_post"

    async def test_report_comment(self, client: AsyncClient, make_user):
        user = await make_user()
        post = await create_post(client, user)
        comment = (
            await client.post(
                "/api/v1/comments", json={"blog_post_id": post["id"], "content": "Rude"}, headers=user.headers
            )
        ).json()

        response = await client.post(
            REPORTS_URL, json={"reason": "Abusive", "comment_id": comment["id"]}, headers=user.headers
        )

        assert response.status_code == 201
        assert response.json()["target"] == "comment"

    async def test_both_targets_rejected(self, client: AsyncClient, make_user):
        user = await make_user()
        response = await client.post(
            REPORTS_URL, json={"reason": "x", "blog_post_id": 1, "comment_id": 1}, headers=user.headers
        )
        assert response.status_code == 422

    async def test_no_target_rejected(self, client: AsyncClient, make_user):
        user = await make_user()
        response = await client.post(REPORTS_URL, json={"reason": "x"}, headers=user.headers)
        assert response.status_code == 422

    async def test_blank_reason_rejected(self, client: AsyncClient, make_user):
        user = await make_user()
        post = await create_post(client, user)
        response = await client.post(
            REPORTS_URL, json={"reason": "  ", "blog_post_id": post["id"]}, headers=user.headers
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("target", ["blog_post_id", "comment_id"])
    async def test_missing_target(self, client: AsyncClient, make_user, target):
        user = await make_user()
        response = await client.post(REPORTS_URL, json={"reason": "x", target: 999}, headers=user.headers)
        assert response.status_code == 404

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.post(REPORTS_URL, json={"reason": "x", "blog_post_id": 1})
        assert response.status_code == 401

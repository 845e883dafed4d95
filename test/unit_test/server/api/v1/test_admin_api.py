"""
Unit tests for the administration endpoints.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

ADMIN_URL = "/api/v1/admin"


async def create_post(client: AsyncClient, user, title: str = "Post") -> dict:
    response = await client.post(
        "/api/v1/blog-posts", json={"title": title, "description": "D", "content": "C"}, headers=user.headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def create_comment(client: AsyncClient, user, post_id: int, content: str = "Hi") -> dict:
    response = await client.post(
        "/api/v1/comments", json={"blog_post_id": post_id, "content": content}, headers=user.headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def report(client: AsyncClient, user, **target) -> None:
    response = await client.post("/api/v1/reports", json={"reason": "Bad", **target}, headers=user.headers)
    assert response.status_code == 201, response.text


class TestAdminAccess:
    """Test that the dashboard is restricted to administrators."""

    @pytest.mark.parametrize("path", ["/overview", "/reports", "/blog-posts", "/comments", "/users"])
    async def test_regular_user_forbidden(self, client: AsyncClient, make_user, path):
        user = await make_user()
        response = await client.get(f"{ADMIN_URL}{path}", headers=user.headers)
        assert response.status_code == 403

    async def test_visitor_unauthorized(self, client: AsyncClient):
        response = await client.get(f"{ADMIN_URL}/overview")
        assert response.status_code == 401


class TestOverview:
    """Test site counters."""

    async def test_counts(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")
        post = await create_post(client, user)
        await create_post(client, user, "Second")
        comment = await create_comment(client, user, post["id"])
        await client.put(
            f"{ADMIN_URL}/comments/{comment['id']}/visibility", json={"hidden": True}, headers=admin.headers
        )
        await report(client, user, blog_post_id=post["id"])

        response = await client.get(f"{ADMIN_URL}/overview", headers=admin.headers)

        assert response.status_code == 200
        assert response.json() == {
            "users": 2,
            "blog_posts": 2,
            "hidden_blog_posts": 0,
            "comments": 1,
            "hidden_comments": 1,
            "code_templates": 0,
            "reports": 1,
        }


class TestReportedContent:
    """Test report listings and content ranked by reports."""

    async def test_list_reports_by_target(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")
        post = await create_post(client, user)
        comment = await create_comment(client, user, post["id"])
        await report(client, user, blog_post_id=post["id"])
        await report(client, user, comment_id=comment["id"])

        everything = await client.get(f"{ADMIN_URL}/reports", headers=admin.headers)
        comments_only = await client.get(f"{ADMIN_URL}/reports", params={"target": "comment"}, headers=admin.headers)

        assert everything.json()["total"] == 2
        assert comments_only.json()["total"] == 1
        assert comments_only.json()["items"][0]["comment_id"] == comment["id"]

    async def test_blog_posts_most_reported_first(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")
        reported = await create_post(client, user, "Reported")
        await create_post(client, user, "Clean")
        await report(client, user, blog_post_id=reported["id"])
        await report(client, admin, blog_post_id=reported["id"])

        response = await client.get(f"{ADMIN_URL}/blog-posts", headers=admin.headers)

        items = response.json()["items"]
        assert [(p["title"], p["report_count"]) for p in items] == [("Reported", 2), ("Clean", 0)]

    async def test_blog_posts_carry_score_and_comment_count(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")
        post = await create_post(client, user, "Discussed")
        await create_comment(client, user, post["id"])
        await create_comment(client, admin, post["id"])
        vote = await client.post(f"/api/v1/blog-posts/{post['id']}/vote", json={"value": 1}, headers=admin.headers)
        assert vote.status_code == 200

        response = await client.get(f"{ADMIN_URL}/blog-posts", headers=admin.headers)

        item = response.json()["items"][0]
        assert (item["score"], item["comment_count"], item["report_count"]) == (1, 2, 0)

    async def test_comments_most_reported_first_including_hidden(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")
        post = await create_post(client, user)
        await create_comment(client, user, post["id"], "fine")
        flagged = await create_comment(client, user, post["id"], "flagged")
        await report(client, user, comment_id=flagged["id"])
        await client.put(
            f"{ADMIN_URL}/comments/{flagged['id']}/visibility", json={"hidden": True}, headers=admin.headers
        )

        response = await client.get(f"{ADMIN_URL}/comments", headers=admin.headers)

        items = response.json()["items"]
        assert [(c["content"], c["report_count"], c["is_hidden"]) for c in items] == [
            ("flagged", 1, True),
            ("fine", 0, False),
        ]


class TestVisibility:
    """Test hiding and unhiding content."""

    async def test_hide_and_unhide_blog_post(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")
        post = await create_post(client, user)
        url = f"{ADMIN_URL}/blog-posts/{post['id']}/visibility"

        hidden = await client.put(url, json={"hidden": True}, headers=admin.headers)
        assert hidden.status_code == 200
        assert hidden.json()["is_hidden"] is True
        assert (await client.get(f"/api/v1/blog-posts/{post['id']}")).status_code == 404

        shown = await client.put(url, json={"hidden": False}, headers=admin.headers)
        assert shown.json()["is_hidden"] is False
        assert (await client.get(f"/api/v1/blog-posts/{post['id']}")).status_code == 200

    async def test_visibility_response_keeps_counts(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")
        post = await create_post(client, user)
        comment = await create_comment(client, user, post["id"])
        await client.post(f"/api/v1/blog-posts/{post['id']}/vote", json={"value": -1}, headers=admin.headers)
        await report(client, admin, blog_post_id=post["id"])
        await report(client, admin, comment_id=comment["id"])

        hidden_post = await client.put(
            f"{ADMIN_URL}/blog-posts/{post['id']}/visibility", json={"hidden": True}, headers=admin.headers
        )
        hidden_comment = await client.put(
            f"{ADMIN_URL}/comments/{comment['id']}/visibility", json={"hidden": True}, headers=admin.headers
        )

        body = hidden_post.json()
        assert (body["score"], body["comment_count"], body["report_count"]) == (-1, 1, 1)
        assert hidden_comment.json()["report_count"] == 1


    async def test_missing_content(self, client: AsyncClient, make_user):
        admin = await make_user(admin=True)

        post = await client.put(f"{ADMIN_URL}/blog-posts/999/visibility", json={"hidden": True}, headers=admin.headers)
        comment = await client.put(f"{ADMIN_URL}/comments/999/visibility", json={"hidden": True}, headers=admin.headers)

        assert post.status_code == 404
        assert comment.status_code == 404


class TestUserManagement:
    """Test listing, updating and deleting users."""

    async def test_list_users_with_contact_details(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        await make_user("user@example.com")

        response = await client.get(f"{ADMIN_URL}/users", headers=admin.headers)

        data = response.json()
        assert data["total"] == 2
        assert [u["email"] for u in data["items"]] == ["admin@example.com", "user@example.com"]

    async def test_ban_blocks_writes(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")

        response = await client.patch(f"{ADMIN_URL}/users/{user.id}", json={"is_banned": True}, headers=admin.headers)

        assert response.status_code == 200
        assert response.json()["is_banned"] is True
        blocked = await client.post(
            "/api/v1/code-templates", json={"title": "T", "code": "x", "language": "python"}, headers=user.headers
        )
        assert blocked.status_code == 403

    async def test_promote_user(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")

        response = await client.patch(f"{ADMIN_URL}/users/{user.id}", json={"role": "ADMIN"}, headers=admin.headers)

        assert response.json()["role"] == "ADMIN"
        assert (await client.get(f"{ADMIN_URL}/overview", headers=user.headers)).status_code == 200

    @pytest.mark.parametrize("payload", [{"role": "USER"}, {"is_banned": True}])
    async def test_cannot_demote_or_ban_self(self, client: AsyncClient, make_user, payload):
        admin = await make_user(admin=True)
        response = await client.patch(f"{ADMIN_URL}/users/{admin.id}", json=payload, headers=admin.headers)
        assert response.status_code == 400

    async def test_update_missing_user(self, client: AsyncClient, make_user):
        admin = await make_user(admin=True)
        response = await client.patch(f"{ADMIN_URL}/users/999", json={"is_banned": True}, headers=admin.headers)
        assert response.status_code == 404

    async def test_delete_user_removes_content(self, client: AsyncClient, make_user):
        admin = await make_user("admin@example.com", admin=True)
        user = await make_user("user@example.com")
        post = await create_post(client, user)
        own = await create_post(client, admin, "Admin post")
        await create_comment(client, user, own["id"])

        response = await client.delete(f"{ADMIN_URL}/users/{user.id}", headers=admin.headers)

        assert response.status_code == 204
        assert (await client.get(f"/api/v1/blog-posts/{post['id']}")).status_code == 404
        assert (await client.get(f"/api/v1/blog-posts/{own['id']}/comments")).json() == []
        overview = (await client.get(f"{ADMIN_URL}/overview", headers=admin.headers)).json()
        assert overview["users"] == 1
        assert overview["comments"] == 0

    async def test_cannot_delete_self(self, client: AsyncClient, make_user):
        admin = await make_user(admin=True)
        response = await client.delete(f"{ADMIN_URL}/users/{admin.id}", headers=admin.headers)
        assert response.status_code == 400

    async def test_delete_missing_user(self, client: AsyncClient, make_user):
        admin = await make_user(admin=True)
        response = await client.delete(f"{ADMIN_URL}/users/999", headers=admin.headers)
        assert response.status_code == 404

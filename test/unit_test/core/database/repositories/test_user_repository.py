"""Unit tests for UserRepository."""

from sqlmodel import select

from scriptorium.core.database.entities import BlogPost, CodeTemplate, Comment, Rating, Report, User
from scriptorium.core.database.repositories import RatingRepository, UserRepository


class TestGetByEmail:
    """Test email lookup."""

    async def test_lookup_ignores_case(self, in_memory_session, make_user):
        user = await make_user("ada@example.com")
        found = await UserRepository(in_memory_session).get_by_email("  ADA@Example.com ")
        assert found is not None
        assert found.id == user.id

    async def test_unknown_email(self, in_memory_session):
        assert await UserRepository(in_memory_session).get_by_email("nobody@example.com") is None


class TestDelete:
    """Test deleting a user with all of their content."""

    async def test_delete_cascades_to_content(
        self, in_memory_session, make_user, make_post, make_comment, make_template
    ):
        doomed = await make_user("doomed@example.com")
        other = await make_user("other@example.com")
        template = await make_template(doomed)
        own_post = await make_post(doomed, template_ids=[template.id])
        other_post = await make_post(other)
        await make_comment(other, own_post, "on doomed post")
        own_comment = await make_comment(doomed, other_post, "by doomed")
        other_comment = await make_comment(other, other_post, "kept")
        ratings = RatingRepository(in_memory_session)
        await ratings.set_vote(doomed.id, 1, blog_post_id=other_post.id)
        await ratings.set_vote(other.id, 1, comment_id=own_comment.id)
        in_memory_session.add(Report(reason="spam", reporter_id=doomed.id, comment_id=other_comment.id))
        await in_memory_session.commit()

        assert await UserRepository(in_memory_session).delete(doomed.id) is True

        users = (await in_memory_session.execute(select(User.id))).scalars().all()
        posts = (await in_memory_session.execute(select(BlogPost.id))).scalars().all()
        comments = (await in_memory_session.execute(select(Comment.id))).scalars().all()
        assert users == [other.id]
        assert posts == [other_post.id]
        assert comments == [other_comment.id]
        assert (await in_memory_session.execute(select(CodeTemplate))).scalars().all() == []
        assert (await in_memory_session.execute(select(Rating))).scalars().all() == []
        assert (await in_memory_session.execute(select(Report))).scalars().all() == []

    async def test_delete_missing_returns_false(self, in_memory_session):
        assert await UserRepository(in_memory_session).delete(123) is False


class TestList:
    """Test listing and counting."""

    async def test_list_in_registration_order_with_filters(self, in_memory_session, make_user):
        first = await make_user("a@example.com")
        admin = await make_user("b@example.com", role="ADMIN")
        repo = UserRepository(in_memory_session)

        assert [u.id for u in await repo.list()] == [first.id, admin.id]
        assert [u.id for u in await repo.list(filters={"role": "ADMIN"})] == [admin.id]
        assert await repo.count() == 2

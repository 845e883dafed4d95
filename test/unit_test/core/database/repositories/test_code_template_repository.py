"""Unit tests for CodeTemplateRepository."""

import pytest

from scriptorium.core.database.repositories import BlogPostRepository, CodeTemplateRepository


@pytest.fixture
async def author(make_user):
    return await make_user("author@example.com")


class TestSearch:
    """Test template search; every given criterion must match."""

    async def test_filters_are_and_combined(self, in_memory_session, author, make_template):
        match = await make_template(author, title="Binary search", tags=["algorithms"])
        await make_template(author, title="Binary tree", tags=["data-structures"])
        await make_template(author, title="Sorting", tags=["algorithms"])

        items, total = await CodeTemplateRepository(in_memory_session).search(title="binary", tags=["algorithms"])

        assert total == 1
        assert items[0].id == match.id

    async def test_tags_match_any_whole_tag(self, in_memory_session, author, make_template):
        py = await make_template(author, title="A", tags=["python"])
        js = await make_template(author, title="B", tags=["js"])
        await make_template(author, title="C", tags=["python3"])

        items, _ = await CodeTemplateRepository(in_memory_session).search(tags=["python", "js"])

        assert {t.id for t in items} == {py.id, js.id}

    async def test_content_matches_code_or_description(self, in_memory_session, author, make_template):
        in_code = await make_template(author, title="A", code="def fibonacci(n): ...")
        in_description = await make_template(author, title="B", description="Fibonacci numbers")
        await make_template(author, title="C")

        items, _ = await CodeTemplateRepository(in_memory_session).search(content="FIBONACCI")

        assert {t.id for t in items} == {in_code.id, in_description.id}

    async def test_author_and_fork_filters(self, in_memory_session, author, make_user, make_template):
        other = await make_user("other@example.com")
        original = await make_template(other, title="Original")
        repo = CodeTemplateRepository(in_memory_session)
        fork = await repo.fork(original, author_id=author.id, title="Mine", description="", tags="[]")

        mine, _ = await repo.search(author_id=author.id)
        originals, _ = await repo.search(include_forks=False)

        assert [t.id for t in mine] == [fork.id]
        assert [t.id for t in originals] == [original.id]

    async def test_newest_first_with_total(self, in_memory_session, author, make_template):
        templates = [await make_template(author, title=f"T{i}") for i in range(3)]

        items, total = await CodeTemplateRepository(in_memory_session).search(limit=2)

        assert total == 3
        assert [t.id for t in items] == [templates[2].id, templates[1].id]


class TestFork:
    """Test forking templates."""

    async def test_fork_copies_code_and_language(self, in_memory_session, author, make_user, make_template):
        forker = await make_user("forker@example.com")
        original = await make_template(author, title="Hello", code="print(1)", language="python")

        fork = await CodeTemplateRepository(in_memory_session).fork(
            original, author_id=forker.id, title="Hello (Forked)", description="copy", tags='["x"]'
        )

        assert fork.id != original.id
        assert fork.code == "print(1)"
        assert fork.language == "python"
        assert fork.author_id == forker.id
        assert fork.forked_from_id == original.id
        assert fork.is_forked is True


class TestDelete:
    """Test deleting templates."""

    async def test_delete_detaches_forks_and_unlinks_posts(self, in_memory_session, author, make_template, make_post):
        original = await make_template(author)
        repo = CodeTemplateRepository(in_memory_session)
        fork = await repo.fork(original, author_id=author.id, title="Fork", description="", tags="[]")
        post = await make_post(author, template_ids=[original.id])

        assert await repo.delete(original.id) is True

        remaining_fork = await repo.get_by_id(fork.id)
        assert remaining_fork is not None
        assert remaining_fork.forked_from_id is None
        assert remaining_fork.is_forked is True
        assert await repo.list_for_blog_post(post.id) == []
        assert await BlogPostRepository(in_memory_session).get_by_id(post.id) is not None

    async def test_existing_ids(self, in_memory_session, author, make_template):
        template = await make_template(author)
        assert await CodeTemplateRepository(in_memory_session).existing_ids([template.id, 999]) == {template.id}

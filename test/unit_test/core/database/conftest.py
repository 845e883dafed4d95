"""Test configuration for database unit tests.

Every test gets a fresh in-memory SQLite database built from the ORM
metadata, plus small factories for the entities most tests need.
"""

from __future__ import annotations

from typing import AsyncGenerator, Awaitable, Callable, List, Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.core.database.base import dump_tags
from scriptorium.core.database.entities import BlogPost, CodeTemplate, Comment, User
from scriptorium.core.database.repositories import BlogPostRepository
from scriptorium.core.database.utils import create_all, create_engine, create_sessionmaker


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine with all tables."""
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture
def make_user(in_memory_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make(email: str = "ada@example.com", role: str = "USER") -> User:
        user = User(email=email, firstname="Ada", lastname="Lovelace", role=role, password_hash="x")
        in_memory_session.add(user)
        await in_memory_session.commit()
        await in_memory_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_template(in_memory_session: AsyncSession) -> Callable[..., Awaitable[CodeTemplate]]:
    async def _make(
        author: User,
        title: str = "Hello",
        code: str = "print('hello')",
        language: str = "python",
        description: str = "",
        tags: Optional[List[str]] = None,
    ) -> CodeTemplate:
        template = CodeTemplate(
            title=title,
            code=code,
            language=language,
            description=description,
            tags=dump_tags(tags),
            author_id=author.id,
        )
        in_memory_session.add(template)
        await in_memory_session.commit()
        await in_memory_session.refresh(template)
        return template

    return _make


@pytest.fixture
def make_post(in_memory_session: AsyncSession) -> Callable[..., Awaitable[BlogPost]]:
    async def _make(
        author: User,
        title: str = "A post",
        content: str = "Body",
        tags: Optional[List[str]] = None,
        template_ids: Optional[List[int]] = None,
        hidden: bool = False,
    ) -> BlogPost:
        post = BlogPost(
            title=title,
            description="Summary",
            content=content,
            tags=dump_tags(tags),
            author_id=author.id,
            is_hidden=hidden,
        )
        return await BlogPostRepository(in_memory_session).create_with_templates(post, template_ids or [])

    return _make


@pytest.fixture
def make_comment(in_memory_session: AsyncSession) -> Callable[..., Awaitable[Comment]]:
    async def _make(
        author: User, post: BlogPost, content: str = "Nice", parent: Optional[Comment] = None, hidden: bool = False
    ) -> Comment:
        comment = Comment(
            content=content,
            author_id=author.id,
            blog_post_id=post.id,
            parent_comment_id=parent.id if parent else None,
            is_hidden=hidden,
        )
        in_memory_session.add(comment)
        await in_memory_session.commit()
        await in_memory_session.refresh(comment)
        return comment

    return _make

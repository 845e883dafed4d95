"""
Code template repository interface and implementation.

This module provides data access for code templates: search, forking
support and deletion. Deleting a template detaches it from blog posts and
turns its forks into standalone templates.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from sqlalchemy import delete, false, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.blog_posts import BlogPostCodeTemplateLink
from ..entities.code_templates import CodeTemplate
from .base import AsyncBaseRepository, QueryBuilder


class CodeTemplateRepository(AsyncBaseRepository[CodeTemplate]):
    """Repository for code template data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async session for database operations
        """
        super().__init__(session, CodeTemplate)

    async def fork(self, original: CodeTemplate, *, author_id: int, title: str, description: str, tags: str) -> CodeTemplate:
        """
        Copy a template's code and language into a new template owned by ``author_id``.

        Args:
            original: Template being forked
            author_id: Owner of the fork
            title: Title of the fork
            description: Description of the fork
            tags: JSON tags string of the fork

        Returns:
            The persisted fork
        """
        forked = CodeTemplate(
            title=title,
            description=description,
            code=original.code,
            language=original.language,
            tags=tags,
            author_id=author_id,
            forked_from_id=original.id,
            is_forked=True,
        )
        return await self.create(forked)

    async def search(
        self,
        *,
        title: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        content: Optional[str] = None,
        author_id: Optional[int] = None,
        include_forks: bool = True,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[CodeTemplate], int]:
        """
        Search templates, newest first.

        Every given criterion must match. ``tags`` matches templates carrying
        any of the tags; ``content`` matches the code or the description.

        Returns:
            Tuple of (page of templates, total number of matches)
        """
        conditions = []
        if title:
            conditions.append(QueryBuilder.contains(CodeTemplate.title, title))
        if tags:
            conditions.append(or_(*(QueryBuilder.contains(CodeTemplate.tags, f'"{tag}"') for tag in tags)))
        if content:
            conditions.append(
                or_(
                    QueryBuilder.contains(CodeTemplate.code, content),
                    QueryBuilder.contains(CodeTemplate.description, content),
                )
            )
        if author_id is not None:
            conditions.append(CodeTemplate.author_id == author_id)
        if not include_forks:
            conditions.append(CodeTemplate.is_forked == false())

        stmt = select(CodeTemplate).where(*conditions)
        stmt = stmt.order_by(CodeTemplate.created_at.desc(), CodeTemplate.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        items = list(result.scalars().all())

        count_stmt = select(func.count(CodeTemplate.id)).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return items, int(total)

    async def existing_ids(self, template_ids: Iterable[int]) -> Set[int]:
        """Return the subset of ``template_ids`` that exist."""
        ids = set(template_ids)
        if not ids:
            return set()
        result = await self.session.execute(select(CodeTemplate.id).where(CodeTemplate.id.in_(ids)))
        return set(result.scalars().all())

    async def list_for_blog_post(self, blog_post_id: int) -> List[CodeTemplate]:
        """Get the templates linked to a blog post, in id order."""
        stmt = (
            select(CodeTemplate)
            .join(BlogPostCodeTemplateLink, BlogPostCodeTemplateLink.code_template_id == CodeTemplate.id)
            .where(BlogPostCodeTemplateLink.blog_post_id == blog_post_id)
            .order_by(CodeTemplate.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, template_id: int) -> bool:
        """
        Delete a code template.

        Args:
            template_id: Template ID to delete

        Returns:
            True if deleted, False if not found
        """
        template = await self.get_by_id(template_id)
        if template is None:
            return False
        await self.purge([template_id])
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[CodeTemplate]:
        """List templates newest first, filtered by ``author_id``, ``language`` or ``is_forked``."""
        stmt = select(CodeTemplate).order_by(CodeTemplate.created_at.desc(), CodeTemplate.id.desc())
        stmt = QueryBuilder.apply_filters(stmt, CodeTemplate, filters or {})
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def purge(self, template_ids: Iterable[int]) -> None:
        """Delete templates and their blog post links without committing; forks are detached."""
        ids = list(template_ids)
        if not ids:
            return
        await self.session.execute(
            delete(BlogPostCodeTemplateLink).where(BlogPostCodeTemplateLink.code_template_id.in_(ids))
        )
        await self.session.execute(
            update(CodeTemplate)
            .where(CodeTemplate.forked_from_id.in_(ids))
            .values(forked_from_id=None, updated_at=utc_now())
        )
        await self.session.execute(delete(CodeTemplate).where(CodeTemplate.id.in_(ids)))

    async def purge_for_author(self, author_id: int) -> None:
        """Delete every template owned by a user without committing."""
        result = await self.session.execute(select(CodeTemplate.id).where(CodeTemplate.author_id == author_id))
        await self.purge(result.scalars().all())

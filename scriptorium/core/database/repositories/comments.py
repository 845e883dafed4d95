"""
Comment repository interface and implementation.

This module provides data access for comments and their replies. Deleting
a comment removes its whole reply subtree together with the votes and
reports attached to any removed comment.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import delete, false, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.comments import Comment
from ..entities.ratings import Rating
from ..entities.reports import Report
from .base import AsyncBaseRepository, QueryBuilder
from .reports import comment_report_count_subquery


class CommentRepository(AsyncBaseRepository[Comment]):
    """Repository for comment data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async session for database operations
        """
        super().__init__(session, Comment)

    async def list_for_post(
        self,
        blog_post_id: int,
        *,
        viewer_id: Optional[int] = None,
        include_hidden: bool = False,
    ) -> List[Comment]:
        """
        Get every comment of a blog post the viewer may see.

        Args:
            blog_post_id: Blog post whose comments to load
            viewer_id: Authenticated viewer; their own hidden comments stay visible
            include_hidden: Return hidden comments of anyone (administrators)

        Returns:
            Comments in creation order
        """
        stmt = select(Comment).where(Comment.blog_post_id == blog_post_id)
        if not include_hidden:
            visible = Comment.is_hidden == false()
            if viewer_id is not None:
                visible = or_(visible, Comment.author_id == viewer_id)
            stmt = stmt.where(visible)
        stmt = stmt.order_by(Comment.created_at, Comment.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_with_report_counts(
        self, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Tuple[Comment, int]]:
        """List all comments (hidden included) by report count, most reported first."""
        report_count = comment_report_count_subquery().label("report_count")
        stmt = select(Comment, report_count).order_by(report_count.desc(), Comment.created_at.desc(), Comment.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return [(comment, int(count)) for comment, count in result.all()]

    async def get_with_report_count(self, comment_id: int) -> Optional[Tuple[Comment, int]]:
        stmt = select(Comment, comment_report_count_subquery().label("report_count")).where(Comment.id == comment_id)
        row = (await self.session.execute(stmt)).first()
        if row is None:
            return None
        comment, count = row
        return comment, int(count)

    async def set_hidden(self, comment: Comment, hidden: bool) -> Comment:
        """Hide or unhide a comment."""
        comment.is_hidden = hidden
        return await self.update(comment)

    async def delete(self, comment_id: int) -> bool:
        """
        Delete a comment and its reply subtree.

        Args:
            comment_id: Comment ID to delete

        Returns:
            True if deleted, False if not found
        """
        comment = await self.get_by_id(comment_id)
        if comment is None:
            return False
        await self.purge([comment_id])
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Comment]:
        """List comments oldest first, filtered by ``blog_post_id``, ``author_id`` or ``is_hidden``."""
        stmt = select(Comment).order_by(Comment.created_at, Comment.id)
        stmt = QueryBuilder.apply_filters(stmt, Comment, filters or {})
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _collect_subtree(self, comment_ids: Iterable[int]) -> Set[int]:
        collected: Set[int] = set(comment_ids)
        frontier = set(collected)
        while frontier:
            stmt = select(Comment.id).where(Comment.parent_comment_id.in_(frontier))
            result = await self.session.execute(stmt)
            frontier = set(result.scalars().all()) - collected
            collected |= frontier
        return collected

    async def purge(self, comment_ids: Iterable[int]) -> None:
        """Delete comments, their replies, votes and reports without committing."""
        ids = await self._collect_subtree(comment_ids)
        if not ids:
            return
        await self.session.execute(delete(Rating).where(Rating.comment_id.in_(ids)))
        await self.session.execute(delete(Report).where(Report.comment_id.in_(ids)))
        await self.session.execute(delete(Comment).where(Comment.id.in_(ids)))

    async def purge_for_posts(self, blog_post_ids: Iterable[int]) -> None:
        """Delete every comment on the given blog posts without committing."""
        ids = list(blog_post_ids)
        if not ids:
            return
        result = await self.session.execute(select(Comment.id).where(Comment.blog_post_id.in_(ids)))
        await self.purge(result.scalars().all())

    async def purge_for_author(self, author_id: int) -> None:
        """Delete every comment written by a user without committing."""
        result = await self.session.execute(select(Comment.id).where(Comment.author_id == author_id))
        await self.purge(result.scalars().all())

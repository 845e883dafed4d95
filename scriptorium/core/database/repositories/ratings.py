"""
Rating repository interface and implementation.

This module provides data access for votes on blog posts and comments,
including vote upsert/clear and score aggregation. The score of a target is
the sum of its vote values; a target without votes scores 0.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import case, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.blog_posts import BlogPost
from ..entities.ratings import Rating
from .base import AsyncBaseRepository, QueryBuilder


def blog_post_score_subquery():
    """Correlated ``coalesce(sum(value), 0)`` for ``BlogPost`` rows."""
    return (
        select(func.coalesce(func.sum(Rating.value), 0))
        .where(Rating.blog_post_id == BlogPost.id)
        .correlate(BlogPost)
        .scalar_subquery()
    )


def _target_clause(blog_post_id: Optional[int], comment_id: Optional[int]):
    if (blog_post_id is None) == (comment_id is None):
        raise ValueError("Exactly one of blog_post_id or comment_id must be given")
    if blog_post_id is not None:
        return Rating.blog_post_id == blog_post_id
    return Rating.comment_id == comment_id


class RatingRepository(AsyncBaseRepository[Rating]):
    """Repository for vote data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async session for database operations
        """
        super().__init__(session, Rating)

    async def get_vote(
        self, user_id: int, *, blog_post_id: Optional[int] = None, comment_id: Optional[int] = None
    ) -> Optional[Rating]:
        """Get a user's vote on a single target, if any."""
        stmt = select(Rating).where(Rating.user_id == user_id, _target_clause(blog_post_id, comment_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_vote(
        self,
        user_id: int,
        value: int,
        *,
        blog_post_id: Optional[int] = None,
        comment_id: Optional[int] = None,
    ) -> Optional[Rating]:
        """
        Record, replace or clear a user's vote on a target.

        Args:
            user_id: Voter
            value: 1 for upvote, -1 for downvote, 0 to clear
            blog_post_id: Voted blog post (mutually exclusive with comment_id)
            comment_id: Voted comment

        Returns:
            The stored rating, or None when the vote was cleared
        """
        if value not in (-1, 0, 1):
            raise ValueError(f"Invalid vote value: {value}")

        existing = await self.get_vote(user_id, blog_post_id=blog_post_id, comment_id=comment_id)
        if value == 0:
            if existing is not None:
                await self.session.delete(existing)
                await self.session.commit()
            return None

        if existing is None:
            existing = Rating(user_id=user_id, value=value, blog_post_id=blog_post_id, comment_id=comment_id)
        else:
            existing.value = value
            existing.updated_at = utc_now()
        self.session.add(existing)
        await self.session.commit()
        await self.session.refresh(existing)
        return existing

    async def get_stats(
        self, *, blog_post_id: Optional[int] = None, comment_id: Optional[int] = None
    ) -> Tuple[int, int]:
        """
        Count upvotes and downvotes on a target.

        Returns:
            Tuple of (upvotes, downvotes)
        """
        stmt = select(
            func.coalesce(func.sum(case((Rating.value == 1, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Rating.value == -1, 1), else_=0)), 0),
        ).where(_target_clause(blog_post_id, comment_id))
        result = await self.session.execute(stmt)
        upvotes, downvotes = result.one()
        return int(upvotes), int(downvotes)

    async def get_comment_stats(self, comment_ids: Iterable[int]) -> Dict[int, Tuple[int, int]]:
        """Count upvotes and downvotes for many comments at once."""
        ids = list(comment_ids)
        if not ids:
            return {}
        stmt = (
            select(
                Rating.comment_id,
                func.sum(case((Rating.value == 1, 1), else_=0)),
                func.sum(case((Rating.value == -1, 1), else_=0)),
            )
            .where(Rating.comment_id.in_(ids))
            .group_by(Rating.comment_id)
        )
        result = await self.session.execute(stmt)
        return {comment_id: (int(up), int(down)) for comment_id, up, down in result.all()}

    async def get_user_comment_votes(self, user_id: int, comment_ids: Iterable[int]) -> Dict[int, int]:
        """Map comment id to the user's vote value for the given comments."""
        ids = list(comment_ids)
        if not ids:
            return {}
        stmt = select(Rating.comment_id, Rating.value).where(Rating.user_id == user_id, Rating.comment_id.in_(ids))
        result = await self.session.execute(stmt)
        return {comment_id: value for comment_id, value in result.all()}

    async def delete(self, rating_id: int) -> bool:
        """Delete a rating by its ID."""
        rating = await self.get_by_id(rating_id)
        if rating is None:
            return False
        await self.session.delete(rating)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Rating]:
        """List ratings, filtered by ``user_id``, ``blog_post_id`` or ``comment_id``."""
        stmt = select(Rating).order_by(Rating.id)
        stmt = QueryBuilder.apply_filters(stmt, Rating, filters or {})
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def purge_for_user(self, user_id: int) -> None:
        """Remove every vote cast by a user without committing."""
        await self.session.execute(delete(Rating).where(Rating.user_id == user_id))

"""
User repository interface and implementation.

This module provides data access for user accounts. Deleting a user
removes everything the user authored: votes, reports, comments, blog posts
and code templates.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import User
from .base import AsyncBaseRepository, QueryBuilder
from .blog_posts import BlogPostRepository
from .code_templates import CodeTemplateRepository
from .comments import CommentRepository
from .ratings import RatingRepository
from .reports import ReportRepository


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user account data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async session for database operations
        """
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email, ignoring case.

        Args:
            email: Email address

        Returns:
            User instance or None
        """
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete(self, user_id: int) -> bool:
        """
        Delete a user and all of their content.

        Args:
            user_id: User ID to delete

        Returns:
            True if deleted, False if not found
        """
        user = await self.get_by_id(user_id)
        if user is None:
            return False

        await RatingRepository(self.session).purge_for_user(user_id)
        await ReportRepository(self.session).purge_for_user(user_id)
        await CommentRepository(self.session).purge_for_author(user_id)
        await BlogPostRepository(self.session).purge_for_author(user_id)
        await CodeTemplateRepository(self.session).purge_for_author(user_id)
        await self.session.delete(user)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[User]:
        """
        List users in registration order.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            filters: Equality filters (role, is_banned)

        Returns:
            List of User instances
        """
        stmt = select(User).order_by(User.id)
        stmt = QueryBuilder.apply_filters(stmt, User, filters or {})
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

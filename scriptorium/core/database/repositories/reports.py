"""
Report repository interface and implementation.

This module provides data access for abuse reports and the per-target
report counts used by the moderation views.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from scriptorium.core.models.domain.enums import ReportTarget

from ..entities.blog_posts import BlogPost
from ..entities.comments import Comment
from ..entities.reports import Report
from .base import AsyncBaseRepository, QueryBuilder


def blog_post_report_count_subquery():
    """Correlated report count for ``BlogPost`` rows."""
    return (
        select(func.count(Report.id)).where(Report.blog_post_id == BlogPost.id).correlate(BlogPost).scalar_subquery()
    )


def comment_report_count_subquery():
    """Correlated report count for ``Comment`` rows."""
    return select(func.count(Report.id)).where(Report.comment_id == Comment.id).correlate(Comment).scalar_subquery()


def _target_filter(stmt, target: Optional[ReportTarget]):
    if target == ReportTarget.blog_post:
        return stmt.where(Report.blog_post_id.is_not(None))
    if target == ReportTarget.comment:
        return stmt.where(Report.comment_id.is_not(None))
    return stmt


class ReportRepository(AsyncBaseRepository[Report]):
    """Repository for report data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async session for database operations
        """
        super().__init__(session, Report)

    async def delete(self, report_id: int) -> bool:
        """Delete a report by its ID."""
        report = await self.get_by_id(report_id)
        if report is None:
            return False
        await self.session.delete(report)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Report]:
        """
        List reports newest first.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            filters: ``target`` (ReportTarget) and equality filters such as ``reporter_id``

        Returns:
            List of Report instances
        """
        filters = dict(filters or {})
        target = filters.pop("target", None)
        stmt = select(Report).order_by(Report.created_at.desc(), Report.id.desc())
        stmt = _target_filter(stmt, target)
        stmt = QueryBuilder.apply_filters(stmt, Report, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_target(self, target: Optional[ReportTarget] = None) -> int:
        """Count reports, optionally only those on one kind of target."""
        stmt = _target_filter(select(func.count(Report.id)), target)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def purge_for_user(self, user_id: int) -> None:
        """Remove every report filed by a user without committing."""
        await self.session.execute(delete(Report).where(Report.reporter_id == user_id))

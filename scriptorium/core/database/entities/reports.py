"""
Report entity models.

Users report abusive blog posts or comments; administrators review reports
and decide whether to hide the content.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Text
from sqlmodel import Field

from ..base import Base, utc_now


class ReportBase(Base):
    """Base fields for a report."""

    reason: str = Field(min_length=1, max_length=500, description="Why the content is inappropriate")
    additional_info: Optional[str] = Field(default=None, sa_type=Text, description="Optional free-form details")


class Report(ReportBase, table=True):
    """Persistent content report.

    Table: reports
    """

    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint(
            "(blog_post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_reports_single_target",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    reporter_id: int = Field(foreign_key="users.id", index=True)
    blog_post_id: Optional[int] = Field(default=None, foreign_key="blog_posts.id", index=True)
    comment_id: Optional[int] = Field(default=None, foreign_key="comments.id", index=True)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        target = f"blog_post={self.blog_post_id}" if self.blog_post_id is not None else f"comment={self.comment_id}"
        return f"Report(id={self.id}, {target})"

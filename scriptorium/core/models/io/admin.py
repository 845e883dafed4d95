"""
Administration I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .blog_posts import BlogPostSummary


class AdminOverview(BaseModel):
    """Site-wide counters for the moderation dashboard."""

    users: int
    blog_posts: int
    hidden_blog_posts: int
    comments: int
    hidden_comments: int
    code_templates: int
    reports: int


class VisibilityUpdate(BaseModel):
    """Schema for hiding or unhiding content."""

    hidden: bool = Field(description="True hides the content from everyone but its author and admins")


class AdminBlogPostRead(BlogPostSummary):
    """Blog post with the number of reports filed against it."""

    report_count: int = 0


class AdminCommentRead(BaseModel):
    """Comment with the number of reports filed against it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    blog_post_id: int
    parent_comment_id: Optional[int] = None
    author_id: int
    is_hidden: bool
    report_count: int = 0
    created_at: datetime

"""
Comment I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import NonBlankStr
from .ratings import VoteStats
from .users import UserSummary


class CommentCreate(BaseModel):
    """Schema for commenting on a blog post or replying to a comment."""

    blog_post_id: int = Field(description="Blog post being commented on")
    content: NonBlankStr = Field(max_length=10000, description="Comment body")
    parent_comment_id: Optional[int] = Field(default=None, description="Comment being replied to")


class ReplyCreate(BaseModel):
    """Schema for replying to a comment."""

    content: NonBlankStr = Field(max_length=10000)


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""

    content: NonBlankStr = Field(max_length=10000)


class CommentRead(BaseModel):
    """Comment with author, votes and nested replies."""

    id: int
    content: str
    blog_post_id: int
    parent_comment_id: Optional[int] = None
    author: Optional[UserSummary] = None
    is_hidden: bool
    stats: VoteStats
    user_vote: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    replies: List["CommentRead"] = Field(default_factory=list)


CommentRead.model_rebuild()

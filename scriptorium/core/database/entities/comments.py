"""
Comment entity models.

Comments attach to a blog post. Replies point at their parent comment and
always belong to the same blog post as the parent.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Text
from sqlmodel import Field

from ..base import Base, utc_now


class CommentBase(Base):
    """Base fields for a comment."""

    content: str = Field(min_length=1, sa_type=Text, description="Comment body")


class Comment(CommentBase, table=True):
    """Persistent comment.

    Table: comments
    """

    __tablename__ = "comments"

    id: Optional[int] = Field(default=None, primary_key=True)
    author_id: int = Field(foreign_key="users.id", index=True)
    blog_post_id: int = Field(foreign_key="blog_posts.id", index=True)
    parent_comment_id: Optional[int] = Field(default=None, foreign_key="comments.id", index=True)
    is_hidden: bool = Field(default=False, description="Hidden by an administrator")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Comment(id={self.id}, blog_post_id={self.blog_post_id}, parent={self.parent_comment_id})"

"""
Rating entity models.

A rating is a single user's vote (+1 or -1) on exactly one blog post or
exactly one comment. A user holds at most one rating per target; voting
again replaces the value.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now


class Rating(Base, table=True):
    """Persistent vote.

    Table: ratings
    """

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "blog_post_id", name="uq_ratings_user_blog_post"),
        UniqueConstraint("user_id", "comment_id", name="uq_ratings_user_comment"),
        CheckConstraint("value IN (-1, 1)", name="ck_ratings_value"),
        CheckConstraint(
            "(blog_post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_ratings_single_target",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    value: int = Field(description="+1 for an upvote, -1 for a downvote")
    user_id: int = Field(foreign_key="users.id", index=True)
    blog_post_id: Optional[int] = Field(default=None, foreign_key="blog_posts.id", index=True)
    comment_id: Optional[int] = Field(default=None, foreign_key="comments.id", index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        target = f"blog_post={self.blog_post_id}" if self.blog_post_id is not None else f"comment={self.comment_id}"
        return f"Rating(user={self.user_id}, {target}, value={self.value})"

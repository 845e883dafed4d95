"""
Blog post entity models.

Blog posts belong to an author and may reference any number of code
templates through the ``blog_post_code_templates`` link table.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Text
from sqlmodel import Field, SQLModel

from ..base import Base, dump_tags, load_tags, utc_now


class BlogPostCodeTemplateLink(SQLModel, table=True):
    """Many-to-many link between blog posts and code templates.

    Table: blog_post_code_templates
    """

    __tablename__ = "blog_post_code_templates"

    blog_post_id: int = Field(foreign_key="blog_posts.id", primary_key=True)
    code_template_id: int = Field(foreign_key="code_templates.id", primary_key=True)


class BlogPostBase(Base):
    """Base fields for a blog post."""

    title: str = Field(min_length=1, max_length=200, description="Post title")
    description: str = Field(sa_type=Text, description="Short summary shown in listings")
    content: str = Field(sa_type=Text, description="Post body")
    tags: str = Field(default="[]", description="JSON array of tags")


class BlogPost(BlogPostBase, table=True):
    """Persistent blog post.

    Table: blog_posts
    """

    __tablename__ = "blog_posts"

    id: Optional[int] = Field(default=None, primary_key=True)
    author_id: int = Field(foreign_key="users.id", index=True)
    is_hidden: bool = Field(default=False, index=True, description="Hidden by an administrator")

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_tags_list(self) -> List[str]:
        """Get tags as a list."""
        return load_tags(self.tags)

    def set_tags_list(self, tags: List[str]) -> None:
        """Set tags from a list."""
        self.tags = dump_tags(tags)

    def __repr__(self) -> str:
        return f"BlogPost(id={self.id}, title={self.title!r}, author_id={self.author_id})"

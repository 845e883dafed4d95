"""
Code template entity models.

A code template is a reusable snippet of source code in one of the supported
languages. Templates can be forked; a fork keeps a pointer to its origin.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Text
from sqlmodel import Field

from ..base import Base, dump_tags, load_tags, utc_now


class CodeTemplateBase(Base):
    """Base fields for a code template."""

    title: str = Field(min_length=1, max_length=200, description="Template title")
    description: str = Field(default="", sa_type=Text, description="Free-form explanation")
    code: str = Field(sa_type=Text, description="Source code")
    language: str = Field(max_length=32, description="Language identifier (e.g. 'python')")
    tags: str = Field(default="[]", description="JSON array of tags")


class CodeTemplate(CodeTemplateBase, table=True):
    """Persistent code template.

    Table: code_templates
    """

    __tablename__ = "code_templates"

    id: Optional[int] = Field(default=None, primary_key=True)
    author_id: int = Field(foreign_key="users.id", index=True)
    forked_from_id: Optional[int] = Field(default=None, foreign_key="code_templates.id", index=True)
    is_forked: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_tags_list(self) -> List[str]:
        """Get tags as a list."""
        return load_tags(self.tags)

    def set_tags_list(self, tags: List[str]) -> None:
        """Set tags from a list."""
        self.tags = dump_tags(tags)

    def __repr__(self) -> str:
        return f"CodeTemplate(id={self.id}, title={self.title!r}, language={self.language})"

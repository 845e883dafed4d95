"""
Blog post I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .code_templates import CodeTemplateSummary
from .common import NonBlankStr, coerce_tags
from .ratings import VoteStats
from .users import UserSummary


class BlogPostCreate(BaseModel):
    """Schema for creating a blog post."""

    title: NonBlankStr = Field(max_length=200, description="Post title")
    description: NonBlankStr = Field(description="Short summary shown in listings")
    content: NonBlankStr = Field(description="Post body")
    tags: List[str] = Field(default_factory=list, description="Tags")
    code_template_ids: List[int] = Field(default_factory=list, description="Code templates to link")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Recursion in five minutes",
                "description": "A gentle introduction",
                "content": "Recursion is when a function calls itself...",
                "tags": ["recursion", "python"],
                "code_template_ids": [1],
            }
        }
    )


class BlogPostUpdate(BaseModel):
    """Schema for updating a blog post; ``code_template_ids`` replaces all links."""

    title: Optional[NonBlankStr] = Field(default=None, max_length=200)
    description: Optional[NonBlankStr] = None
    content: Optional[NonBlankStr] = None
    tags: Optional[List[str]] = None
    code_template_ids: Optional[List[int]] = None


class BlogPostSummary(BaseModel):
    """Blog post as shown in listings."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    tags: List[str]
    author_id: int
    is_hidden: bool
    score: int = 0
    comment_count: int = 0
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def _parse_tags(cls, value):
        return coerce_tags(value)


class BlogPostRead(BaseModel):
    """Full blog post with author, templates and vote statistics."""

    id: int
    title: str
    description: str
    content: str
    tags: List[str]
    author: UserSummary
    code_templates: List[CodeTemplateSummary]
    is_hidden: bool
    stats: VoteStats
    comment_count: int
    user_vote: Optional[int] = Field(default=None, description="Caller's vote: 1, -1 or 0; null for visitors")
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def _parse_tags(cls, value):
        return coerce_tags(value)

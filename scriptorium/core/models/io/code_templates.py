"""
Code template I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import NonBlankStr, coerce_tags


class CodeTemplateCreate(BaseModel):
    """Schema for creating a code template."""

    title: NonBlankStr = Field(max_length=200, description="Template title")
    code: NonBlankStr = Field(description="Source code")
    language: str = Field(description="Language (python, javascript, java, c, cpp)")
    description: str = Field(default="", description="Free-form explanation")
    tags: List[str] = Field(default_factory=list, description="Tags")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Hello world",
                "code": "print('hello')",
                "language": "python",
                "tags": ["beginner"],
            }
        }
    )


class CodeTemplateUpdate(BaseModel):
    """Schema for updating a code template."""

    title: Optional[NonBlankStr] = Field(default=None, max_length=200)
    description: Optional[str] = None
    code: Optional[NonBlankStr] = None
    language: Optional[str] = None
    tags: Optional[List[str]] = None


class CodeTemplateLanguageUpdate(BaseModel):
    """Schema for changing only the language of a template."""

    language: str


class CodeTemplateFork(BaseModel):
    """Schema for forking a template; omitted fields fall back to the original."""

    title: Optional[NonBlankStr] = Field(default=None, max_length=200)
    description: Optional[str] = None
    tags: Optional[List[str]] = None


class CodeTemplateRead(BaseModel):
    """Schema for reading a code template."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    code: str
    language: str
    tags: List[str]
    author_id: int
    forked_from_id: Optional[int] = None
    is_forked: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def _parse_tags(cls, value):
        return coerce_tags(value)


class CodeTemplateSummary(BaseModel):
    """Template information embedded in a blog post."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    language: str

"""
Shared I/O building blocks: pagination envelopes and text validators.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, Field

from scriptorium.core.database.base import load_tags, normalize_tags

T = TypeVar("T")


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty or whitespace")
    return value


# A string that must contain at least one non-whitespace character.
# The value itself is kept as submitted.
NonBlankStr = Annotated[str, AfterValidator(_require_text)]


def coerce_tags(value: Any) -> List[str]:
    """Accept tags as a list, a JSON array string or a comma separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return load_tags(value)
    return normalize_tags(str(item) for item in value)


def page_offset(page: int, limit: int) -> int:
    """Offset of the first row of a 1-based page."""
    return (page - 1) * limit


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing."""

    items: List[T] = Field(description="Items on this page")
    total: int = Field(description="Total number of matching items")
    page: int = Field(description="1-based page number")
    limit: int = Field(description="Page size")
    pages: int = Field(description="Total number of pages")

    @classmethod
    def build(cls, items: List[T], total: int, page: int, limit: int) -> "Page[T]":
        return cls(items=items, total=total, page=page, limit=limit, pages=math.ceil(total / limit) if limit else 0)


class MessageResponse(BaseModel):
    """Plain acknowledgement message."""

    message: str
    detail: Optional[str] = None

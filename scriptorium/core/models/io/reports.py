"""
Report I/O models for API requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from scriptorium.core.models.domain.enums import ReportTarget

from .common import NonBlankStr


class ReportCreate(BaseModel):
    """Schema for reporting a blog post or a comment. Exactly one target is required."""

    reason: NonBlankStr = Field(max_length=500, description="Why the content is inappropriate")
    additional_info: Optional[str] = Field(default=None, max_length=5000)
    blog_post_id: Optional[int] = None
    comment_id: Optional[int] = None

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "ReportCreate":
        if (self.blog_post_id is None) == (self.comment_id is None):
            raise ValueError("Provide exactly one of blog_post_id or comment_id")
        return self


class ReportRead(BaseModel):
    """Schema for reading a report."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    reason: str
    additional_info: Optional[str] = None
    reporter_id: int
    blog_post_id: Optional[int] = None
    comment_id: Optional[int] = None
    created_at: datetime

    @computed_field
    @property
    def target(self) -> ReportTarget:
        return ReportTarget.blog_post if self.blog_post_id is not None else ReportTarget.comment

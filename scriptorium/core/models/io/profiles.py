"""
Profile I/O models combining a user with their published content.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

from .blog_posts import BlogPostSummary
from .code_templates import CodeTemplateRead
from .users import UserRead


class UserContentRead(BaseModel):
    """Everything a user has published."""

    user: UserRead
    blog_posts: List[BlogPostSummary]
    code_templates: List[CodeTemplateRead]

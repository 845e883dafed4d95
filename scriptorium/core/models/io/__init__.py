"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- common: Pagination envelope and shared validators
- users: Registration, login, tokens and profiles
- code_templates: Code template I/O models
- blog_posts: Blog post I/O models
- comments: Comment I/O models
- ratings: Vote requests and statistics
- reports: Report I/O models
- execution: Code execution requests and results
- admin: Moderation dashboard models
- health: Health and version models
- profiles: User profile with published content
"""

from .admin import AdminBlogPostRead, AdminCommentRead, AdminOverview, VisibilityUpdate
from .blog_posts import BlogPostCreate, BlogPostRead, BlogPostSummary, BlogPostUpdate
from .code_templates import (
    CodeTemplateCreate,
    CodeTemplateFork,
    CodeTemplateLanguageUpdate,
    CodeTemplateRead,
    CodeTemplateSummary,
    CodeTemplateUpdate,
)
from .comments import CommentCreate, CommentRead, CommentUpdate, ReplyCreate
from .common import MessageResponse, NonBlankStr, Page, page_offset
from .execution import ExecutionRead, ExecutionRequest, TemplateExecutionRequest
from .health import HealthRead, VersionRead
from .profiles import UserContentRead
from .ratings import VoteRead, VoteRequest, VoteStats
from .reports import ReportCreate, ReportRead
from .users import (
    AdminUserUpdate,
    RefreshRequest,
    TokenResponse,
    UserLogin,
    UserRead,
    UserRegister,
    UserSummary,
    UserUpdate,
)

__all__ = [
    "AdminBlogPostRead",
    "AdminCommentRead",
    "AdminOverview",
    "AdminUserUpdate",
    "BlogPostCreate",
    "BlogPostRead",
    "BlogPostSummary",
    "BlogPostUpdate",
    "CodeTemplateCreate",
    "CodeTemplateFork",
    "CodeTemplateLanguageUpdate",
    "CodeTemplateRead",
    "CodeTemplateSummary",
    "CodeTemplateUpdate",
    "CommentCreate",
    "CommentRead",
    "CommentUpdate",
    "ExecutionRead",
    "ExecutionRequest",
    "HealthRead",
    "MessageResponse",
    "NonBlankStr",
    "Page",
    "RefreshRequest",
    "ReplyCreate",
    "ReportCreate",
    "ReportRead",
    "TemplateExecutionRequest",
    "TokenResponse",
    "UserLogin",
    "UserContentRead",
    "UserRead",
    "UserRegister",
    "UserSummary",
    "UserUpdate",
    "VersionRead",
    "VisibilityUpdate",
    "VoteRead",
    "VoteRequest",
    "VoteStats",
    "page_offset",
]

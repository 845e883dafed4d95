"""
Repository layer for database access.

Each repository wraps one entity and is bound to an ``AsyncSession``.
Methods named ``purge*`` stage deletions without committing so that
cascading deletes run in the caller's transaction.

Modules:
- base: Abstract repository and query helpers
- users: User accounts
- code_templates: Code templates and forks
- blog_posts: Blog posts, search and template links
- comments: Comments and reply trees
- ratings: Votes and score aggregation
- reports: Abuse reports and report counts
"""

from .base import AsyncBaseRepository, QueryBuilder
from .blog_posts import BlogPostRepository
from .code_templates import CodeTemplateRepository
from .comments import CommentRepository
from .ratings import RatingRepository
from .reports import ReportRepository
from .users import UserRepository

__all__ = [
    "AsyncBaseRepository",
    "BlogPostRepository",
    "CodeTemplateRepository",
    "CommentRepository",
    "QueryBuilder",
    "RatingRepository",
    "ReportRepository",
    "UserRepository",
]

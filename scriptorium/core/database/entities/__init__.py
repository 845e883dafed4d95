"""
Database entity models.

This package contains all database entity models organized by table.
Importing the package registers every table on ``Base.metadata``.

Modules:
- users: Registered accounts
- code_templates: Reusable code snippets and their forks
- blog_posts: Blog posts and their links to code templates
- comments: Comments and nested replies
- ratings: Votes on blog posts and comments
- reports: Abuse reports on blog posts and comments
"""

from .blog_posts import BlogPost, BlogPostCodeTemplateLink
from .code_templates import CodeTemplate
from .comments import Comment
from .ratings import Rating
from .reports import Report
from .users import User

__all__ = [
    "BlogPost",
    "BlogPostCodeTemplateLink",
    "CodeTemplate",
    "Comment",
    "Rating",
    "Report",
    "User",
]

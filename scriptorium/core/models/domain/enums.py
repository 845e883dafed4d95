"""Domain enums for Scriptorium models."""

from __future__ import annotations

from enum import Enum, IntEnum


class UserRole(str, Enum):
    """Role of a registered account."""

    user = "USER"
    admin = "ADMIN"


class VoteValue(IntEnum):
    """
    Accepted values when voting on a blog post or a comment.

    ``clear`` is never stored; it removes the caller's existing vote.
    """

    down = -1
    clear = 0
    up = 1


class ReportTarget(str, Enum):
    """Kind of content a report points at."""

    blog_post = "blog_post"
    comment = "comment"


class BlogPostSort(str, Enum):
    """Ordering options for blog post listings."""

    newest = "newest"
    rating = "rating"  # Sum of vote values, ties broken by recency.
    comments = "comments"


class CommentSort(str, Enum):
    """Ordering options for comment threads."""

    oldest = "oldest"
    newest = "newest"
    rating = "rating"


class ExecutionStatus(str, Enum):
    """Outcome of a code execution request."""

    success = "success"
    runtime_error = "runtime_error"
    compile_error = "compile_error"
    timeout = "timeout"

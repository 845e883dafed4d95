"""Domain-level enums shared by entities, I/O models and routes."""

from .enums import (
    BlogPostSort,
    CommentSort,
    ExecutionStatus,
    ReportTarget,
    UserRole,
    VoteValue,
)

__all__ = [
    "BlogPostSort",
    "CommentSort",
    "ExecutionStatus",
    "ReportTarget",
    "UserRole",
    "VoteValue",
]

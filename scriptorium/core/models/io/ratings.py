"""
Vote I/O models shared by blog posts and comments.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from scriptorium.core.models.domain.enums import VoteValue


class VoteRequest(BaseModel):
    """Schema for casting, changing or clearing a vote."""

    value: VoteValue = Field(description="1 to upvote, -1 to downvote, 0 to remove your vote")


class VoteStats(BaseModel):
    """Vote counts of a blog post or comment."""

    upvotes: int = 0
    downvotes: int = 0
    score: int = 0

    @classmethod
    def from_counts(cls, upvotes: int, downvotes: int) -> "VoteStats":
        return cls(upvotes=upvotes, downvotes=downvotes, score=upvotes - downvotes)


class VoteRead(BaseModel):
    """Vote counts plus the caller's own vote."""

    stats: VoteStats
    user_vote: Optional[int] = Field(default=None, description="Caller's vote: 1, -1 or 0 when not voted")

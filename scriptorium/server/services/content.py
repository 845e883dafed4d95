"""
Content read-model assembly.

Turns blog post, comment and user rows into the API read models: author
summaries, linked templates, vote statistics, the viewer's own vote and
nested comment threads. Also holds the visibility rules shared by the
routers.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from scriptorium.core.database.entities.blog_posts import BlogPost
from scriptorium.core.database.entities.comments import Comment
from scriptorium.core.database.entities.users import User
from scriptorium.core.database.repositories.blog_posts import BlogPostRepository
from scriptorium.core.database.repositories.code_templates import CodeTemplateRepository
from scriptorium.core.database.repositories.comments import CommentRepository
from scriptorium.core.database.repositories.ratings import RatingRepository
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.domain.enums import CommentSort
from scriptorium.core.models.io.blog_posts import BlogPostRead, BlogPostSummary
from scriptorium.core.models.io.code_templates import CodeTemplateSummary
from scriptorium.core.models.io.comments import CommentRead
from scriptorium.core.models.io.ratings import VoteRead, VoteStats
from scriptorium.core.models.io.users import UserRead, UserSummary

logger = get_logger(__name__)


def is_admin(viewer: Optional[User]) -> bool:
    return viewer is not None and viewer.is_admin


def can_moderate(author_id: int, viewer: Optional[User]) -> bool:
    """Whether the viewer is the author or an administrator."""
    return viewer is not None and (viewer.is_admin or viewer.id == author_id)


def is_visible(item: BlogPost | Comment, viewer: Optional[User]) -> bool:
    """Hidden content is only visible to its author and to administrators."""
    return not item.is_hidden or can_moderate(item.author_id, viewer)


def viewer_id(viewer: Optional[User]) -> Optional[int]:
    return viewer.id if viewer is not None else None


def user_read(user: User, viewer: Optional[User]) -> UserRead:
    """Public profile; contact details only for the user themself and admins."""
    data = UserRead.model_validate(user)
    if can_moderate(user.id, viewer):
        return data
    return data.model_copy(update={"email": None, "phone": None})


def blog_post_summary(row: Tuple[BlogPost, int, int]) -> BlogPostSummary:
    post, score, comment_count = row
    return BlogPostSummary.model_validate(post).model_copy(update={"score": score, "comment_count": comment_count})


async def _load_authors(session: AsyncSession, author_ids: Iterable[int]) -> Dict[int, UserSummary]:
    ids = set(author_ids)
    if not ids:
        return {}
    result = await session.execute(select(User).where(User.id.in_(ids)))
    return {user.id: UserSummary.model_validate(user) for user in result.scalars().all()}


async def blog_post_read(session: AsyncSession, post: BlogPost, viewer: Optional[User]) -> BlogPostRead:
    """
    Assemble the full read model of a blog post.

    Args:
        session: Active database session
        post: Blog post row
        viewer: Authenticated viewer, if any

    Returns:
        BlogPostRead with author, templates, stats and the viewer's vote
    """
    ratings = RatingRepository(session)
    row = await BlogPostRepository(session).get_with_stats(post.id)
    comment_count = row[2] if row else 0
    upvotes, downvotes = await ratings.get_stats(blog_post_id=post.id)
    templates = await CodeTemplateRepository(session).list_for_blog_post(post.id)
    authors = await _load_authors(session, [post.author_id])

    user_vote = None
    if viewer is not None:
        vote = await ratings.get_vote(viewer.id, blog_post_id=post.id)
        user_vote = vote.value if vote else 0

    return BlogPostRead(
        id=post.id,
        title=post.title,
        description=post.description,
        content=post.content,
        tags=post.tags,
        author=authors[post.author_id],
        code_templates=[CodeTemplateSummary.model_validate(t) for t in templates],
        is_hidden=post.is_hidden,
        stats=VoteStats.from_counts(upvotes, downvotes),
        comment_count=comment_count,
        user_vote=user_vote,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


async def blog_post_vote_read(session: AsyncSession, post_id: int, viewer: User) -> VoteRead:
    ratings = RatingRepository(session)
    upvotes, downvotes = await ratings.get_stats(blog_post_id=post_id)
    vote = await ratings.get_vote(viewer.id, blog_post_id=post_id)
    return VoteRead(stats=VoteStats.from_counts(upvotes, downvotes), user_vote=vote.value if vote else 0)


async def comment_vote_read(session: AsyncSession, comment_id: int, viewer: User) -> VoteRead:
    ratings = RatingRepository(session)
    upvotes, downvotes = await ratings.get_stats(comment_id=comment_id)
    vote = await ratings.get_vote(viewer.id, comment_id=comment_id)
    return VoteRead(stats=VoteStats.from_counts(upvotes, downvotes), user_vote=vote.value if vote else 0)


def _sort_key(sort: CommentSort):
    if sort == CommentSort.rating:
        return lambda node: (-node.stats.score, node.created_at, node.id)
    return lambda node: (node.created_at, node.id)


def _sort_thread(nodes: List[CommentRead], sort: CommentSort) -> None:
    nodes.sort(key=_sort_key(sort))
    if sort == CommentSort.newest:
        nodes.reverse()
    for node in nodes:
        _sort_thread(node.replies, sort)


async def _comment_nodes(
    session: AsyncSession, blog_post_id: int, viewer: Optional[User]
) -> Tuple[Dict[int, CommentRead], List[CommentRead]]:
    comments = await CommentRepository(session).list_for_post(
        blog_post_id, viewer_id=viewer_id(viewer), include_hidden=is_admin(viewer)
    )
    ids = [c.id for c in comments]
    ratings = RatingRepository(session)
    stats = await ratings.get_comment_stats(ids)
    votes = await ratings.get_user_comment_votes(viewer.id, ids) if viewer is not None else {}
    authors = await _load_authors(session, (c.author_id for c in comments))

    nodes: Dict[int, CommentRead] = {}
    for comment in comments:
        upvotes, downvotes = stats.get(comment.id, (0, 0))
        nodes[comment.id] = CommentRead(
            id=comment.id,
            content=comment.content,
            blog_post_id=comment.blog_post_id,
            parent_comment_id=comment.parent_comment_id,
            author=authors.get(comment.author_id),
            is_hidden=comment.is_hidden,
            stats=VoteStats.from_counts(upvotes, downvotes),
            user_vote=votes.get(comment.id, 0) if viewer is not None else None,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )

    roots: List[CommentRead] = []
    for comment in comments:
        node = nodes[comment.id]
        if comment.parent_comment_id is None:
            roots.append(node)
        elif comment.parent_comment_id in nodes:
            nodes[comment.parent_comment_id].replies.append(node)
        # Replies under a comment the viewer cannot see are dropped with it
    return nodes, roots


async def comment_thread(
    session: AsyncSession, blog_post_id: int, viewer: Optional[User], sort: CommentSort = CommentSort.oldest
) -> List[CommentRead]:
    """
    Build the comment tree of a blog post.

    Top-level comments and every level of replies are ordered by ``sort``.
    Hidden comments, and the replies beneath them, are left out unless the
    viewer is their author or an administrator.
    """
    _, roots = await _comment_nodes(session, blog_post_id, viewer)
    _sort_thread(roots, sort)
    return roots


async def comment_read(session: AsyncSession, comment: Comment, viewer: Optional[User]) -> CommentRead:
    """Read model of one visible comment including its visible replies, oldest first."""
    nodes, _ = await _comment_nodes(session, comment.blog_post_id, viewer)
    node = nodes[comment.id]
    _sort_thread(node.replies, CommentSort.oldest)
    return node

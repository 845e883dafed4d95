"""
Comment Endpoints.

Comment on blog posts, reply to comments, edit, delete and vote.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.core.database.entities.comments import Comment
from scriptorium.core.database.entities.users import User
from scriptorium.core.database.repositories.comments import CommentRepository
from scriptorium.core.database.repositories.ratings import RatingRepository
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.io.comments import CommentCreate, CommentRead, CommentUpdate, ReplyCreate
from scriptorium.core.models.io.ratings import VoteRead, VoteRequest
from scriptorium.server.services.content import can_moderate, comment_read, comment_vote_read, is_visible
from scriptorium.server.services.deps import ActiveUserDep, CurrentUserDep, OptionalUserDep, SessionDep

from .blog_posts import get_visible_post

logger = get_logger(__name__)

router = APIRouter(tags=["comments"])


async def get_visible_comment(session: AsyncSession, comment_id: int, viewer: Optional[User]) -> Comment:
    """Load a comment the viewer may see, or raise 404."""
    comment = await CommentRepository(session).get_by_id(comment_id)
    if comment is None or not is_visible(comment, viewer):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Comment {comment_id} not found")
    return comment


async def _create_comment(
    session: AsyncSession, user: User, blog_post_id: int, content: str, parent_comment_id: Optional[int]
) -> CommentRead:
    post = await get_visible_post(session, blog_post_id, None)
    if parent_comment_id is not None:
        parent = await CommentRepository(session).get_by_id(parent_comment_id)
        if parent is None or parent.is_hidden:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=f"Comment {parent_comment_id} not found"
            )
        if parent.blog_post_id != post.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Parent comment belongs to a different blog post",
            )

    comment = Comment(
        content=content,
        author_id=user.id,
        blog_post_id=post.id,
        parent_comment_id=parent_comment_id,
    )
    comment = await CommentRepository(session).create(comment)
    logger.info(f"User {user.id} commented {comment.id} on blog post {post.id}")
    return await comment_read(session, comment, user)


@router.post(
    "",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Comment",
    description="Comment on a blog post, or reply to one of its comments with parent_comment_id.",
    responses={
        400: {"description": "Parent comment belongs to another blog post"},
        404: {"description": "Blog post or parent comment not found"},
        422: {"description": "Empty content"},
    },
)
async def create_comment(payload: CommentCreate, user: ActiveUserDep, session: SessionDep) -> CommentRead:
    """
    Create a comment.

    - **blog_post_id**: Blog post being commented on; must be visible.
    - **content**: Comment text.
    - **parent_comment_id**: Optional comment being replied to; must belong to the same post.
    """
    return await _create_comment(session, user, payload.blog_post_id, payload.content, payload.parent_comment_id)


@router.post(
    "/{comment_id}/replies",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to Comment",
    description="Reply to a comment. The reply belongs to the same blog post as its parent.",
    responses={404: {"description": "Comment or blog post not found"}},
)
async def reply_to_comment(
    comment_id: int, payload: ReplyCreate, user: ActiveUserDep, session: SessionDep
) -> CommentRead:
    """Reply to a comment."""
    parent = await get_visible_comment(session, comment_id, None)
    return await _create_comment(session, user, parent.blog_post_id, payload.content, parent.id)


@router.get(
    "/{comment_id}",
    response_model=CommentRead,
    summary="Get Comment",
    description="Retrieve a comment with its vote statistics and visible replies.",
    responses={404: {"description": "Comment not found"}},
)
async def get_comment(comment_id: int, session: SessionDep, viewer: OptionalUserDep) -> CommentRead:
    """Get a single comment."""
    comment = await get_visible_comment(session, comment_id, viewer)
    await get_visible_post(session, comment.blog_post_id, viewer)
    return await comment_read(session, comment, viewer)


@router.patch(
    "/{comment_id}",
    response_model=CommentRead,
    summary="Edit Comment",
    description="Edit a comment. Only the author may edit, and hidden comments cannot be edited.",
    responses={
        403: {"description": "Not the author, or the comment has been hidden"},
        404: {"description": "Comment not found"},
    },
)
async def update_comment(
    comment_id: int, payload: CommentUpdate, user: ActiveUserDep, session: SessionDep
) -> CommentRead:
    """Edit a comment's content."""
    comment = await get_visible_comment(session, comment_id, user)
    if comment.author_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can edit this comment")
    if comment.is_hidden:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot edit flagged content")
    comment.content = payload.content
    comment = await CommentRepository(session).update(comment)
    return await comment_read(session, comment, user)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Comment",
    description="Delete a comment and all of its replies. Allowed for the author and admins.",
    responses={403: {"description": "Not the author"}, 404: {"description": "Comment not found"}},
)
async def delete_comment(comment_id: int, user: ActiveUserDep, session: SessionDep) -> Response:
    """Delete a comment with its replies."""
    comment = await get_visible_comment(session, comment_id, user)
    if not can_moderate(comment.author_id, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can delete this comment")
    await CommentRepository(session).delete(comment_id)
    logger.info(f"User {user.id} deleted comment {comment_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{comment_id}/vote",
    response_model=VoteRead,
    summary="Vote on Comment",
    description="Upvote (1), downvote (-1) or remove your vote (0).",
    responses={404: {"description": "Comment not found or hidden"}},
)
async def vote_comment(comment_id: int, payload: VoteRequest, user: ActiveUserDep, session: SessionDep) -> VoteRead:
    """Cast, change or clear the caller's vote on a comment."""
    comment = await CommentRepository(session).get_by_id(comment_id)
    if comment is None or comment.is_hidden:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Comment {comment_id} not found")
    await RatingRepository(session).set_vote(user.id, int(payload.value), comment_id=comment_id)
    return await comment_vote_read(session, comment_id, user)


@router.get(
    "/{comment_id}/vote",
    response_model=VoteRead,
    summary="Get Comment Votes",
    description="Vote statistics of a comment and the caller's own vote.",
    responses={404: {"description": "Comment not found"}},
)
async def get_comment_votes(comment_id: int, user: CurrentUserDep, session: SessionDep) -> VoteRead:
    """Get the votes on a comment."""
    await get_visible_comment(session, comment_id, user)
    return await comment_vote_read(session, comment_id, user)

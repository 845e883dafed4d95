"""
Blog Post Endpoints.

Create, search, read, edit, delete and vote on blog posts, and read their
comment threads. Hidden posts behave as if they did not exist for everyone
except their author and administrators.
"""

from typing import List, Optional, Sequence

from fastapi import APIRouter, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.core.database.base import dump_tags
from scriptorium.core.database.entities.blog_posts import BlogPost
from scriptorium.core.database.entities.users import User
from scriptorium.core.database.repositories.blog_posts import BlogPostRepository
from scriptorium.core.database.repositories.code_templates import CodeTemplateRepository
from scriptorium.core.database.repositories.ratings import RatingRepository
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.domain.enums import BlogPostSort, CommentSort
from scriptorium.core.models.io.blog_posts import BlogPostCreate, BlogPostRead, BlogPostSummary, BlogPostUpdate
from scriptorium.core.models.io.comments import CommentRead
from scriptorium.core.models.io.common import Page, page_offset
from scriptorium.core.models.io.ratings import VoteRead, VoteRequest
from scriptorium.server.core import constant
from scriptorium.server.services.content import (
    blog_post_read,
    blog_post_summary,
    blog_post_vote_read,
    can_moderate,
    comment_thread,
    is_admin,
    is_visible,
    viewer_id,
)
from scriptorium.server.services.deps import ActiveUserDep, OptionalUserDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["blog-posts"])


async def get_visible_post(session: AsyncSession, post_id: int, viewer: Optional[User]) -> BlogPost:
    """Load a post the viewer may see, or raise 404."""
    post = await BlogPostRepository(session).get_by_id(post_id)
    if post is None or not is_visible(post, viewer):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Blog post {post_id} not found")
    return post


async def _check_template_ids(session: AsyncSession, template_ids: Sequence[int]) -> None:
    missing = set(template_ids) - await CodeTemplateRepository(session).existing_ids(template_ids)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown code template ids: {sorted(missing)}",
        )


@router.post(
    "",
    response_model=BlogPostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Blog Post",
    description="Publish a blog post, optionally linking existing code templates.",
    response_description="The created blog post.",
    responses={
        201: {"description": "Blog post created"},
        400: {"description": "Unknown code template id"},
        401: {"description": "Not authenticated"},
        403: {"description": "Account is banned"},
    },
)
async def create_blog_post(payload: BlogPostCreate, user: ActiveUserDep, session: SessionDep) -> BlogPostRead:
    """
    Create a blog post.

    - **title**, **description**, **content**: Required text.
    - **tags**: Free-form tags; trimmed and de-duplicated.
    - **code_template_ids**: Templates to link; every id must exist.
    """
    await _check_template_ids(session, payload.code_template_ids)
    post = BlogPost(
        title=payload.title.strip(),
        description=payload.description,
        content=payload.content,
        tags=dump_tags(payload.tags),
        author_id=user.id,
    )
    post = await BlogPostRepository(session).create_with_templates(post, payload.code_template_ids)
    logger.info(f"User {user.id} created blog post {post.id}")
    return await blog_post_read(session, post, user)


@router.get(
    "",
    response_model=Page[BlogPostSummary],
    summary="Search Blog Posts",
    description=(
        "List blog posts page by page. Text filters are case insensitive substrings and a post matches "
        "when any of the given filters matches."
    ),
    response_description="One page of blog posts.",
)
async def list_blog_posts(
    session: SessionDep,
    viewer: OptionalUserDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(constant.DEFAULT_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE, description="Page size"),
    title: Optional[str] = Query(None, description="Match in the title"),
    content: Optional[str] = Query(None, description="Match in the body"),
    tags: Optional[str] = Query(None, description="Match in any tag"),
    code_template: Optional[str] = Query(None, description="Match in the title of a linked code template"),
    sort: BlogPostSort = Query(BlogPostSort.newest, description="newest, rating or comments"),
) -> Page[BlogPostSummary]:
    """
    Search blog posts.

    - **sort=newest**: Most recent first (default).
    - **sort=rating**: Highest score (upvotes minus downvotes) first, ties most recent first.
    - **sort=comments**: Most commented first.

    Hidden posts are only listed for their author and for administrators.
    """
    rows, total = await BlogPostRepository(session).search(
        title=title,
        content=content,
        tags=tags,
        code_template=code_template,
        sort=sort,
        viewer_id=viewer_id(viewer),
        include_hidden=is_admin(viewer),
        limit=limit,
        offset=page_offset(page, limit),
    )
    return Page[BlogPostSummary].build([blog_post_summary(row) for row in rows], total, page, limit)


@router.get(
    "/{post_id}",
    response_model=BlogPostRead,
    summary="Get Blog Post",
    description="Retrieve a blog post with its author, linked templates and vote statistics.",
    responses={404: {"description": "Blog post not found"}},
)
async def get_blog_post(post_id: int, session: SessionDep, viewer: OptionalUserDep) -> BlogPostRead:
    """
    Get a blog post.

    ``user_vote`` holds the caller's own vote (1, -1 or 0) and is null for visitors.
    """
    post = await get_visible_post(session, post_id, viewer)
    return await blog_post_read(session, post, viewer)


@router.patch(
    "/{post_id}",
    response_model=BlogPostRead,
    summary="Update Blog Post",
    description="Edit a blog post. Only the author may edit, and hidden posts cannot be edited.",
    responses={
        400: {"description": "Unknown code template id"},
        403: {"description": "Not the author, or the post has been hidden"},
        404: {"description": "Blog post not found"},
    },
)
async def update_blog_post(
    post_id: int, payload: BlogPostUpdate, user: ActiveUserDep, session: SessionDep
) -> BlogPostRead:
    """
    Update a blog post.

    Omitted fields are left unchanged. **code_template_ids** replaces the
    full set of linked templates when given.
    """
    repo = BlogPostRepository(session)
    post = await get_visible_post(session, post_id, user)
    if post.author_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can edit this blog post")
    if post.is_hidden:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot edit flagged content")

    changes = payload.model_dump(exclude_unset=True, exclude={"code_template_ids"})
    for key, value in changes.items():
        if value is None:
            continue
        if key == "tags":
            value = dump_tags(value)
        elif key == "title":
            value = value.strip()
        setattr(post, key, value)

    if payload.code_template_ids is not None:
        await _check_template_ids(session, payload.code_template_ids)
        post = await repo.replace_templates(post, payload.code_template_ids)
    else:
        post = await repo.update(post)
    return await blog_post_read(session, post, user)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Blog Post",
    description="Delete a blog post with its comments, votes and reports. Allowed for the author and admins.",
    responses={403: {"description": "Not the author"}, 404: {"description": "Blog post not found"}},
)
async def delete_blog_post(post_id: int, user: ActiveUserDep, session: SessionDep) -> Response:
    """Delete a blog post."""
    post = await get_visible_post(session, post_id, user)
    if not can_moderate(post.author_id, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can delete this blog post")
    await BlogPostRepository(session).delete(post_id)
    logger.info(f"User {user.id} deleted blog post {post_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{post_id}/vote",
    response_model=VoteRead,
    summary="Vote on Blog Post",
    description="Upvote (1), downvote (-1) or remove your vote (0).",
    responses={404: {"description": "Blog post not found or hidden"}},
)
async def vote_blog_post(post_id: int, payload: VoteRequest, user: ActiveUserDep, session: SessionDep) -> VoteRead:
    """Cast, change or clear the caller's vote on a blog post."""
    post = await BlogPostRepository(session).get_by_id(post_id)
    if post is None or post.is_hidden:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Blog post {post_id} not found")
    await RatingRepository(session).set_vote(user.id, int(payload.value), blog_post_id=post_id)
    return await blog_post_vote_read(session, post_id, user)


@router.get(
    "/{post_id}/comments",
    response_model=List[CommentRead],
    summary="List Blog Post Comments",
    description="Top-level comments of a blog post with their nested replies.",
    responses={404: {"description": "Blog post not found"}},
)
async def list_blog_post_comments(
    post_id: int,
    session: SessionDep,
    viewer: OptionalUserDep,
    sort: CommentSort = Query(CommentSort.oldest, description="oldest, newest or rating"),
) -> List[CommentRead]:
    """
    Get the comment thread of a blog post.

    Every level of replies uses the same ordering. Hidden comments are only
    shown to their author and administrators.
    """
    await get_visible_post(session, post_id, viewer)
    return await comment_thread(session, post_id, viewer, sort)

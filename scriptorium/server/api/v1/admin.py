"""
Administration Endpoints.

Moderation dashboard for administrators: site counters, reports, content
ranked by report count, hiding content and managing users. Every endpoint
requires an authenticated, non-banned account with the ADMIN role.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from scriptorium.core.database.repositories.blog_posts import BlogPostRepository, ModerationRow
from scriptorium.core.database.repositories.code_templates import CodeTemplateRepository
from scriptorium.core.database.repositories.comments import CommentRepository
from scriptorium.core.database.repositories.reports import ReportRepository
from scriptorium.core.database.repositories.users import UserRepository
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.domain.enums import ReportTarget, UserRole
from scriptorium.core.models.io.admin import AdminBlogPostRead, AdminCommentRead, AdminOverview, VisibilityUpdate
from scriptorium.core.models.io.common import Page, page_offset
from scriptorium.core.models.io.reports import ReportRead
from scriptorium.core.models.io.users import AdminUserUpdate, UserRead
from scriptorium.server.core import constant
from scriptorium.server.services.deps import AdminUserDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])


def _admin_blog_post(row: ModerationRow) -> AdminBlogPostRead:
    post, score, comment_count, report_count = row
    return AdminBlogPostRead.model_validate(post).model_copy(
        update={"score": score, "comment_count": comment_count, "report_count": report_count}
    )


@router.get(
    "/overview",
    response_model=AdminOverview,
    summary="Site Overview",
    description="Counts of users, blog posts, comments, code templates and reports.",
)
async def get_overview(admin: AdminUserDep, session: SessionDep) -> AdminOverview:
    """Return site-wide counters."""
    posts = BlogPostRepository(session)
    comments = CommentRepository(session)
    return AdminOverview(
        users=await UserRepository(session).count(),
        blog_posts=await posts.count(),
        hidden_blog_posts=await posts.count({"is_hidden": True}),
        comments=await comments.count(),
        hidden_comments=await comments.count({"is_hidden": True}),
        code_templates=await CodeTemplateRepository(session).count(),
        reports=await ReportRepository(session).count(),
    )


@router.get(
    "/reports",
    response_model=Page[ReportRead],
    summary="List Reports",
    description="Reports newest first, optionally only those on blog posts or on comments.",
)
async def list_reports(
    admin: AdminUserDep,
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(constant.DEFAULT_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE),
    target: Optional[ReportTarget] = Query(None, description="blog_post or comment"),
) -> Page[ReportRead]:
    """List reports."""
    repo = ReportRepository(session)
    reports = await repo.list(limit=limit, offset=page_offset(page, limit), filters={"target": target})
    total = await repo.count_by_target(target)
    return Page[ReportRead].build([ReportRead.model_validate(r) for r in reports], total, page, limit)


@router.get(
    "/blog-posts",
    response_model=Page[AdminBlogPostRead],
    summary="List Reported Blog Posts",
    description="All blog posts, hidden ones included, most reported first.",
)
async def list_blog_posts_by_reports(
    admin: AdminUserDep,
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(constant.DEFAULT_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE),
) -> Page[AdminBlogPostRead]:
    """List blog posts by report count."""
    repo = BlogPostRepository(session)
    rows = await repo.list_with_report_counts(limit=limit, offset=page_offset(page, limit))
    items = [_admin_blog_post(row) for row in rows]
    return Page[AdminBlogPostRead].build(items, await repo.count(), page, limit)


@router.get(
    "/comments",
    response_model=Page[AdminCommentRead],
    summary="List Reported Comments",
    description="All comments, hidden ones included, most reported first.",
)
async def list_comments_by_reports(
    admin: AdminUserDep,
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(constant.DEFAULT_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE),
) -> Page[AdminCommentRead]:
    """List comments by report count."""
    repo = CommentRepository(session)
    rows = await repo.list_with_report_counts(limit=limit, offset=page_offset(page, limit))
    items = [
        AdminCommentRead.model_validate(comment).model_copy(update={"report_count": count})
        for comment, count in rows
    ]
    return Page[AdminCommentRead].build(items, await repo.count(), page, limit)


@router.put(
    "/blog-posts/{post_id}/visibility",
    response_model=AdminBlogPostRead,
    summary="Set Blog Post Visibility",
    description="Hide or unhide a blog post.",
    responses={404: {"description": "Blog post not found"}},
)
async def set_blog_post_visibility(
    post_id: int, payload: VisibilityUpdate, admin: AdminUserDep, session: SessionDep
) -> AdminBlogPostRead:
    """Hide or unhide a blog post."""
    repo = BlogPostRepository(session)
    post = await repo.get_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Blog post {post_id} not found")
    await repo.set_hidden(post, payload.hidden)
    logger.info(f"Admin {admin.id} set blog post {post_id} hidden={payload.hidden}")
    return _admin_blog_post(await repo.get_with_report_count(post_id))


@router.put(
    "/comments/{comment_id}/visibility",
    response_model=AdminCommentRead,
    summary="Set Comment Visibility",
    description="Hide or unhide a comment.",
    responses={404: {"description": "Comment not found"}},
)
async def set_comment_visibility(
    comment_id: int, payload: VisibilityUpdate, admin: AdminUserDep, session: SessionDep
) -> AdminCommentRead:
    """Hide or unhide a comment."""
    repo = CommentRepository(session)
    comment = await repo.get_by_id(comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Comment {comment_id} not found")
    await repo.set_hidden(comment, payload.hidden)
    logger.info(f"Admin {admin.id} set comment {comment_id} hidden={payload.hidden}")
    comment, count = await repo.get_with_report_count(comment_id)
    return AdminCommentRead.model_validate(comment).model_copy(update={"report_count": count})


@router.get(
    "/users",
    response_model=Page[UserRead],
    summary="List Users",
    description="All users in registration order, with contact details.",
)
async def list_users(
    admin: AdminUserDep,
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(constant.DEFAULT_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE),
) -> Page[UserRead]:
    """List users."""
    repo = UserRepository(session)
    users = await repo.list(limit=limit, offset=page_offset(page, limit))
    return Page[UserRead].build([UserRead.model_validate(u) for u in users], await repo.count(), page, limit)


@router.patch(
    "/users/{user_id}",
    response_model=UserRead,
    summary="Update User",
    description="Change a user's role or ban status. Administrators cannot demote or ban themselves.",
    responses={400: {"description": "Attempt to demote or ban oneself"}, 404: {"description": "User not found"}},
)
async def update_user(
    user_id: int, payload: AdminUserUpdate, admin: AdminUserDep, session: SessionDep
) -> UserRead:
    """
    Update a user.

    - **role**: USER or ADMIN.
    - **is_banned**: Banned users cannot log in or write.
    """
    repo = UserRepository(session)
    user = await repo.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    if user.id == admin.id:
        if payload.role is not None and payload.role != UserRole.admin:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot demote yourself")
        if payload.is_banned:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot ban yourself")

    if payload.role is not None:
        user.role = payload.role.value
    if payload.is_banned is not None:
        user.is_banned = payload.is_banned
    user = await repo.update(user)
    logger.info(f"Admin {admin.id} updated user {user_id}: role={user.role}, is_banned={user.is_banned}")
    return UserRead.model_validate(user)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete User",
    description="Delete a user together with all of their content.",
    responses={400: {"description": "Attempt to delete oneself"}, 404: {"description": "User not found"}},
)
async def delete_user(user_id: int, admin: AdminUserDep, session: SessionDep) -> Response:
    """Delete a user and everything they authored."""
    if user_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete yourself")
    if not await UserRepository(session).delete(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

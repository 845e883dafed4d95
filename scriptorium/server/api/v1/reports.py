"""
Report Endpoints.

Lets users flag a blog post or a comment for administrator review.
"""

from fastapi import APIRouter, HTTPException, status

from scriptorium.core.database.entities.reports import Report
from scriptorium.core.database.repositories.blog_posts import BlogPostRepository
from scriptorium.core.database.repositories.comments import CommentRepository
from scriptorium.core.database.repositories.reports import ReportRepository
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.io.reports import ReportCreate, ReportRead
from scriptorium.server.services.deps import ActiveUserDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["reports"])


@router.post(
    "",
    response_model=ReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Report Content",
    description="Report a blog post or a comment as inappropriate. Exactly one target must be given.",
    responses={
        404: {"description": "Reported content not found"},
        422: {"description": "No target or both targets given"},
    },
)
async def create_report(payload: ReportCreate, user: ActiveUserDep, session: SessionDep) -> ReportRead:
    """
    Create a report.

    - **reason**: Why the content is inappropriate.
    - **additional_info**: Optional details.
    - **blog_post_id** or **comment_id**: The reported content.
    """
    if payload.blog_post_id is not None:
        if await BlogPostRepository(session).get_by_id(payload.blog_post_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=f"Blog post {payload.blog_post_id} not found"
            )
    elif await CommentRepository(session).get_by_id(payload.comment_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Comment {payload.comment_id} not found")

    report = Report(
        reason=payload.reason.strip(),
        additional_info=payload.additional_info,
        reporter_id=user.id,
        blog_post_id=payload.blog_post_id,
        comment_id=payload.comment_id,
    )
    report = await ReportRepository(session).create(report)
    logger.info(f"User {user.id} filed report {report.id}")
    return ReportRead.model_validate(report)

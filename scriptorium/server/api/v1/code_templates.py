"""
Code Template Endpoints.

Create, search, edit, fork, delete and run code templates, and list the
blog posts that reference a template.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.core.database.base import dump_tags, normalize_tags
from scriptorium.core.database.entities.code_templates import CodeTemplate
from scriptorium.core.database.repositories.blog_posts import BlogPostRepository
from scriptorium.core.database.repositories.code_templates import CodeTemplateRepository
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.io.blog_posts import BlogPostSummary
from scriptorium.core.models.io.code_templates import (
    CodeTemplateCreate,
    CodeTemplateFork,
    CodeTemplateLanguageUpdate,
    CodeTemplateRead,
    CodeTemplateUpdate,
)
from scriptorium.core.models.io.common import Page, page_offset
from scriptorium.core.models.io.execution import ExecutionRead, TemplateExecutionRequest
from scriptorium.execution.languages import normalize_language
from scriptorium.server.core import constant
from scriptorium.server.services.content import blog_post_summary, can_moderate, is_admin, viewer_id
from scriptorium.server.services.deps import ActiveUserDep, OptionalUserDep, RunnerDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["code-templates"])


async def get_template(session: AsyncSession, template_id: int) -> CodeTemplate:
    """Load a template or raise 404."""
    template = await CodeTemplateRepository(session).get_by_id(template_id)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Code template {template_id} not found")
    return template


async def get_own_template(session: AsyncSession, template_id: int, user_id: int) -> CodeTemplate:
    """Load a template owned by ``user_id``; 404 if missing, 403 if someone else's."""
    template = await get_template(session, template_id)
    if template.author_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can modify this template")
    return template


@router.post(
    "",
    response_model=CodeTemplateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Code Template",
    description="Save a reusable code snippet in one of the supported languages.",
    response_description="The created code template.",
    responses={
        400: {"description": "Unsupported language"},
        401: {"description": "Not authenticated"},
    },
)
async def create_code_template(
    payload: CodeTemplateCreate, user: ActiveUserDep, session: SessionDep
) -> CodeTemplateRead:
    """
    Create a code template.

    - **title**: Template title.
    - **code**: Source code.
    - **language**: python, javascript, java, c or cpp (aliases accepted; stored lower case).
    - **description**: Optional explanation.
    - **tags**: Optional tags.
    """
    template = CodeTemplate(
        title=payload.title.strip(),
        description=payload.description,
        code=payload.code,
        language=normalize_language(payload.language),
        tags=dump_tags(payload.tags),
        author_id=user.id,
    )
    template = await CodeTemplateRepository(session).create(template)
    logger.info(f"User {user.id} created code template {template.id}")
    return CodeTemplateRead.model_validate(template)


@router.get(
    "",
    response_model=Page[CodeTemplateRead],
    summary="Search Code Templates",
    description="Search code templates, newest first. Every given filter must match.",
    responses={401: {"description": "mine=true without authentication"}},
)
async def list_code_templates(
    session: SessionDep,
    viewer: OptionalUserDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(constant.DEFAULT_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE, description="Page size"),
    title: Optional[str] = Query(None, description="Match in the title"),
    tags: Optional[str] = Query(None, description="Comma separated tags; templates with any of them match"),
    content: Optional[str] = Query(None, description="Match in the code or the description"),
    author_id: Optional[int] = Query(None, description="Only templates of this author"),
    mine: bool = Query(False, description="Only the caller's templates"),
    include_forks: bool = Query(True, description="Include forked templates"),
) -> Page[CodeTemplateRead]:
    """
    Search code templates.

    Text filters are case insensitive substrings. **mine=true** requires
    authentication and overrides **author_id**.
    """
    if mine:
        if viewer is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        author_id = viewer.id

    items, total = await CodeTemplateRepository(session).search(
        title=title,
        tags=normalize_tags(tags.split(",")) if tags else None,
        content=content,
        author_id=author_id,
        include_forks=include_forks,
        limit=limit,
        offset=page_offset(page, limit),
    )
    return Page[CodeTemplateRead].build([CodeTemplateRead.model_validate(t) for t in items], total, page, limit)


@router.get(
    "/{template_id}",
    response_model=CodeTemplateRead,
    summary="Get Code Template",
    description="Retrieve a code template, including the template it was forked from.",
    responses={404: {"description": "Code template not found"}},
)
async def get_code_template(template_id: int, session: SessionDep) -> CodeTemplateRead:
    """Get a code template."""
    return CodeTemplateRead.model_validate(await get_template(session, template_id))


@router.patch(
    "/{template_id}",
    response_model=CodeTemplateRead,
    summary="Update Code Template",
    description="Edit a code template. Only the author may edit.",
    responses={
        400: {"description": "Unsupported language"},
        403: {"description": "Not the author"},
        404: {"description": "Code template not found"},
    },
)
async def update_code_template(
    template_id: int, payload: CodeTemplateUpdate, user: ActiveUserDep, session: SessionDep
) -> CodeTemplateRead:
    """
    Update a code template.

    Omitted fields are left unchanged.
    """
    template = await get_own_template(session, template_id, user.id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if key == "tags":
            value = dump_tags(value)
        elif key == "language":
            value = normalize_language(value)
        elif key == "title":
            value = value.strip()
        setattr(template, key, value)
    template = await CodeTemplateRepository(session).update(template)
    return CodeTemplateRead.model_validate(template)


@router.patch(
    "/{template_id}/language",
    response_model=CodeTemplateRead,
    summary="Change Template Language",
    description="Change only the language of a code template.",
    responses={
        400: {"description": "Unsupported language"},
        403: {"description": "Not the author"},
        404: {"description": "Code template not found"},
    },
)
async def change_code_template_language(
    template_id: int, payload: CodeTemplateLanguageUpdate, user: ActiveUserDep, session: SessionDep
) -> CodeTemplateRead:
    """Change the language of a code template."""
    template = await get_own_template(session, template_id, user.id)
    template.language = normalize_language(payload.language)
    template = await CodeTemplateRepository(session).update(template)
    return CodeTemplateRead.model_validate(template)


@router.delete(
    "/{template_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Code Template",
    description="Delete a code template. Blog posts lose the link; forks stay and forget their origin.",
    responses={403: {"description": "Not the author"}, 404: {"description": "Code template not found"}},
)
async def delete_code_template(template_id: int, user: ActiveUserDep, session: SessionDep) -> Response:
    """Delete a code template."""
    template = await get_template(session, template_id)
    if not can_moderate(template.author_id, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can delete this template")
    await CodeTemplateRepository(session).delete(template_id)
    logger.info(f"User {user.id} deleted code template {template_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{template_id}/fork",
    response_model=CodeTemplateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Fork Code Template",
    description="Copy a template's code and language into a new template owned by the caller.",
    responses={404: {"description": "Code template not found"}},
)
async def fork_code_template(
    template_id: int, user: ActiveUserDep, session: SessionDep, payload: Optional[CodeTemplateFork] = None
) -> CodeTemplateRead:
    """
    Fork a code template.

    - **title**: Defaults to ``"<original title> (Forked)"``.
    - **description**: Defaults to the original description.
    - **tags**: Default to the original tags.
    """
    original = await get_template(session, template_id)
    payload = payload or CodeTemplateFork()
    forked = await CodeTemplateRepository(session).fork(
        original,
        author_id=user.id,
        title=payload.title.strip() if payload.title else f"{original.title} (Forked)",
        description=payload.description if payload.description is not None else original.description,
        tags=dump_tags(payload.tags) if payload.tags is not None else original.tags,
    )
    logger.info(f"User {user.id} forked code template {template_id} into {forked.id}")
    return CodeTemplateRead.model_validate(forked)


@router.get(
    "/{template_id}/blog-posts",
    response_model=List[BlogPostSummary],
    summary="List Blog Posts Using Template",
    description="Blog posts that link this code template, newest first.",
    responses={404: {"description": "Code template not found"}},
)
async def list_template_blog_posts(
    template_id: int, session: SessionDep, viewer: OptionalUserDep
) -> List[BlogPostSummary]:
    """List the visible blog posts that reference a template."""
    await get_template(session, template_id)
    rows = await BlogPostRepository(session).list_for_template(
        template_id, viewer_id=viewer_id(viewer), include_hidden=is_admin(viewer)
    )
    return [blog_post_summary(row) for row in rows]


@router.post(
    "/{template_id}/execute",
    response_model=ExecutionRead,
    summary="Run Code Template",
    description="Run a stored code template with optional standard input.",
    responses={
        404: {"description": "Code template not found"},
        503: {"description": "Toolchain for the template's language is not installed"},
    },
)
async def execute_code_template(
    template_id: int,
    session: SessionDep,
    runner: RunnerDep,
    payload: Optional[TemplateExecutionRequest] = None,
) -> ExecutionRead:
    """
    Run a code template.

    Program failures are reported through **status** with a 200 response.
    """
    template = await get_template(session, template_id)
    result = await runner.run(
        template.language,
        template.code,
        stdin=payload.input if payload else None,
        template_id=template.id,
    )
    return ExecutionRead(**result.to_dict())

"""
User Profile Endpoints.

Own profile management, avatar upload and public profiles.
"""

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from scriptorium.core.database.repositories.blog_posts import BlogPostRepository
from scriptorium.core.database.repositories.code_templates import CodeTemplateRepository
from scriptorium.core.database.repositories.users import UserRepository
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.io.code_templates import CodeTemplateRead
from scriptorium.core.models.io.profiles import UserContentRead
from scriptorium.core.models.io.users import UserRead, UserUpdate
from scriptorium.server.services.content import (
    blog_post_summary,
    can_moderate,
    user_read,
)
from scriptorium.server.services.deps import ActiveUserDep, CurrentUserDep, OptionalUserDep, SessionDep
from scriptorium.server.services.uploads import save_avatar

logger = get_logger(__name__)

router = APIRouter(tags=["users"])


@router.get(
    "/me",
    response_model=UserRead,
    summary="Get Own Profile",
    description="Retrieve the profile of the authenticated user, including email and phone.",
    responses={401: {"description": "Not authenticated"}},
)
async def get_me(user: CurrentUserDep) -> UserRead:
    """Return the caller's own profile."""
    return UserRead.model_validate(user)


@router.put(
    "/me",
    response_model=UserRead,
    summary="Update Own Profile",
    description="Update firstname, lastname, avatar or phone. Omitted fields are left unchanged.",
    responses={401: {"description": "Not authenticated"}, 403: {"description": "Account is banned"}},
)
async def update_me(payload: UserUpdate, user: ActiveUserDep, session: SessionDep) -> UserRead:
    """
    Update the caller's profile.

    - **firstname**, **lastname**: Display name.
    - **avatar**: Avatar path or URL.
    - **phone**: Phone number.
    """
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key in ("firstname", "lastname"):
            if value is None:
                continue
            value = value.strip()
        setattr(user, key, value)
    user = await UserRepository(session).update(user)
    return UserRead.model_validate(user)


@router.post(
    "/me/avatar",
    response_model=UserRead,
    summary="Upload Avatar",
    description="Upload a png, jpg, jpeg, gif or webp image as the caller's avatar.",
    responses={
        400: {"description": "File type not accepted"},
        401: {"description": "Not authenticated"},
        413: {"description": "File too large"},
    },
)
async def upload_avatar(
    user: ActiveUserDep,
    session: SessionDep,
    file: UploadFile = File(..., description="Image file"),
) -> UserRead:
    """
    Upload an avatar.

    The image is stored under a random name and the profile's ``avatar`` is
    set to its ``/uploads/...`` path.
    """
    user.avatar = await save_avatar(file)
    user = await UserRepository(session).update(user)
    return UserRead.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User Profile",
    description="Retrieve a public profile. Email and phone are only included for the user themself and admins.",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: int, session: SessionDep, viewer: OptionalUserDep) -> UserRead:
    """Return a user's public profile."""
    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    return user_read(user, viewer)


@router.get(
    "/{user_id}/content",
    response_model=UserContentRead,
    summary="Get User Content",
    description="List a user's blog posts and code templates. Hidden posts are only listed for the author and admins.",
    responses={404: {"description": "User not found"}},
)
async def get_user_content(user_id: int, session: SessionDep, viewer: OptionalUserDep) -> UserContentRead:
    """Return everything a user has published, newest first."""
    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")

    rows = await BlogPostRepository(session).list_for_author(
        user_id,
        viewer_id=viewer.id if viewer else None,
        include_hidden=can_moderate(user_id, viewer),
    )
    templates = await CodeTemplateRepository(session).list(filters={"author_id": user_id})
    return UserContentRead(
        user=user_read(user, viewer),
        blog_posts=[blog_post_summary(row) for row in rows],
        code_templates=[CodeTemplateRead.model_validate(t) for t in templates],
    )

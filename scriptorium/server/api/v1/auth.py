"""
Authentication Endpoints.

Registration, login, access token refresh and logout. Login returns the
tokens in the body and also sets them as httpOnly cookies so browser
clients do not need to store them.
"""

from typing import Optional

from fastapi import APIRouter, Cookie, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError

from scriptorium.core.database.entities.users import User
from scriptorium.core.database.repositories.users import UserRepository
from scriptorium.core.errors import InvalidTokenError
from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.domain.enums import UserRole
from scriptorium.core.models.io.common import MessageResponse
from scriptorium.core.models.io.users import (
    RefreshRequest,
    TokenResponse,
    UserLogin,
    UserRead,
    UserRegister,
)
from scriptorium.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from scriptorium.server.core import constant
from scriptorium.server.core.config import settings
from scriptorium.server.services.deps import SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


def _set_access_cookie(response: Response, token: str) -> None:
    auth = settings.auth
    response.set_cookie(
        key=constant.ACCESS_TOKEN_COOKIE,
        value=token,
        max_age=auth.access_token_expire_minutes * 60,
        httponly=True,
        samesite="strict",
        secure=auth.cookie_secure,
        path="/",
    )


def _set_refresh_cookie(response: Response, token: str) -> None:
    auth = settings.auth
    response.set_cookie(
        key=constant.REFRESH_TOKEN_COOKIE,
        value=token,
        max_age=auth.refresh_token_expire_minutes * 60,
        httponly=True,
        samesite="strict",
        secure=auth.cookie_secure,
        path="/",
    )


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a new user account with the USER role.",
    response_description="The created user profile.",
    responses={
        201: {"description": "Account created"},
        409: {"description": "Email already registered"},
        422: {"description": "Missing fields or password shorter than 6 characters"},
    },
)
async def register(payload: UserRegister, session: SessionDep) -> UserRead:
    """
    Register a new account.

    - **firstname**, **lastname**: Display name.
    - **email**: Unique login email (case insensitive).
    - **password**: At least 6 characters; stored as a bcrypt hash.
    - **avatar**, **phone**: Optional profile details.
    """
    repo = UserRepository(session)
    email = payload.email.strip().lower()
    if await repo.get_by_email(email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(
        email=email,
        firstname=payload.firstname.strip(),
        lastname=payload.lastname.strip(),
        avatar=payload.avatar,
        phone=payload.phone,
        role=UserRole.user.value,
        password_hash=hash_password(payload.password),
    )
    try:
        user = await repo.create(user)
    except IntegrityError as e:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered") from e

    logger.info(f"Registered user {user.id} ({user.email})")
    return UserRead.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log In",
    description="Exchange email and password for an access token and a refresh token.",
    response_description="Access and refresh tokens; both are also set as httpOnly cookies.",
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Account is banned"},
    },
)
async def login(payload: UserLogin, response: Response, session: SessionDep) -> TokenResponse:
    """
    Log in.

    Sets the ``token`` cookie (access token, SameSite strict) and the
    ``refresh_token`` cookie.
    """
    user = await UserRepository(session).get_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info(f"Failed login for {payload.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if user.is_banned:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is banned")

    access_token = create_access_token(user.id, user.email, user.role)
    refresh_token = create_refresh_token(user.id, user.email, user.role)
    _set_access_cookie(response, access_token)
    _set_refresh_cookie(response, refresh_token)
    logger.info(f"User {user.id} logged in")
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh Access Token",
    description="Issue a new access token from a refresh token sent in the body or the refresh_token cookie.",
    response_description="A new access token.",
    responses={
        401: {"description": "Missing, invalid or expired refresh token"},
        403: {"description": "Account is banned"},
    },
)
async def refresh(
    response: Response,
    session: SessionDep,
    payload: Optional[RefreshRequest] = None,
    refresh_cookie: Optional[str] = Cookie(default=None, alias=constant.REFRESH_TOKEN_COOKIE),
) -> TokenResponse:
    """
    Refresh the access token.

    The body value wins over the cookie when both are present.
    """
    token = (payload.refresh_token if payload else None) or refresh_cookie
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token required")
    try:
        claims = decode_token(token, "refresh")
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e

    user = await UserRepository(session).get_by_id(claims.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User no longer exists")
    if user.is_banned:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is banned")

    access_token = create_access_token(user.id, user.email, user.role)
    _set_access_cookie(response, access_token)
    return TokenResponse(access_token=access_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log Out",
    description="Clear the authentication cookies.",
)
async def logout(response: Response) -> MessageResponse:
    """Log out by clearing both authentication cookies."""
    response.delete_cookie(constant.ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(constant.REFRESH_TOKEN_COOKIE, path="/")
    return MessageResponse(message="Logged out")

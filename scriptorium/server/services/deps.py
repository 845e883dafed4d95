"""
Request Dependencies.

Annotated dependencies shared by the API routers: the database session, the
authenticated user in its various strictness levels and the code runner.

Access tokens are read from the ``Authorization: Bearer`` header first and
from the ``token`` cookie second.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.core.database import get_session
from scriptorium.core.database.entities.users import User
from scriptorium.core.database.repositories.users import UserRepository
from scriptorium.core.errors import InvalidTokenError
from scriptorium.core.logging_config import get_logger
from scriptorium.core.security import decode_token
from scriptorium.execution.runner import CodeRunner, get_code_runner
from scriptorium.server.core import constant

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Access token issued by /api/v1/auth/login")

SessionDep = Annotated[AsyncSession, Depends(get_session)]
RunnerDep = Annotated[CodeRunner, Depends(get_code_runner)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_access_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Return the bearer token from the header, falling back to the cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(constant.ACCESS_TOKEN_COOKIE) or None


async def get_optional_user(
    request: Request,
    session: SessionDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Optional[User]:
    """
    Resolve the caller if they are authenticated.

    Visitors, as well as callers presenting an unusable token, are treated as
    anonymous so that public pages keep working with a stale cookie.
    """
    token = extract_access_token(request, credentials)
    if not token:
        return None
    try:
        payload = decode_token(token, "access")
    except InvalidTokenError as e:
        logger.debug(f"Ignoring unusable access token on {request.url.path}: {e.message}")
        return None
    return await UserRepository(session).get_by_id(payload.user_id)


async def get_current_user(
    request: Request,
    session: SessionDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> User:
    """
    Resolve the authenticated caller.

    Raises:
        HTTPException: 401 when the token is missing, invalid or belongs to a deleted user
    """
    token = extract_access_token(request, credentials)
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_token(token, "access")
    except InvalidTokenError as e:
        raise _unauthorized(e.message) from e

    user = await UserRepository(session).get_by_id(payload.user_id)
    if user is None:
        raise _unauthorized("User no longer exists")
    return user


async def get_active_user(user: Annotated[User, Depends(get_current_user)]) -> User:
    """Authenticated caller allowed to write; banned accounts get 403."""
    if user.is_banned:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is banned")
    return user


async def require_admin(user: Annotated[User, Depends(get_active_user)]) -> User:
    """Authenticated, non-banned administrator."""
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator privileges required")
    return user


OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
ActiveUserDep = Annotated[User, Depends(get_active_user)]
AdminUserDep = Annotated[User, Depends(require_admin)]

"""
Password hashing and token signing.

Passwords are hashed with bcrypt. Access and refresh tokens are HS256 JWTs
signed with separate secrets so that a refresh token can never be replayed
as an access token and vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

import bcrypt
import jwt

from scriptorium.core.errors import InvalidTokenError
from scriptorium.server.core.config import AuthConfig, settings

TokenType = Literal["access", "refresh"]

# bcrypt only considers the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenPayload:
    """Claims extracted from a verified token."""

    user_id: int
    email: str
    role: str
    token_type: TokenType
    expires_at: datetime


def _auth_config(config: Optional[AuthConfig]) -> AuthConfig:
    return config or settings.auth


def hash_password(password: str, config: Optional[AuthConfig] = None) -> str:
    """Hash a plain-text password with bcrypt."""
    rounds = _auth_config(config).bcrypt_rounds
    hashed = bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plain-text password against a stored bcrypt hash.

    Malformed hashes verify as False instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], hashed.encode("utf-8"))
    except ValueError:
        return False


def _create_token(
    *,
    user_id: int,
    email: str,
    role: str,
    token_type: TokenType,
    config: AuthConfig,
) -> str:
    if token_type == "access":
        secret = config.jwt_secret
        lifetime = timedelta(minutes=config.access_token_expire_minutes)
    else:
        secret = config.jwt_refresh_secret
        lifetime = timedelta(minutes=config.refresh_token_expire_minutes)

    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(claims, secret, algorithm=config.jwt_algorithm)


def create_access_token(user_id: int, email: str, role: str, config: Optional[AuthConfig] = None) -> str:
    """Issue a short-lived access token for a user."""
    return _create_token(user_id=user_id, email=email, role=role, token_type="access", config=_auth_config(config))


def create_refresh_token(user_id: int, email: str, role: str, config: Optional[AuthConfig] = None) -> str:
    """Issue a long-lived refresh token for a user."""
    return _create_token(user_id=user_id, email=email, role=role, token_type="refresh", config=_auth_config(config))


def decode_token(token: str, expected_type: TokenType = "access", config: Optional[AuthConfig] = None) -> TokenPayload:
    """
    Verify a token and return its claims.

    Args:
        token: Encoded JWT
        expected_type: Which kind of token the caller accepts
        config: Authentication settings; defaults to the global settings

    Returns:
        The verified claims

    Raises:
        InvalidTokenError: If the signature, expiry, or token type is wrong
    """
    cfg = _auth_config(config)
    secret = cfg.jwt_secret if expected_type == "access" else cfg.jwt_refresh_secret
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[cfg.jwt_algorithm],
            options={"require": ["exp", "sub", "type"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError() from e

    if claims.get("type") != expected_type:
        raise InvalidTokenError(f"Expected a {expected_type} token")

    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError) as e:
        raise InvalidTokenError() from e

    return TokenPayload(
        user_id=user_id,
        email=claims.get("email", ""),
        role=claims.get("role", ""),
        token_type=expected_type,
        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )

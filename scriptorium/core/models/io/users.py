"""
User and authentication I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for registration, login,
token refresh and profile endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from scriptorium.core.models.domain.enums import UserRole

from .common import NonBlankStr


class UserRegister(BaseModel):
    """Schema for registering a new account."""

    firstname: NonBlankStr = Field(max_length=100, description="Given name")
    lastname: NonBlankStr = Field(max_length=100, description="Family name")
    email: EmailStr = Field(description="Login email address")
    password: str = Field(min_length=6, max_length=128, description="Password (at least 6 characters)")
    avatar: Optional[str] = Field(default=None, description="Avatar path or URL")
    phone: Optional[str] = Field(default=None, max_length=32, description="Phone number")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "firstname": "Ada",
                "lastname": "Lovelace",
                "email": "ada@example.com",
                "password": "analytical",
            }
        }
    )


class UserLogin(BaseModel):
    """Schema for logging in."""

    email: str = Field(description="Login email address")
    password: str = Field(description="Password")


class RefreshRequest(BaseModel):
    """Schema for refreshing an access token.

    The refresh token may also be sent in the ``refresh_token`` cookie.
    """

    refresh_token: Optional[str] = Field(default=None, description="Refresh token issued at login")


class TokenResponse(BaseModel):
    """Tokens issued by login and refresh."""

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"


class UserSummary(BaseModel):
    """Author information embedded in content listings."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    firstname: str
    lastname: str
    avatar: Optional[str] = None


class UserRead(BaseModel):
    """Schema for reading a user profile.

    ``email`` and ``phone`` are only filled in for the user themself and for
    administrators.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    firstname: str
    lastname: str
    email: Optional[str] = None
    avatar: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    is_banned: bool = False
    created_at: datetime


class UserUpdate(BaseModel):
    """Schema for updating one's own profile."""

    firstname: Optional[NonBlankStr] = Field(default=None, max_length=100)
    lastname: Optional[NonBlankStr] = Field(default=None, max_length=100)
    avatar: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=32)


class AdminUserUpdate(BaseModel):
    """Schema for an administrator changing a user's role or ban status."""

    role: Optional[UserRole] = None
    is_banned: Optional[bool] = None

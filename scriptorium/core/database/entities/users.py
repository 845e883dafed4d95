"""
User entity models.

This module contains the database entity for registered accounts. Passwords
are never stored in clear; only the bcrypt hash is persisted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from scriptorium.core.models.domain.enums import UserRole

from ..base import Base, utc_now


class UserBase(Base):
    """Base fields for a user account."""

    email: str = Field(max_length=320, unique=True, index=True, description="Login email address")
    firstname: str = Field(max_length=100, description="Given name")
    lastname: str = Field(max_length=100, description="Family name")
    avatar: Optional[str] = Field(default=None, description="Avatar path or URL")
    phone: Optional[str] = Field(default=None, max_length=32, description="Phone number")
    role: str = Field(default=UserRole.user.value, max_length=16, description="USER or ADMIN")
    is_banned: bool = Field(default=False, description="Banned users cannot log in or write")


class User(UserBase, table=True):
    """Persistent user account.

    Table: users
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str = Field(description="bcrypt password hash")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin.value

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"

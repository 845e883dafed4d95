"""
Seed data for a fresh database.

Creates the administrator account configured through
``SCRIPTORIUM_ADMIN_EMAIL`` / ``SCRIPTORIUM_ADMIN_PASSWORD``. Running the
seed again is a no-op once the account exists.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.domain.enums import UserRole
from scriptorium.core.security import hash_password
from scriptorium.server.core.config import AdminSeedConfig, settings

from .entities.users import User
from .repositories.users import UserRepository

logger = get_logger(__name__)


async def seed_admin(session: AsyncSession, config: Optional[AdminSeedConfig] = None) -> Optional[User]:
    """
    Create the seed administrator if configured and missing.

    Args:
        session: Async session to write with
        config: Seed credentials; defaults to the global settings

    Returns:
        The newly created administrator, or None if nothing was created
    """
    seed = config or settings.admin_seed
    if not seed.email or not seed.password:
        logger.debug("No seed administrator configured")
        return None

    repo = UserRepository(session)
    if await repo.get_by_email(seed.email) is not None:
        logger.debug(f"Seed administrator {seed.email} already exists")
        return None

    admin = User(
        email=seed.email.strip().lower(),
        firstname=seed.firstname,
        lastname=seed.lastname,
        role=UserRole.admin.value,
        password_hash=hash_password(seed.password),
    )
    admin = await repo.create(admin)
    logger.info(f"Created seed administrator {admin.email} (id={admin.id})")
    return admin

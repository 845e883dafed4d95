"""
Process-wide engine and session factory.

Both are built once from ``SCRIPTORIUM_DATABASE_URL``. Routes receive a
session per request through ``get_session``; startup code opens its own
with ``async_session_maker``.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.core.logging_config import get_logger
from scriptorium.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

engine = create_engine(settings.database.url, echo=settings.database.echo)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session that is closed after the response."""
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """Create missing tables unless ``SCRIPTORIUM_DATABASE_CREATE_TABLES`` is off."""
    if not settings.database.create_tables:
        logger.info("Table creation disabled; expecting Alembic-managed schema")
        return
    await create_all(engine)
    logger.debug(f"Tables ensured on {engine.url.render_as_string(hide_password=True)}")

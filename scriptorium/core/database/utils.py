"""
Engine and session factory helpers.

``create_engine`` accepts the URLs people usually paste (``postgres://``,
``sqlite:///file.db``) and switches them to the async drivers Scriptorium
ships with. ``create_all`` builds the schema straight from the entities and
is what tests and the default SQLite setup rely on; deployments that manage
the schema with Alembic turn it off.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from .base import Base

_POSTGRES_URL = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")
_SQLITE_URL = re.compile(r"^sqlite(?:\+pysqlite)?://")


def normalize_database_url(db_url: str) -> str:
    """Point Postgres URLs at asyncpg and SQLite URLs at aiosqlite."""
    url = _POSTGRES_URL.sub("postgresql+asyncpg://", db_url, count=1)
    return _SQLITE_URL.sub("sqlite+aiosqlite://", url, count=1)


def create_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """
    Build the async engine for ``db_url``.

    An in-memory SQLite database lives inside a single connection, so it is
    served through ``StaticPool`` to let every session see the same tables.
    """
    url = normalize_database_url(db_url)
    options: Dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.endswith("://"):
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows stay readable after commit; handlers serialize them afterwards
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create every missing table known to the entity metadata."""
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

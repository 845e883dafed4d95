"""
Repository base class and query helpers.

Every Scriptorium repository wraps one ``AsyncSession`` and one SQLModel
entity. Writes commit immediately so a route handler can return the
refreshed row; the ``purge*`` helpers on concrete repositories only stage
deletes so several of them can share a single commit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from ..base import utc_now

EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """Shared CRUD for entities keyed by an integer ``id``.

    Subclasses decide how ``delete`` cascades to dependent rows and how
    ``list`` is ordered.
    """

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    async def create(self, entity: EntityType) -> EntityType:
        """Insert ``entity`` and return it with its generated id and timestamps."""
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        """Fetch one row by id, or None when it does not exist."""
        result = await self.session.execute(select(self.model).where(self.model.id == entity_id))
        return result.scalar_one_or_none()

    async def update(self, entity: EntityType) -> EntityType:
        """
        Persist changes made to a loaded entity.

        Entities with an ``updated_at`` column get it bumped to now.
        """
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Number of rows matching the equality ``filters``."""
        stmt = QueryBuilder.apply_filters(select(func.count()).select_from(self.model), self.model, filters or {})
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """Remove a row and whatever depends on it; False if the id is unknown."""

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """One page of rows matching the equality ``filters``."""


class QueryBuilder:
    """Small helpers shared by the repository queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """
        Add ``column == value`` clauses for each filter.

        Keys that are not columns of ``model`` and ``None`` values are skipped,
        so optional query parameters can be passed straight through.
        """
        for key, value in filters.items():
            if value is None or not hasattr(model, key):
                continue
            stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt

    @staticmethod
    def contains(column, term: str):
        """Case-insensitive substring match; ``%`` and ``_`` in ``term`` match literally."""
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return column.ilike(f"%{escaped}%", escape="\\")

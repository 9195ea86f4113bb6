"""
Base repository with common query helpers.
"""

from typing import TypeVar, Generic, Type, Any
from uuid import UUID
from sqlalchemy import Select, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from authgraph.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def coerce_uuid(value: UUID | str) -> UUID | None:
    """Convert a str id to UUID; None if it is not a valid UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing common read operations.

    Usage:
        class AuthItemRepository(BaseRepository[AuthItem]):
            model = AuthItem

        repo = AuthItemRepository(db)
        item = await repo.get_one(name="admin")
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        """Base query - override to add default filters or eager loads."""
        return select(self.model)

    async def get_by_id(self, id: UUID | str) -> ModelT | None:
        """Get entity by ID. Malformed ids are treated as missing."""
        id = coerce_uuid(id)
        if id is None:
            return None
        stmt = self._base_query().where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: list[UUID | str]) -> list[ModelT]:
        """Get multiple entities by IDs, skipping malformed ones."""
        uuids = [u for u in (coerce_uuid(i) for i in ids) if u is not None]
        if not uuids:
            return []
        stmt = self._base_query().where(self.model.id.in_(uuids))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_one(self, **filters: Any) -> ModelT | None:
        """Get single entity by filters."""
        stmt = self._base_query()
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self, **filters: Any) -> int:
        """Count entities matching filters."""
        stmt = select(func.count()).select_from(self.model)
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        return await self.db.scalar(stmt) or 0

    async def all(self, order_by: str | None = None, **filters: Any) -> list[ModelT]:
        """Get all entities matching filters (no pagination)."""
        stmt = self._base_query()
        for field, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, field) == value)
        if order_by:
            stmt = stmt.order_by(getattr(self.model, order_by))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

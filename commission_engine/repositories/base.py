"""
Base repository.

Shared lookups and inserts for the engine's tables. Every model uses a
UUID primary key; tenant scoping is passed as an ordinary filter.
"""

import uuid
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository for one model.

    Example:
        class TenantRepository(BaseRepository[Tenant]):
            def __init__(self, session: AsyncSession):
                super().__init__(Tenant, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_id(self, id: uuid.UUID) -> ModelType | None:
        """Get row by primary key, regardless of tenant."""
        return await self.session.get(self.model, id)

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Get the single row matching column filters.

        Args:
            **filters: Column equality filters, e.g. tenant_id=..., code=...

        Returns:
            Matching row or None
        """
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, **data: Any) -> ModelType:
        """
        Insert a row and flush it so generated ids are available.

        The caller owns the transaction; nothing is committed here.
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def exists(self, **filters: Any) -> bool:
        """Check whether any row matches column filters."""
        stmt = select(select(self.model).filter_by(**filters).exists())
        result = await self.session.execute(stmt)
        return bool(result.scalar())

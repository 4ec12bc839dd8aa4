"""
Tenant repository.

Data access layer for Tenant model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.tenant import Tenant
from commission_engine.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Tenant repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize tenant repository."""
        super().__init__(Tenant, session)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        """Get tenant by slug."""
        return await self.get_by(slug=slug)

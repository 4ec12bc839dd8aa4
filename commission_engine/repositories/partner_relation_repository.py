"""
PartnerRelation repository.

Data access layer for PartnerRelation model.
"""

import uuid

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.partner_relation import PartnerRelation
from commission_engine.repositories.base import BaseRepository


class PartnerRelationRepository(BaseRepository[PartnerRelation]):
    """PartnerRelation repository with upline queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize partner relation repository."""
        super().__init__(PartnerRelation, session)

    async def get_upline_edges(
        self, tenant_id: uuid.UUID, child_id: uuid.UUID
    ) -> list[PartnerRelation]:
        """
        Get active edges pointing up from ``child_id``.

        Sponsorship edges come first, then the rest in the order they were
        established.

        Args:
            tenant_id: Tenant ID
            child_id: Child partner ID

        Returns:
            List of active relations where the partner is the child
        """
        type_order = case(
            (PartnerRelation.relationship_type == "sponsorship", 0),
            else_=1,
        )
        stmt = (
            select(PartnerRelation)
            .where(
                PartnerRelation.tenant_id == tenant_id,
                PartnerRelation.child_partner_id == child_id,
                PartnerRelation.status == "active",
            )
            .order_by(type_order, PartnerRelation.established_at, PartnerRelation.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_any_relations(
        self, tenant_id: uuid.UUID, child_id: uuid.UUID
    ) -> bool:
        """Check whether any edge (in any status) exists for the child."""
        return await self.exists(tenant_id=tenant_id, child_partner_id=child_id)

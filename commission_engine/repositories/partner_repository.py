"""
Partner repository.

Data access layer for Partner model.
"""

import uuid
from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.partner import Partner
from commission_engine.models.partner_tier import PartnerTier
from commission_engine.repositories.base import BaseRepository


class PartnerRepository(BaseRepository[Partner]):
    """Partner repository with tenant-scoped queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize partner repository."""
        super().__init__(Partner, session)

    async def get_with_tier(
        self, tenant_id: uuid.UUID, partner_id: uuid.UUID
    ) -> tuple[Partner, PartnerTier | None] | None:
        """
        Get partner together with its current tier.

        The tier is read at call time, never cached on the partner.

        Args:
            tenant_id: Tenant ID
            partner_id: Partner ID

        Returns:
            (partner, tier) tuple, tier is None when the reference dangles.
            None if the partner itself does not exist in the tenant.
        """
        stmt = (
            select(Partner, PartnerTier)
            .outerjoin(
                PartnerTier,
                (PartnerTier.id == Partner.tier_id)
                & (PartnerTier.tenant_id == Partner.tenant_id),
            )
            .where(Partner.tenant_id == tenant_id, Partner.id == partner_id)
            # Refresh rows already in the identity map from an earlier run
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]

    async def get_referral_counts(
        self,
        tenant_id: uuid.UUID,
        sponsor_id: uuid.UUID,
        since: datetime,
    ) -> dict[str, int]:
        """
        Count direct referrals in a single query.

        Args:
            tenant_id: Tenant ID
            sponsor_id: Sponsor partner ID
            since: Start of the "recent" window

        Returns:
            Dict with total, active and since counts
        """
        stmt = select(
            func.count(Partner.id).label("total"),
            func.count(case((Partner.status == "active", 1))).label("active"),
            func.count(case((Partner.enrolled_at >= since, 1))).label("since"),
        ).where(
            Partner.tenant_id == tenant_id,
            Partner.sponsor_id == sponsor_id,
        )
        result = await self.session.execute(stmt)
        row = result.one()
        return {
            "total": row.total or 0,
            "active": row.active or 0,
            "since": row.since or 0,
        }

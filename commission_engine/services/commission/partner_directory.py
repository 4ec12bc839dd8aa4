"""
Partner directory.

Read-only view of partners, tiers and referral edges for one engine run.
Every lookup is scoped by an explicit tenant id.
"""

import uuid

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.repositories.partner_relation_repository import (
    PartnerRelationRepository,
)
from commission_engine.repositories.partner_repository import PartnerRepository
from commission_engine.repositories.tenant_repository import TenantRepository
from commission_engine.services.commission.schemas import PartnerSnapshot
from commission_engine.utils.exceptions import UpstreamDataError


class PartnerDirectory:
    """
    Partner directory reader.

    Exposes "get partner + tier by id" and "get active upline edges for
    partner". Tier values are read on every call so tier changes apply to
    the next calculation.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize partner directory.

        Args:
            session: Async database session
        """
        self.session = session
        self.tenant_repo = TenantRepository(session)
        self.partner_repo = PartnerRepository(session)
        self.relation_repo = PartnerRelationRepository(session)

    async def tenant_exists(self, tenant_id: uuid.UUID) -> bool:
        """Check whether the tenant exists."""
        return await self.tenant_repo.get_by_id(tenant_id) is not None

    async def get_partner(
        self, tenant_id: uuid.UUID, partner_id: uuid.UUID
    ) -> PartnerSnapshot | None:
        """
        Get partner with its current tier.

        Args:
            tenant_id: Tenant ID
            partner_id: Partner ID

        Returns:
            Snapshot, or None if the partner does not exist in the tenant

        Raises:
            UpstreamDataError: If the partner's tier reference dangles
        """
        row = await self.partner_repo.get_with_tier(tenant_id, partner_id)
        if row is None:
            return None

        partner, tier = row
        if tier is None:
            raise UpstreamDataError(
                f"Partner {partner.code} references missing tier {partner.tier_id}"
            )

        rate = (
            partner.commission_rate
            if partner.commission_rate is not None
            else tier.default_commission_rate
        )

        return PartnerSnapshot(
            partner_id=partner.id,
            code=partner.code,
            status=partner.status,
            tier_id=tier.id,
            tier_name=tier.name,
            tier_rate=tier.default_commission_rate,
            tier_min_rate=tier.min_commission_rate,
            tier_max_rate=tier.max_commission_rate,
            tier_max_depth=tier.max_referral_depth,
            rate=rate,
            has_rate_override=partner.commission_rate is not None,
            sponsor_id=partner.sponsor_id,
        )

    async def get_upline_parent_ids(
        self, tenant_id: uuid.UUID, partner: PartnerSnapshot
    ) -> list[uuid.UUID]:
        """
        Get the partners one hop up from ``partner``.

        Active relation edges win. A partner with no relation rows at all
        falls back to its sponsor link. A partner whose edges are all
        severed or inactive has no upline.

        Args:
            tenant_id: Tenant ID
            partner: Partner snapshot

        Returns:
            Parent partner IDs, sponsorship first, without duplicates
        """
        edges = await self.relation_repo.get_upline_edges(tenant_id, partner.partner_id)
        if edges:
            parent_ids: list[uuid.UUID] = []
            for edge in edges:
                if edge.parent_partner_id not in parent_ids:
                    parent_ids.append(edge.parent_partner_id)
            return parent_ids

        if await self.relation_repo.has_any_relations(tenant_id, partner.partner_id):
            logger.debug(
                "Partner has only inactive upline edges",
                extra={"tenant_id": str(tenant_id), "partner_code": partner.code},
            )
            return []

        return [partner.sponsor_id] if partner.sponsor_id else []

    async def get_owning_tenant(self, partner_id: uuid.UUID) -> uuid.UUID | None:
        """Get the tenant a partner belongs to, ignoring tenant scoping."""
        partner = await self.partner_repo.get_by_id(partner_id)
        return partner.tenant_id if partner else None

"""
Commission statistics module.

Earnings and referral counts for a single partner.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.config.constants import MONEY_QUANTUM, MONEY_ROUNDING
from commission_engine.repositories.commission_repository import CommissionRepository
from commission_engine.repositories.partner_repository import PartnerRepository
from commission_engine.services.base_service import BaseService, log_operation
from commission_engine.utils.datetime_utils import start_of_month, utc_now


class CommissionStatisticsManager(BaseService):
    """Manages partner commission statistics."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize statistics manager."""
        super().__init__(session)
        self.commission_repo = CommissionRepository(session)
        self.partner_repo = PartnerRepository(session)

    @log_operation
    async def get_partner_commission_stats(
        self, tenant_id: uuid.UUID, partner_id: uuid.UUID
    ) -> dict:
        """
        Get commission statistics for a partner.

        Args:
            tenant_id: Tenant ID
            partner_id: Beneficiary partner ID

        Returns:
            Dict with total/pending/paid earnings and transaction counts
        """
        totals = await self.commission_repo.get_partner_totals(tenant_id, partner_id)

        for key in ("total_earnings", "pending_earnings", "paid_earnings"):
            totals[key] = totals[key].quantize(MONEY_QUANTUM, rounding=MONEY_ROUNDING)

        return totals

    @log_operation
    async def get_partner_referral_stats(
        self, tenant_id: uuid.UUID, partner_id: uuid.UUID
    ) -> dict:
        """
        Get direct referral statistics for a partner.

        Args:
            tenant_id: Tenant ID
            partner_id: Sponsor partner ID

        Returns:
            Dict with total_direct_referrals, active_referrals and
            this_month_referrals
        """
        counts = await self.partner_repo.get_referral_counts(
            tenant_id, partner_id, since=start_of_month(utc_now())
        )
        return {
            "total_direct_referrals": counts["total"],
            "active_referrals": counts["active"],
            "this_month_referrals": counts["since"],
        }

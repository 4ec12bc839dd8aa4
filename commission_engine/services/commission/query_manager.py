"""
Commission query management module.

Handles reading commission records for partners and transactions.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.partner_commission import PartnerCommission
from commission_engine.repositories.commission_repository import CommissionRepository
from commission_engine.services.base_service import BaseService, log_operation

DEFAULT_PAGE_LIMIT = 100


class CommissionQueryManager(BaseService):
    """Manages commission query operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize query manager."""
        super().__init__(session)
        self.commission_repo = CommissionRepository(session)

    @log_operation
    async def get_partner_commissions(
        self,
        tenant_id: uuid.UUID,
        partner_id: uuid.UUID,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
        payout_status: str | None = None,
        transaction_type: str | None = None,
    ) -> list[PartnerCommission]:
        """
        Get commissions earned by a partner.

        Args:
            tenant_id: Tenant ID
            partner_id: Beneficiary partner ID
            limit: Max number of records
            offset: Number of records to skip
            payout_status: Optional payout status filter
            transaction_type: Optional transaction type filter

        Returns:
            Records, newest transaction first
        """
        return await self.commission_repo.find_for_partner(
            tenant_id,
            partner_id,
            limit=max(1, limit),
            offset=max(0, offset),
            payout_status=payout_status,
            transaction_type=transaction_type,
        )

    @log_operation
    async def get_transaction_commissions(
        self, tenant_id: uuid.UUID, transaction_id: str
    ) -> list[PartnerCommission]:
        """Get every commission of one transaction, ordered by level."""
        return await self.commission_repo.find_by_transaction(tenant_id, transaction_id)

"""
Idempotent ledger writer.

Persists one commission record per
(tenant, transaction, beneficiary, levels_from_source) exactly once.
"""

import uuid
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.config.constants import DEFAULT_ENGINE_VERSION
from commission_engine.repositories.commission_repository import CommissionRepository
from commission_engine.services.commission.partner_directory import PartnerDirectory
from commission_engine.services.commission.schemas import (
    LedgerWriteResult,
    PartnerSnapshot,
    TransactionEvent,
    UplineAncestor,
)
from commission_engine.utils.datetime_utils import utc_now
from commission_engine.utils.exceptions import (
    TenantIsolationError,
    TransientPersistenceError,
)


class IdempotentLedgerWriter:
    """
    Writes commission records keyed by the idempotency constraint.

    Must run inside the caller's transaction. Each write gets its own
    SAVEPOINT, so a failed write leaves earlier writes of the same run
    intact until the caller decides to commit or roll back.
    """

    def __init__(
        self,
        session: AsyncSession,
        directory: PartnerDirectory | None = None,
        engine_version: str = DEFAULT_ENGINE_VERSION,
    ) -> None:
        """
        Initialize ledger writer.

        Args:
            session: Async database session (transaction owned by caller)
            directory: Partner directory used for tenant isolation checks
            engine_version: Version stamped on new records
        """
        self.session = session
        self.directory = directory or PartnerDirectory(session)
        self.commission_repo = CommissionRepository(session)
        self.engine_version = engine_version

    async def write(
        self,
        tenant_id: uuid.UUID,
        event: TransactionEvent,
        beneficiary: UplineAncestor,
        source: PartnerSnapshot,
        amount: Decimal,
    ) -> LedgerWriteResult:
        """
        Insert the commission record unless it already exists.

        Args:
            tenant_id: Tenant the run belongs to
            event: Transaction event being processed
            beneficiary: Ancestor being paid
            source: Partner credited with the sale
            amount: Rounded commission amount

        Returns:
            LedgerWriteResult; was_newly_created is False when the key existed

        Raises:
            TenantIsolationError: If any party belongs to another tenant
            TransientPersistenceError: If a conflict was reported but the
                existing row is not visible yet
        """
        await self._check_tenant(tenant_id, event, beneficiary, source)

        async with self.session.begin_nested():
            record_id = await self.commission_repo.insert_if_absent(
                tenant_id=tenant_id,
                transaction_id=event.transaction_id,
                transaction_amount=event.amount,
                currency=event.currency,
                transaction_type=event.transaction_type.value,
                beneficiary_partner_id=beneficiary.partner_id,
                beneficiary_partner_code=beneficiary.code,
                source_partner_id=source.partner_id,
                source_partner_code=source.code,
                commission_level=beneficiary.levels_from_source,
                levels_from_source=beneficiary.levels_from_source,
                commission_percentage=beneficiary.rate,
                commission_amount=amount,
                tier_id=beneficiary.tier_id,
                tier_name=beneficiary.tier_name,
                tier_rate=beneficiary.tier_rate,
                tier_max_depth=beneficiary.tier_max_depth,
                calculation_status="calculated",
                payout_status="pending",
                transaction_date=event.occurred_at,
                calculation_date=utc_now(),
                commission_engine_version=self.engine_version,
                event_metadata=dict(event.metadata) or None,
            )

        if record_id is not None:
            return LedgerWriteResult(
                record_id=record_id,
                was_newly_created=True,
                commission_amount=amount,
            )

        existing = await self.commission_repo.get_by_idempotency_key(
            tenant_id=tenant_id,
            transaction_id=event.transaction_id,
            beneficiary_partner_id=beneficiary.partner_id,
            levels_from_source=beneficiary.levels_from_source,
        )
        if existing is None:
            raise TransientPersistenceError(
                f"Commission for {beneficiary.code} level "
                f"{beneficiary.levels_from_source} conflicted but is not visible"
            )

        logger.debug(
            "Commission record already present",
            extra={
                "tenant_id": str(tenant_id),
                "transaction_id": event.transaction_id,
                "beneficiary": beneficiary.code,
                "level": beneficiary.levels_from_source,
                "record_id": str(existing.id),
            },
        )
        return LedgerWriteResult(
            record_id=existing.id,
            was_newly_created=False,
            commission_amount=existing.commission_amount,
        )

    async def _check_tenant(
        self,
        tenant_id: uuid.UUID,
        event: TransactionEvent,
        beneficiary: UplineAncestor,
        source: PartnerSnapshot,
    ) -> None:
        if event.tenant_id != tenant_id:
            raise TenantIsolationError(
                f"SECURITY VIOLATION: event tenant {event.tenant_id} "
                f"does not match run tenant {tenant_id}"
            )

        for role, partner_id, code in (
            ("beneficiary", beneficiary.partner_id, beneficiary.code),
            ("source", source.partner_id, source.code),
        ):
            owner = await self.directory.get_owning_tenant(partner_id)
            if owner != tenant_id:
                raise TenantIsolationError(
                    f"SECURITY VIOLATION: {role} partner {code} "
                    f"does not belong to tenant {tenant_id}"
                )

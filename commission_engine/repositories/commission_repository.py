"""
Commission repository.

Data access layer for PartnerCommission model, including the
insert-or-ignore write keyed by the idempotency constraint.
"""

import uuid
from decimal import Decimal
from typing import Any

from sqlalchemy import case, func, insert, inspect, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.partner_commission import (
    IDEMPOTENCY_KEY_COLUMNS,
    PartnerCommission,
)
from commission_engine.repositories.base import BaseRepository

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class CommissionRepository(BaseRepository[PartnerCommission]):
    """PartnerCommission repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission repository."""
        super().__init__(PartnerCommission, session)

    def _column_values(self, data: dict[str, Any]) -> dict[Any, Any]:
        # Keyed by Column so mapped names like event_metadata resolve to
        # their real column ("metadata")
        columns = inspect(PartnerCommission).columns
        return {columns[key]: value for key, value in data.items()}

    async def insert_if_absent(self, **data: Any) -> uuid.UUID | None:
        """
        Insert a commission record unless its idempotency key exists.

        Uses INSERT ... ON CONFLICT DO NOTHING RETURNING id where the
        dialect supports it. Elsewhere the insert runs in a SAVEPOINT and a
        unique violation is treated as a conflict.

        Args:
            **data: Column values keyed by mapped attribute name

        Returns:
            New record ID, or None if a record with the same key exists
        """
        data.setdefault("id", uuid.uuid4())
        table = PartnerCommission.__table__
        values = self._column_values(data)

        dialect = self.session.get_bind().dialect.name
        dialect_insert = _DIALECT_INSERTS.get(dialect)

        if dialect_insert is not None:
            stmt = (
                dialect_insert(table)
                .values(values)
                .on_conflict_do_nothing(index_elements=list(IDEMPOTENCY_KEY_COLUMNS))
                .returning(table.c.id)
            )
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

        try:
            async with self.session.begin_nested():
                await self.session.execute(insert(table).values(values))
        except IntegrityError:
            return None
        return data["id"]

    async def get_by_idempotency_key(
        self,
        tenant_id: uuid.UUID,
        transaction_id: str,
        beneficiary_partner_id: uuid.UUID,
        levels_from_source: int,
    ) -> PartnerCommission | None:
        """Get the record owning an idempotency key."""
        return await self.get_by(
            tenant_id=tenant_id,
            transaction_id=transaction_id,
            beneficiary_partner_id=beneficiary_partner_id,
            levels_from_source=levels_from_source,
        )

    async def find_by_transaction(
        self, tenant_id: uuid.UUID, transaction_id: str
    ) -> list[PartnerCommission]:
        """
        Get all records of one transaction, nearest ancestor first.

        Args:
            tenant_id: Tenant ID
            transaction_id: External transaction ID

        Returns:
            List of commission records ordered by level
        """
        stmt = (
            select(PartnerCommission)
            .where(
                PartnerCommission.tenant_id == tenant_id,
                PartnerCommission.transaction_id == transaction_id,
            )
            .order_by(PartnerCommission.levels_from_source)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_for_partner(
        self,
        tenant_id: uuid.UUID,
        partner_id: uuid.UUID,
        limit: int = 100,
        offset: int = 0,
        payout_status: str | None = None,
        transaction_type: str | None = None,
    ) -> list[PartnerCommission]:
        """
        Get records where the partner is the beneficiary.

        Args:
            tenant_id: Tenant ID
            partner_id: Beneficiary partner ID
            limit: Max number of results
            offset: Number of results to skip
            payout_status: Optional payout status filter
            transaction_type: Optional transaction type filter

        Returns:
            Records ordered by transaction date then calculation date, newest first
        """
        stmt = select(PartnerCommission).where(
            PartnerCommission.tenant_id == tenant_id,
            PartnerCommission.beneficiary_partner_id == partner_id,
        )
        if payout_status:
            stmt = stmt.where(PartnerCommission.payout_status == payout_status)
        if transaction_type:
            stmt = stmt.where(PartnerCommission.transaction_type == transaction_type)

        stmt = (
            stmt.order_by(
                PartnerCommission.transaction_date.desc(),
                PartnerCommission.calculation_date.desc(),
            )
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_partner_totals(
        self, tenant_id: uuid.UUID, partner_id: uuid.UUID
    ) -> dict[str, Any]:
        """
        Aggregate a beneficiary's earnings in a single query.

        Returns:
            Dict with total/pending/paid sums and counts
        """
        amount = PartnerCommission.commission_amount
        is_pending = PartnerCommission.payout_status == "pending"
        is_paid = PartnerCommission.payout_status == "paid"

        stmt = select(
            func.coalesce(func.sum(amount), 0).label("total_earnings"),
            func.coalesce(func.sum(case((is_pending, amount), else_=0)), 0).label(
                "pending_earnings"
            ),
            func.coalesce(func.sum(case((is_paid, amount), else_=0)), 0).label(
                "paid_earnings"
            ),
            func.count(PartnerCommission.id).label("total_transactions"),
            func.count(case((is_pending, 1))).label("pending_transactions"),
            func.count(case((is_paid, 1))).label("paid_transactions"),
        ).where(
            PartnerCommission.tenant_id == tenant_id,
            PartnerCommission.beneficiary_partner_id == partner_id,
        )
        result = await self.session.execute(stmt)
        row = result.one()

        return {
            "total_earnings": Decimal(str(row.total_earnings or 0)),
            "pending_earnings": Decimal(str(row.pending_earnings or 0)),
            "paid_earnings": Decimal(str(row.paid_earnings or 0)),
            "total_transactions": row.total_transactions or 0,
            "pending_transactions": row.pending_transactions or 0,
            "paid_transactions": row.paid_transactions or 0,
        }

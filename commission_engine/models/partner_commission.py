"""
PartnerCommission model.

The engine's only persisted output: one row per
(tenant, transaction, beneficiary, levels_from_source). That tuple is the
idempotency key and is enforced by a unique constraint.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base, TimestampMixin
from commission_engine.models.types import (
    CommissionMoneyType,
    JSONType,
    MoneyType,
    RateType,
)
from commission_engine.utils.datetime_utils import utc_now

IDEMPOTENCY_KEY_COLUMNS = (
    "tenant_id",
    "transaction_id",
    "beneficiary_partner_id",
    "levels_from_source",
)


class PartnerCommission(TimestampMixin, Base):
    """
    PartnerCommission entity.

    Attributes:
        id: Primary key
        tenant_id: Owning tenant
        transaction_id: External transaction identifier
        transaction_amount: Sale amount the commission was computed from
        transaction_type: payment / signup / recurring / bonus
        beneficiary_partner_id: Partner being paid
        beneficiary_partner_code: Code snapshot of the beneficiary
        source_partner_id: Partner credited with the sale
        source_partner_code: Code snapshot of the source partner
        commission_level: Same as levels_from_source, kept for reporting
        levels_from_source: 1 = direct sponsor, 2 = sponsor's sponsor, ...
        commission_percentage: Rate applied (fraction)
        commission_amount: Rounded amount owed
        tier_id / tier_name / tier_rate / tier_max_depth: Tier snapshot
        calculation_status: Owned by downstream review after creation
        payout_status: Owned by downstream payout after creation
        commission_engine_version: Engine version that produced the row
    """

    __tablename__ = "partner_commissions"
    __table_args__ = (
        UniqueConstraint(
            *IDEMPOTENCY_KEY_COLUMNS,
            name="uq_partner_commission_idempotency",
        ),
        ForeignKeyConstraint(
            ["tenant_id", "beneficiary_partner_id"],
            ["partners.tenant_id", "partners.id"],
            name="fk_partner_commissions_beneficiary_same_tenant",
            ondelete="RESTRICT",
        ),
        ForeignKeyConstraint(
            ["tenant_id", "source_partner_id"],
            ["partners.tenant_id", "partners.id"],
            name="fk_partner_commissions_source_same_tenant",
            ondelete="RESTRICT",
        ),
        CheckConstraint(
            "transaction_amount > 0",
            name="check_partner_commission_transaction_amount_positive",
        ),
        CheckConstraint(
            "commission_amount >= 0",
            name="check_partner_commission_amount_non_negative",
        ),
        CheckConstraint(
            "commission_percentage >= 0 AND commission_percentage <= 1",
            name="check_partner_commission_rate_range",
        ),
        CheckConstraint(
            "levels_from_source >= 1 AND commission_level >= 1",
            name="check_partner_commission_levels_positive",
        ),
        CheckConstraint(
            "beneficiary_partner_id != source_partner_id",
            name="check_partner_commission_not_self",
        ),
        CheckConstraint(
            "transaction_type IN ('payment', 'signup', 'recurring', 'bonus')",
            name="check_partner_commission_transaction_type",
        ),
        CheckConstraint(
            "calculation_status IN "
            "('calculated', 'approved', 'paid', 'cancelled', 'disputed')",
            name="check_partner_commission_calculation_status",
        ),
        CheckConstraint(
            "payout_status IN "
            "('pending', 'processing', 'paid', 'failed', 'cancelled')",
            name="check_partner_commission_payout_status",
        ),
        Index(
            "idx_partner_commissions_beneficiary",
            "tenant_id",
            "beneficiary_partner_id",
            "transaction_date",
        ),
        Index(
            "idx_partner_commissions_transaction",
            "tenant_id",
            "transaction_id",
        ),
        Index(
            "idx_partner_commissions_payout_status",
            "tenant_id",
            "payout_status",
        ),
    )

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Transaction
    transaction_id: Mapped[str] = mapped_column(String(255), nullable=False)
    transaction_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    currency: Mapped[str] = mapped_column(
        String(10), nullable=False, default="USD"
    )
    transaction_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="payment"
    )

    # Parties
    beneficiary_partner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False
    )
    beneficiary_partner_code: Mapped[str] = mapped_column(
        String(50), nullable=False
    )
    source_partner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    source_partner_code: Mapped[str] = mapped_column(String(50), nullable=False)

    # Level
    commission_level: Mapped[int] = mapped_column(Integer, nullable=False)
    levels_from_source: Mapped[int] = mapped_column(Integer, nullable=False)

    # Amounts
    commission_percentage: Mapped[Decimal] = mapped_column(
        RateType, nullable=False
    )
    commission_amount: Mapped[Decimal] = mapped_column(
        CommissionMoneyType, nullable=False
    )

    # Tier snapshot at calculation time
    tier_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    tier_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tier_rate: Mapped[Decimal | None] = mapped_column(RateType, nullable=True)
    tier_max_depth: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Status (downstream owned after creation)
    calculation_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="calculated"
    )
    payout_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending"
    )

    # Dates
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    calculation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    approved_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    commission_engine_version: Mapped[str] = mapped_column(
        String(20), nullable=False, default="1.0"
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    event_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )

    def __repr__(self) -> str:
        return (
            f"<PartnerCommission(transaction={self.transaction_id!r}, "
            f"beneficiary={self.beneficiary_partner_code!r}, "
            f"level={self.levels_from_source}, "
            f"amount={self.commission_amount})>"
        )

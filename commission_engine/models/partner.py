"""
Partner model.

A referring party. ``sponsor_id`` is the direct "who referred me" edge.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base, TimestampMixin
from commission_engine.models.types import RateType
from commission_engine.utils.datetime_utils import utc_now


class Partner(TimestampMixin, Base):
    """Partner model - referring parties within a tenant."""

    __tablename__ = "partners"
    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_partner_code_per_tenant"),
        # Target of composite (tenant_id, partner_id) foreign keys
        UniqueConstraint("tenant_id", "id", name="uq_partner_tenant_id"),
        ForeignKeyConstraint(
            ["tenant_id", "tier_id"],
            ["partner_tiers.tenant_id", "partner_tiers.id"],
            name="fk_partners_tier_same_tenant",
            ondelete="RESTRICT",
        ),
        ForeignKeyConstraint(
            ["tenant_id", "sponsor_id"],
            ["partners.tenant_id", "partners.id"],
            name="fk_partners_sponsor_same_tenant",
        ),
        CheckConstraint(
            "sponsor_id IS NULL OR sponsor_id != id",
            name="check_partner_no_self_sponsorship",
        ),
        CheckConstraint(
            "commission_rate IS NULL OR "
            "(commission_rate >= 0 AND commission_rate <= 1)",
            name="check_partner_commission_rate_range",
        ),
        CheckConstraint(
            "status IN ('active', 'inactive', 'suspended', 'terminated')",
            name="check_partner_status",
        ),
        Index("idx_partners_tenant_sponsor", "tenant_id", "sponsor_id"),
        Index("idx_partners_tenant_status", "tenant_id", "status"),
    )

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Identity
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Tier and referral edge
    tier_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    sponsor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    # Optional per-partner override of the tier default rate
    commission_rate: Mapped[Decimal | None] = mapped_column(
        RateType, nullable=True
    )

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    @property
    def is_active(self) -> bool:
        """Only active partners earn commission."""
        return self.status == "active"

    def __repr__(self) -> str:
        return f"<Partner(code={self.code!r}, status={self.status!r})>"

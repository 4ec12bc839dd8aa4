"""
PartnerTier model.

Named bracket defining a partner's commission rate and how many hops
upstream from a sale the partner may earn from.
"""

import uuid
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base, TimestampMixin
from commission_engine.models.types import RateType


class PartnerTier(TimestampMixin, Base):
    """
    PartnerTier entity.

    Attributes:
        id: Primary key
        tenant_id: Owning tenant
        code: Short code, unique per tenant
        name: Display name (snapshotted onto commission records)
        level_order: Ordering of tiers within a tenant
        min_commission_rate: Lowest rate a partner override may use
        default_commission_rate: Rate applied when the partner has no override
        max_commission_rate: Highest rate a partner override may use
        max_referral_depth: Deepest hop from a sale this tier is paid for
        status: active / inactive / archived
    """

    __tablename__ = "partner_tiers"
    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_partner_tier_code_per_tenant"),
        UniqueConstraint("tenant_id", "level_order", name="uq_partner_tier_order_per_tenant"),
        # Target of composite (tenant_id, tier_id) foreign keys
        UniqueConstraint("tenant_id", "id", name="uq_partner_tier_tenant_id"),
        CheckConstraint(
            "min_commission_rate >= 0 AND min_commission_rate <= 1 AND "
            "default_commission_rate >= 0 AND default_commission_rate <= 1 AND "
            "max_commission_rate >= 0 AND max_commission_rate <= 1",
            name="check_partner_tier_rates_range",
        ),
        CheckConstraint(
            "min_commission_rate <= default_commission_rate AND "
            "default_commission_rate <= max_commission_rate",
            name="check_partner_tier_rates_order",
        ),
        CheckConstraint(
            "max_referral_depth >= 1", name="check_partner_tier_depth_positive"
        ),
        CheckConstraint(
            "level_order > 0", name="check_partner_tier_order_positive"
        ),
        CheckConstraint(
            "status IN ('active', 'inactive', 'archived')",
            name="check_partner_tier_status",
        ),
        Index("idx_partner_tiers_tenant_status", "tenant_id", "status"),
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

    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Rates (fractions)
    min_commission_rate: Mapped[Decimal] = mapped_column(
        RateType, nullable=False, default=Decimal("0")
    )
    default_commission_rate: Mapped[Decimal] = mapped_column(
        RateType, nullable=False, default=Decimal("0")
    )
    max_commission_rate: Mapped[Decimal] = mapped_column(
        RateType, nullable=False, default=Decimal("0")
    )

    max_referral_depth: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )

    def __repr__(self) -> str:
        return (
            f"<PartnerTier(code={self.code!r}, "
            f"rate={self.default_commission_rate}, "
            f"depth={self.max_referral_depth})>"
        )

"""
PartnerRelation model.

Explicit parent -> child referral edge. Redundant with ``partners.sponsor_id``
for sponsorship, but also carries mentorship / team edges and lets an edge
be severed without losing its history.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base, TimestampMixin
from commission_engine.utils.datetime_utils import utc_now


class PartnerRelation(TimestampMixin, Base):
    """PartnerRelation model - directed referral edges."""

    __tablename__ = "partner_relations"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id",
            "parent_partner_id",
            "child_partner_id",
            "relationship_type",
            name="uq_partner_relation_edge",
        ),
        ForeignKeyConstraint(
            ["tenant_id", "parent_partner_id"],
            ["partners.tenant_id", "partners.id"],
            name="fk_partner_relations_parent_same_tenant",
            ondelete="CASCADE",
        ),
        ForeignKeyConstraint(
            ["tenant_id", "child_partner_id"],
            ["partners.tenant_id", "partners.id"],
            name="fk_partner_relations_child_same_tenant",
            ondelete="CASCADE",
        ),
        CheckConstraint(
            "parent_partner_id != child_partner_id",
            name="check_partner_relation_no_self",
        ),
        CheckConstraint("depth >= 1", name="check_partner_relation_depth_positive"),
        CheckConstraint(
            "relationship_type IN ('sponsorship', 'mentorship', 'team')",
            name="check_partner_relation_type",
        ),
        CheckConstraint(
            "status IN ('active', 'inactive', 'severed')",
            name="check_partner_relation_status",
        ),
        Index("idx_partner_relations_child", "tenant_id", "child_partner_id", "status"),
        Index("idx_partner_relations_parent", "tenant_id", "parent_partner_id"),
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

    parent_partner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    child_partner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    # Always 1 for direct edges
    depth: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # Materialized ancestry, informational only
    path: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    relationship_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="sponsorship"
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )

    established_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    severed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return (
            f"<PartnerRelation(parent={self.parent_partner_id}, "
            f"child={self.child_partner_id}, "
            f"type={self.relationship_type!r}, status={self.status!r})>"
        )

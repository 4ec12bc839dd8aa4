"""
Tenant model.

Isolation boundary: every partner, tier, relation and commission record
belongs to exactly one tenant.
"""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base, TimestampMixin


class Tenant(TimestampMixin, Base):
    """Tenant model - isolation boundary for all engine data."""

    __tablename__ = "tenants"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )

    slug: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, slug={self.slug!r})>"

"""
Database models.

All SQLAlchemy models for the commission engine.
"""

from commission_engine.models.base import Base, TimestampMixin
from commission_engine.models.partner import Partner
from commission_engine.models.partner_commission import PartnerCommission
from commission_engine.models.partner_relation import PartnerRelation
from commission_engine.models.partner_tier import PartnerTier
from commission_engine.models.tenant import Tenant


__all__ = [
    "Base",
    "TimestampMixin",
    "Tenant",
    "PartnerTier",
    "Partner",
    "PartnerRelation",
    "PartnerCommission",
]

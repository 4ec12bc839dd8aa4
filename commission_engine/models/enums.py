"""
Enumerations for commission engine models.

Values are stored as plain strings; CHECK constraints on the tables use the
tuples in ``commission_engine.config.constants``.
"""

from enum import Enum


class PartnerStatus(str, Enum):
    """Partner lifecycle status. Only ACTIVE partners earn commission."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    TERMINATED = "terminated"


class TierStatus(str, Enum):
    """Tier administrative status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class RelationshipType(str, Enum):
    """Kind of referral edge."""

    SPONSORSHIP = "sponsorship"
    MENTORSHIP = "mentorship"
    TEAM = "team"


class RelationStatus(str, Enum):
    """Referral edge status. Only ACTIVE edges are followed upward."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SEVERED = "severed"


class TransactionType(str, Enum):
    """Type of the transaction that triggered commissions."""

    PAYMENT = "payment"
    SIGNUP = "signup"
    RECURRING = "recurring"
    BONUS = "bonus"


class CalculationStatus(str, Enum):
    """Commission record calculation status (owned by payout/reporting)."""

    CALCULATED = "calculated"
    APPROVED = "approved"
    PAID = "paid"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"


class PayoutStatus(str, Enum):
    """Commission record payout status (owned by payout/reporting)."""

    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"

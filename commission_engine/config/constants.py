"""
Commission engine constants.

Monetary precision, traversal ceilings and the allowed values of the
status columns. Single source of truth for models, validators and services.
"""

from decimal import ROUND_HALF_EVEN, Decimal

# Commission amounts are stored in cents; banker's rounding keeps repeated
# runs and other platforms in agreement.
MONEY_QUANTUM = Decimal("0.01")
MONEY_ROUNDING = ROUND_HALF_EVEN

RATE_MIN = Decimal("0")
RATE_MAX = Decimal("1")

# Upline traversal ceilings
DEFAULT_MAX_GLOBAL_DEPTH = 10
HARD_MAX_GLOBAL_DEPTH = 50

DEFAULT_ENGINE_VERSION = "1.0"

TRANSACTION_ID_MAX_LENGTH = 255
CURRENCY_MAX_LENGTH = 10

# Transaction amounts land in a DECIMAL(18, 8) column
TRANSACTION_AMOUNT_MAX = Decimal("9999999999.99999999")
TRANSACTION_AMOUNT_MAX_SCALE = 8

PARTNER_STATUSES = ("active", "inactive", "suspended", "terminated")
TIER_STATUSES = ("active", "inactive", "archived")
RELATIONSHIP_TYPES = ("sponsorship", "mentorship", "team")
RELATION_STATUSES = ("active", "inactive", "severed")
TRANSACTION_TYPES = ("payment", "signup", "recurring", "bonus")
CALCULATION_STATUSES = ("calculated", "approved", "paid", "cancelled", "disputed")
PAYOUT_STATUSES = ("pending", "processing", "paid", "failed", "cancelled")

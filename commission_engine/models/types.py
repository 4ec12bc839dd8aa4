"""
Standard type definitions for database models.

Provides consistent types for monetary and rate fields across all models.
"""

from sqlalchemy import DECIMAL, JSON
from sqlalchemy.dialects.postgresql import JSONB

# Transaction amounts as received from the payment side.
# Precision: 18 digits total, 8 after decimal point
MoneyType = DECIMAL(18, 8)

# Commission amounts after rounding to cents.
# Precision: 15 digits total, 2 after decimal point
CommissionMoneyType = DECIMAL(15, 2)

# Commission rates as fractions (0.0750 = 7.5%).
# Precision: 5 digits total, 4 after decimal point
# Range: 0.0000 to 1.0000 (enforced by CHECK constraints)
RateType = DECIMAL(5, 4)

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")

"""
Validators package.

Provides validation functions for transaction events and commission inputs.
"""

from commission_engine.validators.transaction import (
    validate_commission_rate,
    validate_rate_within_bounds,
    validate_transaction_amount,
    validate_transaction_event,
)


__all__ = [
    "validate_transaction_amount",
    "validate_commission_rate",
    "validate_rate_within_bounds",
    "validate_transaction_event",
]

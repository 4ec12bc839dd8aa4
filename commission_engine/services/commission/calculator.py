"""
Commission calculator.

Pure, deterministic conversion of a transaction amount and a rate into a
commission amount rounded to cents with banker's rounding.
"""

from decimal import Decimal
from typing import Any

from commission_engine.config.constants import MONEY_QUANTUM, MONEY_ROUNDING
from commission_engine.validators.transaction import (
    validate_commission_rate,
    validate_transaction_amount,
)


class CommissionCalculator:
    """
    Converts (transaction amount, rate) into a rounded commission.

    Invalid input is reported as an error value, never raised, so a bad
    ancestor can be collected alongside its siblings.
    """

    quantum = MONEY_QUANTUM
    rounding = MONEY_ROUNDING

    def calculate(
        self, transaction_amount: Any, rate: Any
    ) -> tuple[Decimal | None, str | None]:
        """
        Calculate a commission amount.

        Args:
            transaction_amount: Positive amount (Decimal, int, float or str)
            rate: Fraction in [0, 1]

        Returns:
            Tuple of (amount, error_message); exactly one is None

        Examples:
            >>> CommissionCalculator().calculate(Decimal("100000"), Decimal("0.10"))
            (Decimal('10000.00'), None)
            >>> CommissionCalculator().calculate("100.005", "0.075")
            (Decimal('7.50'), None)
        """
        is_valid, amount, error = validate_transaction_amount(transaction_amount)
        if not is_valid:
            return None, error

        is_valid, rate_value, error = validate_commission_rate(rate)
        if not is_valid:
            return None, error

        return (amount * rate_value).quantize(self.quantum, rounding=self.rounding), None

"""Transaction event and commission input validators."""

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from commission_engine.config.constants import (
    CURRENCY_MAX_LENGTH,
    RATE_MAX,
    RATE_MIN,
    TRANSACTION_AMOUNT_MAX,
    TRANSACTION_AMOUNT_MAX_SCALE,
    TRANSACTION_ID_MAX_LENGTH,
)

if TYPE_CHECKING:
    from commission_engine.services.commission.schemas import TransactionEvent


def _to_decimal(value: Any) -> Decimal | None:
    """Convert numeric input to Decimal. Floats go through str() first."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            return None
    return None


def validate_transaction_amount(
    amount: Any,
) -> tuple[bool, Decimal | None, str | None]:
    """
    Validate transaction amount.

    Args:
        amount: Amount as Decimal, int, float or numeric string

    Returns:
        Tuple of (is_valid, parsed_value, error_message)

    Examples:
        >>> validate_transaction_amount("100.50")
        (True, Decimal('100.50'), None)
        >>> validate_transaction_amount(0)
        (False, None, 'Transaction amount must be positive')
    """
    value = _to_decimal(amount)
    if value is None:
        return False, None, "Invalid transaction amount format"

    if not value.is_finite():
        return False, None, "Transaction amount must be a finite number"

    if value <= 0:
        return False, None, "Transaction amount must be positive"

    if value > TRANSACTION_AMOUNT_MAX:
        return False, None, f"Transaction amount exceeds {TRANSACTION_AMOUNT_MAX}"

    if -value.normalize().as_tuple().exponent > TRANSACTION_AMOUNT_MAX_SCALE:
        return (
            False,
            None,
            f"Transaction amount has more than "
            f"{TRANSACTION_AMOUNT_MAX_SCALE} decimal places",
        )

    return True, value, None


def validate_commission_rate(
    rate: Any,
) -> tuple[bool, Decimal | None, str | None]:
    """
    Validate commission rate (fraction in [0, 1]).

    Args:
        rate: Rate as Decimal, int, float or numeric string

    Returns:
        Tuple of (is_valid, parsed_value, error_message)
    """
    value = _to_decimal(rate)
    if value is None:
        return False, None, "Invalid commission rate format"

    if not value.is_finite():
        return False, None, "Commission rate must be a finite number"

    if value < RATE_MIN or value > RATE_MAX:
        return False, None, f"Commission rate must be between {RATE_MIN} and {RATE_MAX}"

    return True, value, None


def validate_rate_within_bounds(
    rate: Decimal, min_rate: Decimal, max_rate: Decimal
) -> tuple[bool, str | None]:
    """Check a partner rate override against its tier's [min, max] range."""
    if rate < min_rate or rate > max_rate:
        return False, f"Rate {rate} outside tier range [{min_rate}, {max_rate}]"
    return True, None


def validate_transaction_event(event: "TransactionEvent") -> list[str]:
    """
    Validate a transaction event before any database work.

    Args:
        event: Parsed transaction event

    Returns:
        List of error messages (empty if valid)
    """
    errors: list[str] = []

    transaction_id = (event.transaction_id or "").strip()
    if not transaction_id:
        errors.append("Transaction id is empty")
    elif len(transaction_id) > TRANSACTION_ID_MAX_LENGTH:
        errors.append(
            f"Transaction id longer than {TRANSACTION_ID_MAX_LENGTH} characters"
        )

    is_valid, _, error = validate_transaction_amount(event.amount)
    if not is_valid:
        errors.append(error)

    currency = (event.currency or "").strip()
    if not currency:
        errors.append("Currency is empty")
    elif len(currency) > CURRENCY_MAX_LENGTH:
        errors.append(f"Currency longer than {CURRENCY_MAX_LENGTH} characters")

    return errors

"""
Unit tests for transaction event validators.

Tests cover:
- Amount parsing and positivity
- Commission rate range
- Partner rate override bounds
- Whole-event validation
"""

import uuid
from decimal import Decimal

from commission_engine.services.commission.schemas import TransactionEvent
from commission_engine.validators import (
    validate_commission_rate,
    validate_rate_within_bounds,
    validate_transaction_amount,
    validate_transaction_event,
)


def _event(**overrides) -> TransactionEvent:
    data = {
        "tenant_id": uuid.uuid4(),
        "transaction_id": "txn-1",
        "source_partner_id": uuid.uuid4(),
        "amount": Decimal("100"),
        "currency": "USD",
    }
    data.update(overrides)
    return TransactionEvent(**data)


class TestValidateTransactionAmount:
    """Test transaction amount validation."""

    def test_valid_decimal(self):
        """Positive Decimal is accepted unchanged."""
        assert validate_transaction_amount(Decimal("100.50")) == (
            True,
            Decimal("100.50"),
            None,
        )

    def test_valid_string_with_spaces(self):
        """Whitespace around numeric strings is ignored."""
        is_valid, value, error = validate_transaction_amount(" 42.10 ")
        assert is_valid
        assert value == Decimal("42.10")
        assert error is None

    def test_zero_rejected(self):
        """Zero is not a valid sale amount."""
        is_valid, value, error = validate_transaction_amount(0)
        assert not is_valid
        assert value is None
        assert error == "Transaction amount must be positive"

    def test_bool_rejected(self):
        """Booleans are not amounts."""
        is_valid, _, _ = validate_transaction_amount(True)
        assert not is_valid

    def test_nan_rejected(self):
        """NaN is rejected."""
        is_valid, _, error = validate_transaction_amount("NaN")
        assert not is_valid
        assert "finite" in error

    def test_largest_storable_amount_accepted(self):
        """Amounts up to the ledger column limit pass."""
        is_valid, value, _ = validate_transaction_amount("9999999999.99999999")
        assert is_valid
        assert value == Decimal("9999999999.99999999")

    def test_amount_above_limit_rejected(self):
        """Ten billion does not fit DECIMAL(18, 8)."""
        is_valid, value, error = validate_transaction_amount(10_000_000_000)
        assert not is_valid
        assert value is None
        assert error == "Transaction amount exceeds 9999999999.99999999"

    def test_too_many_decimal_places_rejected(self):
        """More than eight fractional digits would be truncated on insert."""
        is_valid, _, error = validate_transaction_amount("1.123456789")
        assert not is_valid
        assert error == "Transaction amount has more than 8 decimal places"

    def test_trailing_zeros_do_not_count_as_scale(self):
        """Trailing zeros beyond eight places are harmless."""
        is_valid, value, _ = validate_transaction_amount("100.0000000000")
        assert is_valid
        assert value == Decimal("100")


class TestValidateCommissionRate:
    """Test commission rate validation."""

    def test_bounds_inclusive(self):
        """0 and 1 are both valid rates."""
        assert validate_commission_rate(Decimal("0"))[0]
        assert validate_commission_rate(Decimal("1"))[0]

    def test_above_one_rejected(self):
        """Rates above 1 are rejected."""
        is_valid, value, error = validate_commission_rate("1.5")
        assert not is_valid
        assert value is None
        assert "between" in error


class TestValidateRateWithinBounds:
    """Test partner override bounds check."""

    def test_inside_range(self):
        """Override inside the tier range is accepted."""
        assert validate_rate_within_bounds(
            Decimal("0.12"), Decimal("0.05"), Decimal("0.15")
        ) == (True, None)

    def test_outside_range(self):
        """Override above the tier maximum is rejected."""
        is_valid, error = validate_rate_within_bounds(
            Decimal("0.20"), Decimal("0.05"), Decimal("0.15")
        )
        assert not is_valid
        assert "outside tier range" in error


class TestValidateTransactionEvent:
    """Test whole-event validation."""

    def test_valid_event(self):
        """A well-formed event has no errors."""
        assert validate_transaction_event(_event()) == []

    def test_empty_transaction_id(self):
        """Blank transaction ids are rejected."""
        errors = validate_transaction_event(_event(transaction_id="   "))
        assert errors == ["Transaction id is empty"]

    def test_long_transaction_id(self):
        """Transaction ids longer than the column are rejected."""
        errors = validate_transaction_event(_event(transaction_id="x" * 256))
        assert len(errors) == 1
        assert "longer than 255" in errors[0]

    def test_all_errors_reported(self):
        """Every problem is listed, not just the first."""
        errors = validate_transaction_event(
            _event(transaction_id="", amount=Decimal("-5"), currency="")
        )
        assert errors == [
            "Transaction id is empty",
            "Transaction amount must be positive",
            "Currency is empty",
        ]

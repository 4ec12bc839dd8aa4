"""
Unit tests for commission calculation.

Tests cover:
- Banker's rounding to cents
- Determinism across repeated calls
- Input conversion (str, int, float)
- Rejection of invalid amounts and rates
"""

from decimal import Decimal

import pytest

from commission_engine.services.commission.calculator import CommissionCalculator


@pytest.fixture
def calculator():
    """Create CommissionCalculator instance."""
    return CommissionCalculator()


class TestCommissionRounding:
    """Test rounding of calculated commissions."""

    def test_reference_rounding_case(self, calculator):
        """100.005 at 7.5% is 7.500375, rounded to 7.50."""
        amount, error = calculator.calculate(Decimal("100.005"), Decimal("0.075"))
        assert error is None
        assert amount == Decimal("7.50")

    def test_repeated_calls_are_identical(self, calculator):
        """Same inputs always give the same output."""
        results = {
            calculator.calculate(Decimal("100.005"), Decimal("0.075"))[0]
            for _ in range(100)
        }
        assert results == {Decimal("7.50")}

    def test_half_rounds_to_even_down(self, calculator):
        """0.025 rounds down to the even cent 0.02."""
        amount, _ = calculator.calculate(Decimal("0.5"), Decimal("0.05"))
        assert amount == Decimal("0.02")

    def test_half_rounds_to_even_up(self, calculator):
        """0.035 rounds up to the even cent 0.04."""
        amount, _ = calculator.calculate(Decimal("0.7"), Decimal("0.05"))
        assert amount == Decimal("0.04")

    def test_result_has_two_decimal_places(self, calculator):
        """Whole results still carry cents."""
        amount, _ = calculator.calculate(Decimal("100000"), Decimal("0.10"))
        assert amount == Decimal("10000.00")
        assert amount.as_tuple().exponent == -2

    def test_zero_rate_gives_zero_amount(self, calculator):
        """A 0% rate is valid and yields 0.00."""
        amount, error = calculator.calculate(Decimal("250"), Decimal("0"))
        assert error is None
        assert amount == Decimal("0.00")

    def test_full_rate(self, calculator):
        """A 100% rate returns the amount rounded to cents."""
        amount, _ = calculator.calculate(Decimal("19.999"), Decimal("1"))
        assert amount == Decimal("20.00")


class TestCommissionInputConversion:
    """Test accepted input types."""

    def test_string_inputs(self, calculator):
        """Numeric strings are accepted."""
        amount, error = calculator.calculate("100.005", "0.075")
        assert error is None
        assert amount == Decimal("7.50")

    def test_float_inputs_use_decimal_text(self, calculator):
        """Floats are converted through their text form, not binary value."""
        amount, error = calculator.calculate(100.005, 0.075)
        assert error is None
        assert amount == Decimal("7.50")

    def test_integer_inputs(self, calculator):
        """Integers are accepted."""
        amount, _ = calculator.calculate(200, 1)
        assert amount == Decimal("200.00")


class TestCommissionValidation:
    """Test rejection of invalid input."""

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1"), "-0.01", 0])
    def test_non_positive_amount_rejected(self, calculator, amount):
        """Zero and negative amounts return an error, not an exception."""
        result, error = calculator.calculate(amount, Decimal("0.1"))
        assert result is None
        assert "positive" in error

    @pytest.mark.parametrize("rate", [Decimal("1.0001"), Decimal("-0.01"), "2"])
    def test_rate_outside_unit_interval_rejected(self, calculator, rate):
        """Rates outside [0, 1] return an error."""
        result, error = calculator.calculate(Decimal("100"), rate)
        assert result is None
        assert "between" in error

    def test_non_numeric_amount_rejected(self, calculator):
        """Garbage input returns a format error."""
        result, error = calculator.calculate("abc", Decimal("0.1"))
        assert result is None
        assert "format" in error

    def test_non_finite_amount_rejected(self, calculator):
        """NaN and infinity are rejected."""
        result, error = calculator.calculate(Decimal("Infinity"), Decimal("0.1"))
        assert result is None
        assert "finite" in error

    def test_none_rate_rejected(self, calculator):
        """Missing rate returns an error."""
        result, error = calculator.calculate(Decimal("100"), None)
        assert result is None
        assert error is not None

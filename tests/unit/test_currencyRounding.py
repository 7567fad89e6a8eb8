"""
Unit tests for currency rounding (half away from zero).
"""

from decimal import Decimal

import pytest

from src.services.currencyRounding import round_currency, to_decimal


class TestRoundCurrency:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Decimal("2.5"), 3),
            (Decimal("3.5"), 4),
            (Decimal("2.4999"), 2),
            (Decimal("-2.5"), -3),
            (Decimal("-2.4"), -2),
            (0, 0),
            (210, 210),
        ],
    )
    def test_rounds_half_away_from_zero(self, value, expected):
        assert round_currency(value) == expected

    def test_float_input_has_no_binary_noise(self):
        assert round_currency(100.5) == 101
        assert round_currency(2.675) == 3

    def test_returns_int(self):
        assert isinstance(round_currency(Decimal("199.6")), int)


class TestToDecimal:

    def test_decimal_passthrough(self):
        value = Decimal("1.25")
        assert to_decimal(value) is value

    def test_int(self):
        assert to_decimal(7) == Decimal(7)

    def test_float_uses_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

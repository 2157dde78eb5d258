"""
Test suite for currency module

Tests Money precision and comparisons, primitive amount parsing and the
amount format used in transaction history lines.
"""

import pytest
from decimal import Decimal

from atm_simulator.currency import Money, Currency, to_decimal, format_amount


class TestMoney:
    """Test Money class operations"""

    def test_money_creation_rounds_to_precision(self):
        money = Money(Decimal('100.555'), Currency.INR)
        assert money.amount == Decimal('100.56')

        money_jpy = Money(Decimal('100.7'), Currency.JPY)
        assert money_jpy.amount == Decimal('101')

    def test_money_converts_non_decimal_amounts(self):
        assert Money(10).amount == Decimal('10.00')
        assert Money(0.1).amount == Decimal('0.10')
        assert Money(10).currency == Currency.INR

    def test_money_arithmetic(self):
        a = Money(Decimal('100.50'))
        b = Money(Decimal('50.25'))
        assert (a + b).amount == Decimal('150.75')
        assert (a - b).amount == Decimal('50.25')

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValueError):
            Money(Decimal('1'), Currency.INR) + Money(Decimal('1'), Currency.USD)
        with pytest.raises(ValueError):
            Money(Decimal('1'), Currency.INR) < Money(Decimal('1'), Currency.USD)

    def test_comparisons_and_predicates(self):
        assert Money(5) < Money(10)
        assert Money(10) >= Money(10)
        assert Money(0).is_zero()
        assert Money(-1).is_negative()
        assert Money(1).is_positive()
        assert Money(10) == Money(Decimal('10.00'))
        assert Money(10) != Decimal('10')

    def test_to_string(self):
        assert Money(Decimal('10000')).to_string() == "₹10,000.00"
        assert Money(Decimal('5'), Currency.USD).to_string() == "$5.00"
        assert Money(Decimal('1500'), Currency.JPY).to_string() == "¥1,500"


class TestCurrency:

    def test_from_code(self):
        assert Currency.from_code("inr") == Currency.INR
        assert Currency.from_code(" USD ") == Currency.USD

    def test_from_code_unknown(self):
        with pytest.raises(ValueError, match="Unsupported currency"):
            Currency.from_code("XYZ")

    def test_from_code_requires_text(self):
        with pytest.raises(ValueError):
            Currency.from_code(7)


class TestAmountHelpers:

    @pytest.mark.parametrize("value,expected", [
        ("50", Decimal('50')),
        (" 12.5 ", Decimal('12.5')),
        (7, Decimal('7')),
        (0.1, Decimal('0.1')),
        (Decimal('3.33'), Decimal('3.33')),
    ])
    def test_to_decimal_accepts_numbers(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", None, True, [1]])
    def test_to_decimal_rejects_non_numbers(self, value):
        assert to_decimal(value) is None

    def test_to_decimal_rejects_amounts_beyond_context_precision(self):
        assert to_decimal("1e30") is None
        assert to_decimal(Decimal('9' * 27)) is None
        assert to_decimal(Decimal('9' * 27), precision=0) == Decimal('9' * 27)

    def test_format_amount(self):
        assert format_amount(Decimal('50')) == "50"
        assert format_amount(Decimal('50.00')) == "50"
        assert format_amount(Decimal('12.5')) == "12.50"
        assert format_amount(Decimal('0.05')) == "0.05"

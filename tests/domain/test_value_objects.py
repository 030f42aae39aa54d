"""Unit tests for domain value objects."""

import pytest

from onedrop.domain.exceptions import ValidationError
from onedrop.domain.model.value_objects import Money


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(4200)
        assert m.amount == 4200
        assert m.currency == "usd"

    def test_currency_is_lowercased(self):
        assert Money(100, "USD").currency == "usd"

    def test_of_factory_from_string(self):
        assert Money.of("2599") == Money(2599)

    def test_of_factory_rejects_decimal_string(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("25.99")

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="minor units"):
            Money(42.0)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(-1)

    def test_addition(self):
        assert Money(1000) + Money(550) == Money(1550)

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(1000, "usd") + Money(500, "eur")

    def test_str_formatting(self):
        assert str(Money(1500)) == "$15.00"
        assert str(Money(950)) == "$9.50"
        assert str(Money(5)) == "$0.05"

    def test_comparison_operators(self):
        assert Money(500) < Money(1000)
        assert Money(1000) > Money(500)
        assert Money(1000) >= Money(1000)
        assert Money(1000) <= Money(1000)

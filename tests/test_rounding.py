"""Tests for tiered money rounding."""

from decimal import Decimal

from event_payroll.calculators.rounding import TieredRounding


class TestTieredRounding:
    """Test the cents / hundreds rounding tiers."""

    def test_round_to_cents(self):
        """Half-up rounding to 2 decimal places."""
        assert TieredRounding.round_to_cents(Decimal("10.125")) == Decimal("10.13")
        assert TieredRounding.round_to_cents(Decimal("10.124")) == Decimal("10.12")
        assert TieredRounding.round_to_cents(Decimal("-10.125")) == Decimal("-10.13")

    def test_small_amounts_round_to_cents(self):
        assert TieredRounding.round_money(Decimal("207.36")) == Decimal("207.36")
        assert TieredRounding.round_money(Decimal("333.3333")) == Decimal("333.33")
        assert TieredRounding.round_money(Decimal("999.994")) == Decimal("999.99")

    def test_large_amounts_round_to_hundred(self):
        """Amounts of 1000 and above round to the nearest hundred."""
        assert TieredRounding.round_money(Decimal("1000")) == Decimal("1000.00")
        assert TieredRounding.round_money(Decimal("1049.99")) == Decimal("1000.00")
        assert TieredRounding.round_money(Decimal("1050")) == Decimal("1100.00")
        assert TieredRounding.round_money(Decimal("5432.10")) == Decimal("5400.00")

    def test_negative_amounts_use_absolute_value_for_tier(self):
        assert TieredRounding.round_money(Decimal("-25.555")) == Decimal("-25.56")
        assert TieredRounding.round_money(Decimal("-1250")) == Decimal("-1300.00")

    def test_zero(self):
        assert TieredRounding.round_money(Decimal("0")) == Decimal("0.00")

    def test_round_hours(self):
        assert TieredRounding.round_hours(Decimal("8.5")) == Decimal("8.50")
        assert TieredRounding.round_hours(Decimal("7.99999")) == Decimal("8.00")

"""Tiered money rounding."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


class TieredRounding:
    """Rounds payroll output amounts.

    Rounding tiers (applied to the absolute value, sign preserved):
    - under 1000: nearest cent
    - 1000 and above: nearest hundred dollars

    The coarse tier is intentional; totals at that magnitude are
    reported to the hundred.

    Internal compute keeps full Decimal precision; only outputs are rounded.
    """

    CENT = Decimal("0.01")
    HUNDRED = Decimal("100")
    COARSE_THRESHOLD = Decimal("1000")
    HOURS_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(TieredRounding.CENT, rounding=ROUND_HALF_UP)

    @staticmethod
    def round_to_hundred(amount: Decimal) -> Decimal:
        """Round amount to the nearest hundred, keeping a cents exponent."""
        hundreds = (amount / TieredRounding.HUNDRED).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        return TieredRounding.round_to_cents(hundreds * TieredRounding.HUNDRED)

    @staticmethod
    def round_money(amount: Decimal) -> Decimal:
        """Apply the tiered rule to a monetary amount."""
        if abs(amount) < TieredRounding.COARSE_THRESHOLD:
            return TieredRounding.round_to_cents(amount)
        return TieredRounding.round_to_hundred(amount)

    @staticmethod
    def round_hours(hours: Decimal) -> Decimal:
        return hours.quantize(TieredRounding.HOURS_PRECISION, rounding=ROUND_HALF_UP)

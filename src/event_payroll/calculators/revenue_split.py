"""Event revenue split: net sales and artist/venue/operator shares."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from event_payroll.calculators.rounding import TieredRounding
from event_payroll.calculators.types import (
    ZERO,
    EventFinancials,
    EventRevenueSplit,
    PayrollWarning,
    WarningCode,
)

HUNDRED = Decimal("100")
SPLIT_TOLERANCE = Decimal("0.01")


class RevenueSplitCalculator:
    """Derives net sales from gross collected and splits it.

    Pipeline:
    1) total_sales = max(gross_collected - tips, 0)
    2) tax = override if given, else total_sales * tax_rate%, floored at 0
    3) net_sales = max(total_sales - tax, 0)
    4) each share = net_sales * percent / 100

    Net sales is also the basis of the commission pool
    (net_sales * commission_pool_fraction). Split percentages are used as
    given; a total other than 100 is a warning, see ``validate``.
    """

    @staticmethod
    def calculate(financials: EventFinancials) -> EventRevenueSplit:
        gross = financials.ticket_sales_gross
        tips = financials.tips

        total_sales = max(gross - tips, ZERO)
        if financials.tax_amount_override is not None:
            tax = financials.tax_amount_override
        else:
            tax = total_sales * (financials.tax_rate_percent / HUNDRED)
        tax = max(tax, ZERO)
        net_sales = max(total_sales - tax, ZERO)

        return EventRevenueSplit(
            gross_collected=gross,
            tips_removed=tips,
            total_sales=total_sales,
            tax_amount=tax,
            net_sales=net_sales,
            artist_share=net_sales * (financials.artist_share_percent / HUNDRED),
            venue_share=net_sales * (financials.venue_share_percent / HUNDRED),
            operator_share=net_sales * (financials.operator_share_percent / HUNDRED),
            commission_pool=net_sales * financials.commission_pool_fraction,
            split_percent_total=financials.split_percent_total,
        )

    @staticmethod
    def validate(financials: EventFinancials) -> list[PayrollWarning]:
        """Return warnings for inconsistent split configuration."""
        warnings: list[PayrollWarning] = []
        total = financials.split_percent_total
        if abs(total - HUNDRED) > SPLIT_TOLERANCE:
            warnings.append(
                PayrollWarning(
                    code=WarningCode.SPLIT_PERCENT_MISMATCH,
                    message=f"Split percentages add up to {total}% (not 100%)",
                )
            )
        return warnings

    @staticmethod
    def round_split(split: EventRevenueSplit) -> EventRevenueSplit:
        """Apply tiered rounding to every monetary field of a split."""
        r = TieredRounding.round_money
        return replace(
            split,
            gross_collected=r(split.gross_collected),
            tips_removed=r(split.tips_removed),
            total_sales=r(split.total_sales),
            tax_amount=r(split.tax_amount),
            net_sales=r(split.net_sales),
            artist_share=r(split.artist_share),
            venue_share=r(split.venue_share),
            operator_share=r(split.operator_share),
            commission_pool=r(split.commission_pool),
        )

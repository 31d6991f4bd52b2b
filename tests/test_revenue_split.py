"""Tests for the event revenue split."""

from decimal import Decimal

from event_payroll.calculators.revenue_split import RevenueSplitCalculator
from event_payroll.calculators.types import EventFinancials, WarningCode


def make_financials(**overrides) -> EventFinancials:
    values = {
        "ticket_sales_gross": Decimal("1100"),
        "tips": Decimal("100"),
        "tax_rate_percent": Decimal("10"),
        "artist_share_percent": Decimal("50"),
        "venue_share_percent": Decimal("30"),
        "operator_share_percent": Decimal("20"),
    }
    values.update(overrides)
    return EventFinancials(**values)


class TestNetSales:
    """Test the gross -> net pipeline."""

    def test_tips_and_tax_removed(self):
        split = RevenueSplitCalculator.calculate(make_financials())
        assert split.total_sales == Decimal("1000")
        assert split.tax_amount == Decimal("100")
        assert split.net_sales == Decimal("900")

    def test_tax_override_wins_over_rate(self):
        split = RevenueSplitCalculator.calculate(
            make_financials(tax_amount_override=Decimal("50"))
        )
        assert split.tax_amount == Decimal("50")
        assert split.net_sales == Decimal("950")

    def test_tips_larger_than_gross_floor_at_zero(self):
        split = RevenueSplitCalculator.calculate(
            make_financials(ticket_sales_gross=Decimal("50"), tips=Decimal("80"))
        )
        assert split.total_sales == Decimal("0")
        assert split.net_sales == Decimal("0")
        assert split.artist_share == Decimal("0")

    def test_negative_tax_override_is_floored(self):
        split = RevenueSplitCalculator.calculate(
            make_financials(tax_amount_override=Decimal("-20"))
        )
        assert split.tax_amount == Decimal("0")
        assert split.net_sales == Decimal("1000")

    def test_commission_pool_is_fraction_of_net(self):
        split = RevenueSplitCalculator.calculate(
            make_financials(
                ticket_sales_gross=Decimal("10500"),
                tips=Decimal("500"),
                tax_rate_percent=Decimal("0"),
                commission_pool_fraction=Decimal("0.04"),
            )
        )
        assert split.net_sales == Decimal("10000")
        assert split.commission_pool == Decimal("400")


class TestShares:
    """Test the artist/venue/operator split."""

    def test_shares(self):
        split = RevenueSplitCalculator.calculate(make_financials())
        assert split.artist_share == Decimal("450")
        assert split.venue_share == Decimal("270")
        assert split.operator_share == Decimal("180")

    def test_percentages_not_summing_to_100_are_used_as_given(self):
        """A 90% total is computed without error and reported as a warning."""
        financials = make_financials(artist_share_percent=Decimal("40"))
        split = RevenueSplitCalculator.calculate(financials)

        assert split.split_percent_total == Decimal("90")
        assert split.artist_share == Decimal("360")
        assert split.artist_share + split.venue_share + split.operator_share <= split.net_sales

        warnings = RevenueSplitCalculator.validate(financials)
        assert [w.code for w in warnings] == [WarningCode.SPLIT_PERCENT_MISMATCH]

    def test_full_split_has_no_warning(self):
        assert RevenueSplitCalculator.validate(make_financials()) == []

    def test_rounding_drift_within_one_cent(self):
        financials = make_financials(
            ticket_sales_gross=Decimal("999.99"),
            tips=Decimal("0"),
            tax_rate_percent=Decimal("0"),
            artist_share_percent=Decimal("33.33"),
            venue_share_percent=Decimal("33.33"),
            operator_share_percent=Decimal("33.34"),
        )
        split = RevenueSplitCalculator.round_split(RevenueSplitCalculator.calculate(financials))

        assert split.net_sales == Decimal("999.99")
        assert split.artist_share == Decimal("333.30")
        assert split.operator_share == Decimal("333.40")
        total = split.artist_share + split.venue_share + split.operator_share
        assert abs(total - split.net_sales) <= Decimal("0.01")

    def test_round_split_uses_tiered_rounding(self):
        split = RevenueSplitCalculator.round_split(
            RevenueSplitCalculator.calculate(
                make_financials(ticket_sales_gross=Decimal("12345.67"), tips=Decimal("0"))
            )
        )
        # total 12345.67, tax 1234.567 -> net 11111.103
        assert split.total_sales == Decimal("12300.00")
        assert split.tax_amount == Decimal("1200.00")
        assert split.net_sales == Decimal("11100.00")

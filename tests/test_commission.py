"""Tests for per-vendor commission pay."""

from decimal import Decimal

import pytest

from event_payroll.calculators.commission import CommissionPayCalculator
from event_payroll.calculators.types import (
    Division,
    EventPayContext,
    PaymentAdjustment,
    PayrollPolicy,
    StateRule,
    VendorPayInputs,
)


def make_context(
    rule: StateRule,
    pool: str = "0",
    count: int = 1,
    tips: str = "0",
    eligible_hours: str = "0",
) -> EventPayContext:
    return EventPayContext(
        state_rule=rule,
        total_commission_pool=Decimal(pool),
        eligible_vendor_count=count,
        total_tips=Decimal(tips),
        total_eligible_hours=Decimal(eligible_hours),
    )


def make_inputs(hours: str, division: Division = Division.VENDOR, **kwargs) -> VendorPayInputs:
    return VendorPayInputs(
        vendor_id="v1", actual_hours=Decimal(hours), division=division, **kwargs
    )


class TestExtendedAmount:
    """Test base pay at the regular rate."""

    def test_default_state_uses_multiplier(self, ca_rule):
        """8h in CA at 17.28 with the 1.5 multiplier."""
        record = CommissionPayCalculator().calculate(make_inputs("8"), make_context(ca_rule))
        assert record.regular_pay == Decimal("207.36")

    def test_flat_state_has_no_multiplier(self, az_rule):
        record = CommissionPayCalculator().calculate(make_inputs("8"), make_context(az_rule))
        assert record.regular_pay == Decimal("138.24")


class TestCommissionShare:
    """Test commission pool sharing."""

    def test_per_vendor_share(self, ca_rule):
        context = make_context(ca_rule, pool="400", count=5)
        assert context.per_vendor_commission_share == Decimal("80")

    def test_share_with_no_eligible_vendors_is_zero(self, ca_rule):
        context = make_context(ca_rule, pool="400", count=0)
        assert context.per_vendor_commission_share == Decimal("0")

    def test_commission_above_extended_is_paid(self, ca_rule):
        record = CommissionPayCalculator().calculate(
            make_inputs("8"), make_context(ca_rule, pool="1000", count=2)
        )
        assert record.commission_amount == Decimal("292.64")
        assert record.total_final_commission == Decimal("500.00")

    def test_anti_sliver(self, ca_rule):
        """A commission smaller than the extended amount is dropped."""
        record = CommissionPayCalculator().calculate(
            make_inputs("8"), make_context(ca_rule, pool="300", count=1)
        )
        assert record.commission_amount == Decimal("0.00")
        assert record.total_final_commission == Decimal("300.00")

    def test_flat_state_commission_is_the_share(self, az_rule):
        record = CommissionPayCalculator().calculate(
            make_inputs("8"), make_context(az_rule, pool="400", count=5)
        )
        assert record.commission_amount == Decimal("80.00")
        assert record.total_final_commission == Decimal("138.24")

    def test_trailers_get_extended_only(self, ca_rule):
        record = CommissionPayCalculator().calculate(
            make_inputs("6", Division.TRAILERS),
            make_context(ca_rule, pool="1000", count=2, tips="500", eligible_hours="12"),
        )
        assert record.commission_amount == Decimal("0.00")
        assert record.total_final_commission == Decimal("155.52")
        assert record.tips == Decimal("0.00")
        assert record.division == Division.TRAILERS


class TestMinimumGuarantee:
    """Test the final commission floor."""

    @pytest.mark.parametrize("hours", ["0.5", "4", "8", "12.75"])
    @pytest.mark.parametrize("pool", ["0", "150", "2000"])
    def test_final_never_below_extended(self, ca_rule, hours, pool):
        record = CommissionPayCalculator().calculate(
            make_inputs(hours), make_context(ca_rule, pool=pool, count=3)
        )
        assert record.total_final_commission >= record.regular_pay

    def test_legacy_minimum_guarantee(self, ca_rule):
        calculator = CommissionPayCalculator(PayrollPolicy(legacy_minimum_guarantee=True))
        record = calculator.calculate(make_inputs("4"), make_context(ca_rule))
        assert record.regular_pay == Decimal("103.68")
        assert record.total_final_commission == Decimal("150.00")

    def test_legacy_formula_adds_commission(self, ca_rule):
        calculator = CommissionPayCalculator(PayrollPolicy(legacy_minimum_guarantee=True))
        record = calculator.calculate(
            make_inputs("8"), make_context(ca_rule, pool="1000", count=2)
        )
        assert record.total_final_commission == Decimal("500.00")

    def test_legacy_minimum_not_paid_for_zero_hours(self, ca_rule):
        calculator = CommissionPayCalculator(PayrollPolicy(legacy_minimum_guarantee=True))
        record = calculator.calculate(make_inputs("0"), make_context(ca_rule))
        assert record.total_final_commission == Decimal("0.00")


class TestTipsAndRestBreak:
    """Test tip proration and the rest-break stipend."""

    def test_tips_prorated_by_hours(self, ca_rule):
        record = CommissionPayCalculator().calculate(
            make_inputs("8"), make_context(ca_rule, tips="500", eligible_hours="12")
        )
        assert record.tips == Decimal("333.33")

    def test_no_eligible_hours_no_tips(self, ca_rule):
        record = CommissionPayCalculator().calculate(
            make_inputs("8"), make_context(ca_rule, tips="500", eligible_hours="0")
        )
        assert record.tips == Decimal("0.00")

    @pytest.mark.parametrize(
        "hours,expected",
        [("0", "0.00"), ("4", "9.00"), ("10", "9.00"), ("10.01", "12.00"), ("14", "12.00")],
    )
    def test_rest_break_tiers(self, ca_rule, hours, expected):
        record = CommissionPayCalculator().calculate(make_inputs(hours), make_context(ca_rule))
        assert record.rest_break == Decimal(expected)

    def test_rest_break_exempt_state(self, az_rule):
        record = CommissionPayCalculator().calculate(make_inputs("12"), make_context(az_rule))
        assert record.rest_break == Decimal("0.00")


class TestGrossPay:
    """Test the gross pay roll-up."""

    def test_adjustment_and_reimbursement_are_added(self, ca_rule):
        adjustment = PaymentAdjustment(
            vendor_id="v1",
            adjustment_amount=Decimal("25"),
            reimbursement_amount=Decimal("10.50"),
            note="parking",
        )
        record = CommissionPayCalculator().calculate(
            make_inputs("8", adjustment=adjustment), make_context(ca_rule)
        )
        assert record.adjustment == Decimal("25.00")
        assert record.reimbursement == Decimal("10.50")
        assert record.adjustment_amount == Decimal("35.50")
        assert record.adjustment_note == "parking"
        # 207.36 + 9 rest break + 35.50
        assert record.total_gross_pay == Decimal("251.86")

    def test_zero_hours_zeroes_every_pay_field(self, ca_rule):
        """A vendor with no worked time still gets a record, all zero."""
        record = CommissionPayCalculator().calculate(
            make_inputs("0"),
            make_context(ca_rule, pool="400", count=5, tips="500", eligible_hours="12"),
        )
        assert record.actual_hours == Decimal("0.00")
        assert record.regular_pay == Decimal("0.00")
        assert record.commission_amount == Decimal("0.00")
        assert record.total_final_commission == Decimal("0.00")
        assert record.tips == Decimal("0.00")
        assert record.rest_break == Decimal("0.00")
        assert record.total_gross_pay == Decimal("0.00")

    def test_zero_hours_keeps_adjustment(self, ca_rule):
        adjustment = PaymentAdjustment(vendor_id="v1", adjustment_amount=Decimal("20"))
        record = CommissionPayCalculator().calculate(
            make_inputs("0", adjustment=adjustment), make_context(ca_rule)
        )
        assert record.total_gross_pay == Decimal("20.00")

    def test_large_totals_round_to_hundred(self, ca_rule):
        record = CommissionPayCalculator().calculate(
            make_inputs("8"), make_context(ca_rule, pool="1234", count=1)
        )
        assert record.total_final_commission == Decimal("1200.00")

    def test_display_hours_are_reported(self, ca_rule):
        record = CommissionPayCalculator().calculate(
            make_inputs("8", display_hours=Decimal("8.5")), make_context(ca_rule)
        )
        assert record.actual_hours == Decimal("8.00")
        assert record.display_hours == Decimal("8.50")

"""Per-vendor commission pay calculation."""

from __future__ import annotations

from decimal import Decimal

from event_payroll.calculators.eligibility import EligibilityClassifier
from event_payroll.calculators.rounding import TieredRounding
from event_payroll.calculators.types import (
    ZERO,
    Division,
    Eligibility,
    EventPayContext,
    PayrollPolicy,
    StateRule,
    VendorPayInputs,
    VendorPaymentRecord,
)


class CommissionPayCalculator:
    """Computes one vendor's gross pay for an event.

    Calculation pipeline (stable order):
    1) Extended amount at regular rate (hours x base rate, x1.5 outside
       flat-commission states)
    2) Per-vendor share of the commission pool
    3) Commission amount (flat states: the share; other states: share
       minus extended amount, with the anti-sliver rule)
    4) Total final commission (minimum-guarantee rule)
    5) Tips prorated by hours over the eligible hours pool
    6) Rest-break stipend
    7) Total gross pay = final commission + tips + rest break
       + adjustment + reimbursement

    Every monetary output goes through TieredRounding.round_money;
    intermediate values keep full precision.
    """

    REGULAR_RATE_MULTIPLIER = Decimal("1.5")
    LONG_SHIFT_HOURS = Decimal("10")
    LONG_SHIFT_REST_BREAK = Decimal("12")
    SHORT_SHIFT_REST_BREAK = Decimal("9")

    def __init__(self, policy: PayrollPolicy | None = None):
        self.policy = policy or PayrollPolicy()

    def calculate(
        self, inputs: VendorPayInputs, context: EventPayContext
    ) -> VendorPaymentRecord:
        hours = max(inputs.actual_hours, ZERO)
        display_hours = inputs.display_hours if inputs.display_hours is not None else hours
        eligibility = EligibilityClassifier.classify(inputs.division)
        rule = context.state_rule

        extended = self.extended_amount(hours, rule)
        share = context.per_vendor_commission_share
        commission = self.commission_amount(
            hours, extended, share, eligibility, context.eligible_vendor_count, rule
        )
        final_commission = self.total_final_commission(
            hours, extended, share, commission, eligibility
        )
        tips = self.prorated_tips(
            hours, context.total_tips, context.total_eligible_hours, eligibility
        )
        rest_break = self.rest_break(hours, rule)

        adjustment = inputs.adjustment
        adjustment_part = adjustment.adjustment_amount if adjustment else ZERO
        reimbursement_part = adjustment.reimbursement_amount if adjustment else ZERO

        total_gross = (
            final_commission + tips + rest_break + adjustment_part + reimbursement_part
        )

        money = TieredRounding.round_money
        return VendorPaymentRecord(
            vendor_id=inputs.vendor_id,
            division=Division.parse(inputs.division),
            actual_hours=TieredRounding.round_hours(hours),
            display_hours=TieredRounding.round_hours(display_hours),
            regular_pay=money(extended),
            commission_amount=money(commission),
            total_final_commission=money(final_commission),
            tips=money(tips),
            rest_break=money(rest_break),
            adjustment=money(adjustment_part),
            reimbursement=money(reimbursement_part),
            adjustment_amount=money(adjustment_part + reimbursement_part),
            total_gross_pay=money(total_gross),
            adjustment_note=adjustment.note if adjustment else None,
        )

    def extended_amount(self, hours: Decimal, rule: StateRule) -> Decimal:
        if rule.uses_flat_commission_formula:
            return hours * rule.base_rate
        return hours * rule.base_rate * self.REGULAR_RATE_MULTIPLIER

    def commission_amount(
        self,
        hours: Decimal,
        extended: Decimal,
        share: Decimal,
        eligibility: Eligibility,
        eligible_vendor_count: int,
        rule: StateRule,
    ) -> Decimal:
        """Commission uplift for one vendor.

        Zero-hour vendors earn no commission in any state.
        """
        if eligibility.is_trailers or eligible_vendor_count <= 0 or hours <= 0:
            return ZERO

        if rule.uses_flat_commission_formula:
            return share

        commission = max(ZERO, share - extended)
        # Anti-sliver: a commission smaller than the base differential is dropped
        if ZERO < commission < extended:
            return ZERO
        return commission

    def total_final_commission(
        self,
        hours: Decimal,
        extended: Decimal,
        share: Decimal,
        commission: Decimal,
        eligibility: Eligibility,
    ) -> Decimal:
        """Minimum-guarantee rule.

        Canonical: the greater of the extended amount and the per-vendor
        share (trailers get the extended amount). With
        ``legacy_minimum_guarantee`` the historical synthesis formula
        max(minimum, extended + commission) is used instead.
        """
        if hours <= 0:
            return ZERO
        if self.policy.legacy_minimum_guarantee:
            return max(self.policy.legacy_minimum_amount, extended + commission)
        if eligibility.is_trailers:
            return extended
        return max(extended, share)

    @staticmethod
    def prorated_tips(
        hours: Decimal,
        total_tips: Decimal,
        total_eligible_hours: Decimal,
        eligibility: Eligibility,
    ) -> Decimal:
        if eligibility.is_trailers or total_eligible_hours <= 0:
            return ZERO
        return total_tips * hours / total_eligible_hours

    def rest_break(self, hours: Decimal, rule: StateRule) -> Decimal:
        """Flat rest-break stipend, not hourly."""
        if not rule.rest_break_applies:
            return ZERO
        if hours > self.LONG_SHIFT_HOURS:
            return self.LONG_SHIFT_REST_BREAK
        if hours > 0:
            return self.SHORT_SHIFT_REST_BREAK
        return ZERO

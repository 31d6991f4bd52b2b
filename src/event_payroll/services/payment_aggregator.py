"""Event payroll aggregation: fetch, merge, compute."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Collection, Iterable
from decimal import Decimal

from event_payroll.calculators.commission import CommissionPayCalculator
from event_payroll.calculators.eligibility import EligibilityClassifier
from event_payroll.calculators.revenue_split import RevenueSplitCalculator
from event_payroll.calculators.shift_aggregator import ShiftAggregator
from event_payroll.calculators.state_rates import StateRateTable
from event_payroll.calculators.types import (
    ZERO,
    EventFinancials,
    EventInfo,
    EventPayContext,
    EventPayrollResult,
    PaymentAdjustment,
    PayrollPolicy,
    PayrollSource,
    PayrollWarning,
    ShiftSpan,
    TeamMember,
    VendorPayInputs,
    WarningCode,
)
from event_payroll.services.data_source import (
    AdjustmentPersistenceError,
    PaymentPersistenceError,
    PayrollDataSource,
)

logger = logging.getLogger(__name__)


class PaymentAggregator:
    """Computes per-vendor payroll and the revenue split for events.

    Calculation pipeline (stable order):
    1. Read event, roster, saved payments, adjustments, state rates and
       timesheet spans concurrently
    2. Resolve the state rule and the revenue split
    3. Resolve hours per vendor (saved rows, backfilled from clock events)
    4. Build the event pay context (headcount, hours pool)
    5. Run the commission calculator once per vendor

    Data-quality problems become warnings on the result; they never
    abort the computation.
    """

    def __init__(self, source: PayrollDataSource, policy: PayrollPolicy | None = None):
        self.source = source
        self.policy = policy or PayrollPolicy()
        self.shift_aggregator = ShiftAggregator(self.policy)
        self.commission_calculator = CommissionPayCalculator(self.policy)

    async def compute_event_payroll(
        self,
        event_id: str,
        statuses: Collection[str] | None = None,
    ) -> EventPayrollResult:
        """Compute payroll for one event.

        Args:
            event_id: Event to compute
            statuses: Optional roster statuses to include; all rostered
                members are processed when omitted

        Returns:
            EventPayrollResult with vendor payments, split and warnings
        """
        (
            event,
            roster,
            persisted,
            (adjustments, adjustment_warning),
            configured_rates,
            spans,
        ) = await asyncio.gather(
            self.source.load_event(event_id),
            self.source.load_roster(event_id),
            self.source.load_persisted_payments(event_id),
            self._load_adjustments(event_id),
            self.source.load_state_rates(),
            self.source.load_shift_spans(event_id),
        )

        if event is None:
            return EventPayrollResult.empty(
                event_id,
                PayrollWarning(
                    code=WarningCode.MISSING_EVENT,
                    message=f"Event {event_id} not found",
                ),
            )

        warnings: list[PayrollWarning] = []
        if adjustment_warning is not None:
            warnings.append(adjustment_warning)

        financials = event.financials
        if financials is None:
            financials = EventFinancials(state=event.state)
            warnings.append(
                PayrollWarning(
                    code=WarningCode.MISSING_FINANCIALS,
                    message=f"Event {event_id} has no financial data; using zeros",
                )
            )
        else:
            warnings.extend(RevenueSplitCalculator.validate(financials))

        rates = StateRateTable(configured_rates, self.policy)
        rule = rates.rules_for(financials.state or event.state)
        if not rule.is_known:
            warnings.append(
                PayrollWarning(
                    code=WarningCode.UNKNOWN_STATE,
                    message=(
                        f"No rate configured for state {rule.state_code!r}; "
                        f"using fallback {rule.base_rate}"
                    ),
                )
            )

        split = RevenueSplitCalculator.calculate(financials)
        members = self._filter_roster(roster, statuses)

        persisted_hours = {p.vendor_id: p.effective_hours for p in persisted}
        if persisted:
            source = PayrollSource.PERSISTED
            live_ids = [
                m.vendor_id for m in members if persisted_hours.get(m.vendor_id, ZERO) <= 0
            ]
        else:
            source = PayrollSource.SYNTHESIZED if members else PayrollSource.EMPTY
            live_ids = [m.vendor_id for m in members]

        lead_hours = Decimal(self.policy.lead_time_minutes) / 60
        pay_hours: dict[str, Decimal] = {}
        display_hours: dict[str, Decimal] = {}
        for vendor_id, hours in persisted_hours.items():
            if hours > 0:
                pay_hours[vendor_id] = hours
                display_hours[vendor_id] = hours + lead_hours

        if live_ids:
            live_hours, live_display, clock_warnings = await self._live_hours(
                event, live_ids, spans
            )
            pay_hours.update(live_hours)
            display_hours.update(live_display)
            warnings.extend(clock_warnings)

        context = EventPayContext(
            state_rule=rule,
            total_commission_pool=split.commission_pool,
            eligible_vendor_count=EligibilityClassifier.eligible_vendor_count(
                members, pay_hours
            ),
            total_tips=financials.tips,
            total_eligible_hours=EligibilityClassifier.total_eligible_hours(
                members, pay_hours
            ),
        )

        vendor_payments = [
            self.commission_calculator.calculate(
                VendorPayInputs(
                    vendor_id=member.vendor_id,
                    actual_hours=pay_hours.get(member.vendor_id, ZERO),
                    division=member.division,
                    adjustment=adjustments.get(member.vendor_id),
                    display_hours=display_hours.get(member.vendor_id, ZERO),
                ),
                context,
            )
            for member in members
        ]

        logger.debug(
            "Computed payroll for event %s: %d vendors, source=%s, %d warnings",
            event_id,
            len(vendor_payments),
            source.value,
            len(warnings),
        )

        return EventPayrollResult(
            event_id=event_id,
            vendor_payments=vendor_payments,
            revenue_split=RevenueSplitCalculator.round_split(split),
            warnings=warnings,
            source=source,
            base_rate=rule.base_rate,
        )

    async def compute_event_payroll_batch(
        self,
        event_ids: Iterable[str],
        statuses: Collection[str] | None = None,
    ) -> dict[str, EventPayrollResult]:
        """Compute payroll for several events concurrently.

        A failure in one event yields an empty result with an
        EVENT_FAILED warning for that event only.
        """
        unique_ids = list(dict.fromkeys(event_ids))
        results = await asyncio.gather(
            *(self._compute_isolated(event_id, statuses) for event_id in unique_ids)
        )
        return dict(zip(unique_ids, results))

    async def save_adjustment(
        self,
        event_id: str,
        vendor_id: str,
        adjustment_amount: Decimal = ZERO,
        reimbursement_amount: Decimal = ZERO,
        note: str | None = None,
        created_by: str | None = None,
    ) -> PaymentAdjustment:
        """Persist a manual adjustment for one vendor.

        Raises:
            AdjustmentPersistenceError: If the write fails
        """
        adjustment = PaymentAdjustment(
            vendor_id=vendor_id,
            adjustment_amount=Decimal(str(adjustment_amount)),
            reimbursement_amount=Decimal(str(reimbursement_amount)),
            note=note,
        )
        try:
            return await self.source.upsert_adjustment(event_id, adjustment, created_by)
        except AdjustmentPersistenceError:
            raise
        except Exception as e:
            logger.exception(
                "Failed to save adjustment for event %s vendor %s", event_id, vendor_id
            )
            raise AdjustmentPersistenceError(event_id, str(e), vendor_id=vendor_id) from e

    async def persist_event_payroll(
        self,
        result: EventPayrollResult,
        created_by: str | None = None,
    ) -> None:
        """Save a computed result as the event's payment summary and rows.

        Raises:
            PaymentPersistenceError: If the event is unknown or the write fails
        """
        if any(w.code == WarningCode.MISSING_EVENT for w in result.warnings):
            raise PaymentPersistenceError(result.event_id, "event not found")
        try:
            await self.source.save_event_payments(result, created_by)
        except PaymentPersistenceError:
            raise
        except Exception as e:
            logger.exception("Failed to save payments for event %s", result.event_id)
            raise PaymentPersistenceError(result.event_id, str(e)) from e

    async def _compute_isolated(
        self, event_id: str, statuses: Collection[str] | None
    ) -> EventPayrollResult:
        try:
            return await self.compute_event_payroll(event_id, statuses)
        except Exception as e:
            logger.exception("Payroll computation failed for event %s", event_id)
            return EventPayrollResult.empty(
                event_id,
                PayrollWarning(
                    code=WarningCode.EVENT_FAILED,
                    message=f"Payroll computation failed: {e}",
                ),
            )

    async def _load_adjustments(
        self, event_id: str
    ) -> tuple[dict[str, PaymentAdjustment], PayrollWarning | None]:
        try:
            return await self.source.load_adjustments(event_id), None
        except Exception as e:
            logger.warning(
                "Adjustments unavailable for event %s, computing without them",
                event_id,
                exc_info=True,
            )
            return {}, PayrollWarning(
                code=WarningCode.ADJUSTMENTS_UNAVAILABLE,
                message=f"Adjustments could not be read: {e}",
            )

    async def _live_hours(
        self,
        event: EventInfo,
        vendor_ids: list[str],
        spans: dict[str, ShiftSpan],
    ) -> tuple[dict[str, Decimal], dict[str, Decimal], list[PayrollWarning]]:
        """Hours from clock events (or edited spans) for the given vendors."""
        window = None
        if event.event_date is not None:
            window = self.shift_aggregator.day_window(
                event.event_date,
                event.start_time,
                event.end_time,
                event.ends_next_day,
            )

        clock_events = await self.source.load_clock_events(
            vendor_ids, window, event.event_id
        )

        pay_hours: dict[str, Decimal] = {}
        display_hours: dict[str, Decimal] = {}
        warnings: list[PayrollWarning] = []
        for vendor_id in vendor_ids:
            worked = self.shift_aggregator.summarize(
                clock_events.get(vendor_id, []),
                window=window,
                span=spans.get(vendor_id),
            )
            if worked.skipped_events:
                warnings.append(
                    PayrollWarning(
                        code=WarningCode.MALFORMED_TIMESTAMP,
                        message=(
                            f"Skipped {worked.skipped_events} clock event(s) "
                            "with malformed timestamps"
                        ),
                        vendor_id=vendor_id,
                    )
                )
            pay_hours[vendor_id] = (
                worked.display_hours if self.policy.lead_time_in_pay else worked.worked_hours
            )
            display_hours[vendor_id] = worked.display_hours

        return pay_hours, display_hours, warnings

    @staticmethod
    def _filter_roster(
        roster: list[TeamMember], statuses: Collection[str] | None
    ) -> list[TeamMember]:
        members: dict[str, TeamMember] = {}
        for member in roster:
            if statuses is not None and (member.status or "") not in statuses:
                continue
            members.setdefault(member.vendor_id, member)
        return list(members.values())

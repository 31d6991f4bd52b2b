"""Readers and writers the payment aggregator depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from decimal import Decimal

from event_payroll.calculators.types import (
    ClockEvent,
    DayWindow,
    EventInfo,
    EventPayrollResult,
    PaymentAdjustment,
    PersistedVendorPayment,
    ShiftSpan,
    TeamMember,
)


class PayrollPersistenceError(Exception):
    """Raised when a payroll write fails."""

    code = "persistence_failed"

    def __init__(self, event_id: str, reason: str, vendor_id: str | None = None):
        self.event_id = event_id
        self.vendor_id = vendor_id
        self.reason = reason
        target = f"event {event_id}"
        if vendor_id:
            target += f", vendor {vendor_id}"
        super().__init__(f"Failed to persist payroll data for {target}: {reason}")


class AdjustmentPersistenceError(PayrollPersistenceError):
    """Raised when an adjustment/reimbursement write fails."""

    code = "adjustment_persistence_failed"


class PaymentPersistenceError(PayrollPersistenceError):
    """Raised when saving computed event payments fails."""

    code = "payment_persistence_failed"


class PayrollDataSource(ABC):
    """Async access to events, rosters, clock events and saved payments.

    Every reader is independent of the others so the aggregator can
    issue them concurrently.
    """

    @abstractmethod
    async def load_event(self, event_id: str) -> EventInfo | None:
        """Event record, or None when the event does not exist."""

    @abstractmethod
    async def load_roster(self, event_id: str) -> list[TeamMember]:
        """Team members rostered on the event, with their division."""

    @abstractmethod
    async def load_clock_events(
        self,
        vendor_ids: Iterable[str],
        window: DayWindow | None = None,
        event_id: str | None = None,
    ) -> dict[str, list[ClockEvent]]:
        """Raw clock events keyed by vendor."""

    @abstractmethod
    async def load_shift_spans(self, event_id: str) -> dict[str, ShiftSpan]:
        """Operator-edited timesheet spans keyed by vendor."""

    @abstractmethod
    async def load_persisted_payments(self, event_id: str) -> list[PersistedVendorPayment]:
        """Previously saved vendor payment rows for the event."""

    @abstractmethod
    async def load_adjustments(self, event_id: str) -> dict[str, PaymentAdjustment]:
        """Adjustments keyed by vendor."""

    @abstractmethod
    async def load_state_rates(self) -> dict[str, Decimal]:
        """Configured base rates keyed by state code."""

    @abstractmethod
    async def upsert_adjustment(
        self,
        event_id: str,
        adjustment: PaymentAdjustment,
        created_by: str | None = None,
    ) -> PaymentAdjustment:
        """Insert or replace the adjustment for (event, vendor)."""

    @abstractmethod
    async def save_event_payments(
        self,
        result: EventPayrollResult,
        created_by: str | None = None,
    ) -> None:
        """Write the event summary and replace its vendor payment rows."""


class InMemoryPayrollDataSource(PayrollDataSource):
    """Dictionary-backed data source for tests and scripts."""

    def __init__(
        self,
        events: Mapping[str, EventInfo] | None = None,
        rosters: Mapping[str, list[TeamMember]] | None = None,
        clock_events: Mapping[str, list[ClockEvent]] | None = None,
        shift_spans: Mapping[str, Mapping[str, ShiftSpan]] | None = None,
        persisted_payments: Mapping[str, list[PersistedVendorPayment]] | None = None,
        adjustments: Mapping[str, Mapping[str, PaymentAdjustment]] | None = None,
        state_rates: Mapping[str, Decimal] | None = None,
    ):
        self.events = dict(events or {})
        self.rosters = {k: list(v) for k, v in (rosters or {}).items()}
        self.clock_events = {k: list(v) for k, v in (clock_events or {}).items()}
        self.shift_spans = {k: dict(v) for k, v in (shift_spans or {}).items()}
        self.persisted_payments = {
            k: list(v) for k, v in (persisted_payments or {}).items()
        }
        self.adjustments = {k: dict(v) for k, v in (adjustments or {}).items()}
        self.state_rates = dict(state_rates or {})
        self.saved_results: dict[str, EventPayrollResult] = {}

    async def load_event(self, event_id: str) -> EventInfo | None:
        return self.events.get(event_id)

    async def load_roster(self, event_id: str) -> list[TeamMember]:
        return list(self.rosters.get(event_id, []))

    async def load_clock_events(
        self,
        vendor_ids: Iterable[str],
        window: DayWindow | None = None,
        event_id: str | None = None,
    ) -> dict[str, list[ClockEvent]]:
        # Window filtering happens in the shift aggregator
        return {vid: list(self.clock_events.get(vid, [])) for vid in vendor_ids}

    async def load_shift_spans(self, event_id: str) -> dict[str, ShiftSpan]:
        return dict(self.shift_spans.get(event_id, {}))

    async def load_persisted_payments(self, event_id: str) -> list[PersistedVendorPayment]:
        return list(self.persisted_payments.get(event_id, []))

    async def load_adjustments(self, event_id: str) -> dict[str, PaymentAdjustment]:
        return dict(self.adjustments.get(event_id, {}))

    async def load_state_rates(self) -> dict[str, Decimal]:
        return dict(self.state_rates)

    async def upsert_adjustment(
        self,
        event_id: str,
        adjustment: PaymentAdjustment,
        created_by: str | None = None,
    ) -> PaymentAdjustment:
        self.adjustments.setdefault(event_id, {})[adjustment.vendor_id] = adjustment
        return adjustment

    async def save_event_payments(
        self,
        result: EventPayrollResult,
        created_by: str | None = None,
    ) -> None:
        self.saved_results[result.event_id] = result
        self.persisted_payments[result.event_id] = [
            PersistedVendorPayment(
                vendor_id=record.vendor_id,
                actual_hours=record.actual_hours,
                regular_hours=record.actual_hours,
            )
            for record in result.vendor_payments
        ]


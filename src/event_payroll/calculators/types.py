"""Type definitions for the payroll and revenue pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")
MS_PER_HOUR = Decimal("3600000")


class ClockAction(str, Enum):
    """Time-tracking actions recorded by the check-in kiosk."""

    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    MEAL_START = "meal_start"
    MEAL_END = "meal_end"


class Division(str, Enum):
    """Team member division, resolved once when a roster row is read."""

    VENDOR = "vendor"
    BOTH = "both"
    TRAILERS = "trailers"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Division | str | None) -> Division:
        """Normalize a raw division string (case/whitespace insensitive)."""
        if isinstance(value, Division):
            return value
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.OTHER


class WarningCode(str, Enum):
    """Non-fatal data-quality conditions surfaced to callers."""

    MISSING_EVENT = "missing_event"
    MISSING_FINANCIALS = "missing_financials"
    SPLIT_PERCENT_MISMATCH = "split_percent_mismatch"
    UNKNOWN_STATE = "unknown_state"
    MALFORMED_TIMESTAMP = "malformed_timestamp"
    ADJUSTMENTS_UNAVAILABLE = "adjustments_unavailable"
    EVENT_FAILED = "event_failed"


class PayrollSource(str, Enum):
    """Where the hours of an event payroll came from."""

    PERSISTED = "persisted"
    SYNTHESIZED = "synthesized"
    EMPTY = "empty"


@dataclass(frozen=True)
class PayrollWarning:
    """A warning attached to an event payroll result."""

    code: WarningCode
    message: str
    vendor_id: str | None = None


@dataclass(frozen=True)
class ClockEvent:
    """A raw clock event. ``timestamp`` may still be an unparsed string."""

    user_id: str
    action: str
    timestamp: datetime | str | None


@dataclass(frozen=True)
class ShiftSpan:
    """First/last punches and up to two meal windows for one vendor."""

    first_in: datetime | None = None
    last_out: datetime | None = None
    first_meal_start: datetime | None = None
    last_meal_end: datetime | None = None
    second_meal_start: datetime | None = None
    second_meal_end: datetime | None = None


@dataclass(frozen=True)
class DayWindow:
    """Inclusive UTC window used to select clock events for an event."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class WorkedTime:
    """Worked duration for one vendor on one event."""

    worked_ms: int = 0
    lead_time_ms: int = 0
    span: ShiftSpan = field(default_factory=ShiftSpan)
    skipped_events: int = 0

    @property
    def total_ms(self) -> int:
        return self.worked_ms + self.lead_time_ms

    @property
    def worked_hours(self) -> Decimal:
        """Hours after meal deductions, without the lead-time offset."""
        return Decimal(self.worked_ms) / MS_PER_HOUR

    @property
    def display_hours(self) -> Decimal:
        """Hours including the gate/phone lead-time offset."""
        return Decimal(self.total_ms) / MS_PER_HOUR


@dataclass(frozen=True)
class Eligibility:
    """Commission and tip participation for a division."""

    is_vendor_eligible: bool
    is_trailers: bool


@dataclass(frozen=True)
class TeamMember:
    """A rostered team member for an event."""

    vendor_id: str
    division: Division = Division.OTHER
    status: str | None = None


@dataclass(frozen=True)
class EventFinancials:
    """Financial inputs of one event.

    Percent fields are whole percents (``50`` means 50%);
    ``commission_pool_fraction`` is a fraction (``0.04`` means 4%).
    """

    ticket_sales_gross: Decimal = ZERO
    tips: Decimal = ZERO
    tax_rate_percent: Decimal = ZERO
    tax_amount_override: Decimal | None = None
    commission_pool_fraction: Decimal = ZERO
    artist_share_percent: Decimal = ZERO
    venue_share_percent: Decimal = ZERO
    operator_share_percent: Decimal = ZERO
    state: str | None = None

    @property
    def split_percent_total(self) -> Decimal:
        return (
            self.artist_share_percent
            + self.venue_share_percent
            + self.operator_share_percent
        )


@dataclass(frozen=True)
class EventInfo:
    """The part of an event record the engine reads."""

    event_id: str
    event_date: date | None
    financials: EventFinancials | None
    start_time: time | None = None
    end_time: time | None = None
    ends_next_day: bool = False
    name: str | None = None
    state: str | None = None


@dataclass(frozen=True)
class PaymentAdjustment:
    """Manually entered correction for one vendor on one event.

    Adjustment and reimbursement are kept apart for audit and only
    summed by ``net_amount``.
    """

    vendor_id: str
    adjustment_amount: Decimal = ZERO
    reimbursement_amount: Decimal = ZERO
    note: str | None = None

    @property
    def net_amount(self) -> Decimal:
        return self.adjustment_amount + self.reimbursement_amount


@dataclass(frozen=True)
class PersistedVendorPayment:
    """A previously saved vendor payment row; only its hours are reused."""

    vendor_id: str
    actual_hours: Decimal = ZERO
    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    doubletime_hours: Decimal = ZERO

    @property
    def effective_hours(self) -> Decimal:
        if self.actual_hours > 0:
            return self.actual_hours
        summed = self.regular_hours + self.overtime_hours + self.doubletime_hours
        return summed if summed > 0 else ZERO


@dataclass(frozen=True)
class StateRule:
    """Wage rules resolved for a state code."""

    state_code: str
    base_rate: Decimal
    rest_break_applies: bool
    uses_flat_commission_formula: bool
    is_known: bool = True


@dataclass(frozen=True)
class PayrollPolicy:
    """Immutable payroll knobs passed into the calculators."""

    lead_time_minutes: int = 30
    lead_time_in_pay: bool = False
    legacy_minimum_guarantee: bool = False
    legacy_minimum_amount: Decimal = Decimal("150")
    default_state: str = "CA"
    fallback_base_rate: Decimal = Decimal("17.28")


@dataclass(frozen=True)
class EventPayContext:
    """Event-level values shared by every vendor's pay calculation."""

    state_rule: StateRule
    total_commission_pool: Decimal
    eligible_vendor_count: int
    total_tips: Decimal
    total_eligible_hours: Decimal

    @property
    def per_vendor_commission_share(self) -> Decimal:
        if self.eligible_vendor_count <= 0:
            return ZERO
        return self.total_commission_pool / self.eligible_vendor_count


@dataclass(frozen=True)
class VendorPayInputs:
    """Per-vendor inputs to the commission pay calculation."""

    vendor_id: str
    actual_hours: Decimal
    division: Division = Division.OTHER
    adjustment: PaymentAdjustment | None = None
    display_hours: Decimal | None = None


@dataclass(frozen=True)
class EventRevenueSplit:
    """Event-level revenue split."""

    gross_collected: Decimal = ZERO
    tips_removed: Decimal = ZERO
    total_sales: Decimal = ZERO
    tax_amount: Decimal = ZERO
    net_sales: Decimal = ZERO
    artist_share: Decimal = ZERO
    venue_share: Decimal = ZERO
    operator_share: Decimal = ZERO
    commission_pool: Decimal = ZERO
    split_percent_total: Decimal = ZERO


@dataclass(frozen=True)
class VendorPaymentRecord:
    """Computed pay breakdown for one vendor on one event."""

    vendor_id: str
    division: Division
    actual_hours: Decimal
    display_hours: Decimal
    regular_pay: Decimal
    commission_amount: Decimal
    total_final_commission: Decimal
    tips: Decimal
    rest_break: Decimal
    adjustment: Decimal
    reimbursement: Decimal
    adjustment_amount: Decimal
    total_gross_pay: Decimal
    adjustment_note: str | None = None


@dataclass
class EventPayrollResult:
    """Payroll for one event: per-vendor records plus the revenue split."""

    event_id: str
    vendor_payments: list[VendorPaymentRecord] = field(default_factory=list)
    revenue_split: EventRevenueSplit = field(default_factory=EventRevenueSplit)
    warnings: list[PayrollWarning] = field(default_factory=list)
    source: PayrollSource = PayrollSource.EMPTY
    base_rate: Decimal | None = None

    @property
    def total_gross_pay(self) -> Decimal:
        return sum((p.total_gross_pay for p in self.vendor_payments), ZERO)

    @classmethod
    def empty(cls, event_id: str, warning: PayrollWarning | None = None) -> EventPayrollResult:
        return cls(
            event_id=event_id,
            warnings=[warning] if warning else [],
            source=PayrollSource.EMPTY,
        )

"""ORM models."""

from event_payroll.models.base import Base, TimestampMixin
from event_payroll.models.event import Event, EventTeam, TimeEntry, TimesheetSpan, Vendor
from event_payroll.models.payments import (
    EventPayment,
    EventVendorPayment,
    PaymentAdjustmentRow,
    StateRate,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "Event",
    "EventPayment",
    "EventTeam",
    "EventVendorPayment",
    "PaymentAdjustmentRow",
    "StateRate",
    "TimeEntry",
    "TimesheetSpan",
    "Vendor",
]

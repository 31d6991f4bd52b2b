"""Event, roster and time-tracking models."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_payroll.models.base import Base, TimestampMixin


class Vendor(Base, TimestampMixin):
    """A staff member who can be rostered onto events."""

    __tablename__ = "vendor"

    vendor_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    division: Mapped[str | None] = mapped_column(String, nullable=True)

    team_entries: Mapped[list[EventTeam]] = relationship(back_populates="vendor")


class Event(Base, TimestampMixin):
    """Event record with its sales inputs."""

    __tablename__ = "event"

    event_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    event_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    ends_next_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)

    ticket_sales: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    tips: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    tax_rate_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    tax_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    commission_pool: Mapped[Decimal | None] = mapped_column(Numeric(5, 4), nullable=True)
    artist_share_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    venue_share_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    operator_share_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)

    team: Mapped[list[EventTeam]] = relationship(back_populates="event")


class EventTeam(Base, TimestampMixin):
    """Roster assignment of a vendor to an event."""

    __tablename__ = "event_team"

    event_team_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    event_id: Mapped[UUID] = mapped_column(
        ForeignKey("event.event_id", ondelete="CASCADE"),
        nullable=False,
    )
    vendor_id: Mapped[UUID] = mapped_column(
        ForeignKey("vendor.vendor_id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="assigned")

    __table_args__ = (
        UniqueConstraint("event_id", "vendor_id", name="event_team_event_vendor_unique"),
        CheckConstraint(
            "status IN ('assigned', 'pending', 'confirmed', 'declined', 'completed')",
            name="event_team_status_check",
        ),
    )

    event: Mapped[Event] = relationship(back_populates="team")
    vendor: Mapped[Vendor] = relationship(back_populates="team_entries")


class TimeEntry(Base, TimestampMixin):
    """Raw clock event from the time-tracking kiosk."""

    __tablename__ = "time_entry"

    time_entry_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    event_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)
    action: Mapped[str] = mapped_column(String, nullable=False)
    timestamp: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "action IN ('clock_in', 'clock_out', 'meal_start', 'meal_end')",
            name="time_entry_action_check",
        ),
    )


class TimesheetSpan(Base, TimestampMixin):
    """Timesheet span edited by an operator; overrides raw punches."""

    __tablename__ = "timesheet_span"

    timesheet_span_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    event_id: Mapped[UUID] = mapped_column(
        ForeignKey("event.event_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    first_in: Mapped[datetime | None] = mapped_column(nullable=True)
    last_out: Mapped[datetime | None] = mapped_column(nullable=True)
    first_meal_start: Mapped[datetime | None] = mapped_column(nullable=True)
    last_meal_end: Mapped[datetime | None] = mapped_column(nullable=True)
    second_meal_start: Mapped[datetime | None] = mapped_column(nullable=True)
    second_meal_end: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="timesheet_span_event_user_unique"),
    )

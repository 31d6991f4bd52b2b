"""Payment summary, vendor payment, adjustment and state-rate models."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_payroll.models.base import Base, TimestampMixin


class StateRate(Base, TimestampMixin):
    """Configured base hourly rate for a state."""

    __tablename__ = "state_rate"

    state_code: Mapped[str] = mapped_column(String(2), primary_key=True)
    state_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    base_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)


class EventPayment(Base, TimestampMixin):
    """Saved event-level payment summary (one per event)."""

    __tablename__ = "event_payment"

    event_payment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    event_id: Mapped[UUID] = mapped_column(
        ForeignKey("event.event_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    commission_pool_dollars: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    total_tips: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    total_regular_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    total_regular_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    total_commissions: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    total_tips_distributed: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    total_payment: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    base_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    net_sales: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(nullable=True)

    vendor_payments: Mapped[list[EventVendorPayment]] = relationship(
        back_populates="event_payment",
        cascade="all, delete-orphan",
    )


class EventVendorPayment(Base, TimestampMixin):
    """Saved per-vendor payment row."""

    __tablename__ = "event_vendor_payment"

    event_vendor_payment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    event_payment_id: Mapped[UUID] = mapped_column(
        ForeignKey("event_payment.event_payment_id", ondelete="CASCADE"),
        nullable=False,
    )
    event_id: Mapped[UUID] = mapped_column(
        ForeignKey("event.event_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(nullable=False)

    actual_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    regular_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    doubletime_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    regular_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    commissions: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    tips: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    rest_break: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    total_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="event_vendor_payment_event_user_unique"),
    )

    event_payment: Mapped[EventPayment] = relationship(back_populates="vendor_payments")


class PaymentAdjustmentRow(Base, TimestampMixin):
    """Manual adjustment and reimbursement for one vendor on one event."""

    __tablename__ = "payment_adjustment"

    payment_adjustment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    event_id: Mapped[UUID] = mapped_column(
        ForeignKey("event.event_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(nullable=False)
    adjustment_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    reimbursement_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    adjustment_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="payment_adjustment_event_user_unique"),
    )

"""SQLAlchemy-backed payroll data source."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from event_payroll.calculators.types import (
    ZERO,
    ClockEvent,
    DayWindow,
    Division,
    EventFinancials,
    EventInfo,
    EventPayrollResult,
    PaymentAdjustment,
    PersistedVendorPayment,
    ShiftSpan,
    TeamMember,
)
from event_payroll.models import (
    Event,
    EventPayment,
    EventTeam,
    EventVendorPayment,
    PaymentAdjustmentRow,
    StateRate,
    TimeEntry,
    TimesheetSpan,
    Vendor,
)
from event_payroll.services.data_source import (
    AdjustmentPersistenceError,
    PaymentPersistenceError,
    PayrollDataSource,
)

logger = logging.getLogger(__name__)


def _as_uuid(value: str | UUID | None) -> UUID | None:
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _decimal(value: Decimal | None) -> Decimal:
    return Decimal(str(value)) if value is not None else ZERO


class SqlPayrollDataSource(PayrollDataSource):
    """Reads and writes payroll data through the async ORM.

    Each call opens its own session so that the aggregator can run
    reads concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def load_event(self, event_id: str) -> EventInfo | None:
        event_uuid = _as_uuid(event_id)
        if event_uuid is None:
            return None

        async with self.session_factory() as session:
            event = await session.get(Event, event_uuid)

        if event is None:
            return None

        financials = None
        if event.ticket_sales is not None or event.tips is not None:
            financials = EventFinancials(
                ticket_sales_gross=_decimal(event.ticket_sales),
                tips=_decimal(event.tips),
                tax_rate_percent=_decimal(event.tax_rate_percent),
                tax_amount_override=(
                    Decimal(str(event.tax_amount)) if event.tax_amount is not None else None
                ),
                commission_pool_fraction=_decimal(event.commission_pool),
                artist_share_percent=_decimal(event.artist_share_percent),
                venue_share_percent=_decimal(event.venue_share_percent),
                operator_share_percent=_decimal(event.operator_share_percent),
                state=event.state,
            )

        return EventInfo(
            event_id=str(event.event_id),
            event_date=event.event_date,
            financials=financials,
            state=event.state,
            start_time=event.start_time,
            end_time=event.end_time,
            ends_next_day=bool(event.ends_next_day),
            name=event.name,
        )

    async def load_roster(self, event_id: str) -> list[TeamMember]:
        event_uuid = _as_uuid(event_id)
        if event_uuid is None:
            return []

        async with self.session_factory() as session:
            result = await session.execute(
                select(EventTeam.vendor_id, EventTeam.status, Vendor.division)
                .join(Vendor, Vendor.vendor_id == EventTeam.vendor_id)
                .where(EventTeam.event_id == event_uuid)
                .order_by(EventTeam.created_at, EventTeam.vendor_id)
            )
            rows = result.all()

        return [
            TeamMember(
                vendor_id=str(row.vendor_id),
                division=Division.parse(row.division),
                status=row.status,
            )
            for row in rows
        ]

    async def load_clock_events(
        self,
        vendor_ids: Iterable[str],
        window: DayWindow | None = None,
        event_id: str | None = None,
    ) -> dict[str, list[ClockEvent]]:
        vendor_ids = list(vendor_ids)
        events: dict[str, list[ClockEvent]] = {vid: [] for vid in vendor_ids}
        user_uuids = [u for u in (_as_uuid(v) for v in vendor_ids) if u is not None]
        if not user_uuids:
            return events

        query = select(TimeEntry).where(TimeEntry.user_id.in_(user_uuids))
        if window is not None:
            query = query.where(
                TimeEntry.timestamp >= window.start,
                TimeEntry.timestamp <= window.end,
            )
        event_uuid = _as_uuid(event_id)
        if event_uuid is not None:
            # Kiosk entries without an event are attributed by time window
            query = query.where(
                or_(TimeEntry.event_id == event_uuid, TimeEntry.event_id.is_(None))
            )

        async with self.session_factory() as session:
            result = await session.execute(query.order_by(TimeEntry.timestamp))
            entries = result.scalars().all()

        for entry in entries:
            events.setdefault(str(entry.user_id), []).append(
                ClockEvent(
                    user_id=str(entry.user_id),
                    action=entry.action,
                    timestamp=entry.timestamp,
                )
            )
        return events

    async def load_shift_spans(self, event_id: str) -> dict[str, ShiftSpan]:
        event_uuid = _as_uuid(event_id)
        if event_uuid is None:
            return {}

        async with self.session_factory() as session:
            result = await session.execute(
                select(TimesheetSpan).where(TimesheetSpan.event_id == event_uuid)
            )
            rows = result.scalars().all()

        return {
            str(row.user_id): ShiftSpan(
                first_in=row.first_in,
                last_out=row.last_out,
                first_meal_start=row.first_meal_start,
                last_meal_end=row.last_meal_end,
                second_meal_start=row.second_meal_start,
                second_meal_end=row.second_meal_end,
            )
            for row in rows
        }

    async def load_persisted_payments(self, event_id: str) -> list[PersistedVendorPayment]:
        event_uuid = _as_uuid(event_id)
        if event_uuid is None:
            return []

        async with self.session_factory() as session:
            result = await session.execute(
                select(EventVendorPayment).where(EventVendorPayment.event_id == event_uuid)
            )
            rows = result.scalars().all()

        return [
            PersistedVendorPayment(
                vendor_id=str(row.user_id),
                actual_hours=_decimal(row.actual_hours),
                regular_hours=_decimal(row.regular_hours),
                overtime_hours=_decimal(row.overtime_hours),
                doubletime_hours=_decimal(row.doubletime_hours),
            )
            for row in rows
        ]

    async def load_adjustments(self, event_id: str) -> dict[str, PaymentAdjustment]:
        event_uuid = _as_uuid(event_id)
        if event_uuid is None:
            return {}

        async with self.session_factory() as session:
            result = await session.execute(
                select(PaymentAdjustmentRow).where(PaymentAdjustmentRow.event_id == event_uuid)
            )
            rows = result.scalars().all()

        return {
            str(row.user_id): PaymentAdjustment(
                vendor_id=str(row.user_id),
                adjustment_amount=_decimal(row.adjustment_amount),
                reimbursement_amount=_decimal(row.reimbursement_amount),
                note=row.adjustment_note,
            )
            for row in rows
        }

    async def load_state_rates(self) -> dict[str, Decimal]:
        async with self.session_factory() as session:
            result = await session.execute(select(StateRate.state_code, StateRate.base_rate))
            rows = result.all()
        return {row.state_code: _decimal(row.base_rate) for row in rows}

    async def upsert_adjustment(
        self,
        event_id: str,
        adjustment: PaymentAdjustment,
        created_by: str | None = None,
    ) -> PaymentAdjustment:
        event_uuid = _as_uuid(event_id)
        user_uuid = _as_uuid(adjustment.vendor_id)
        if event_uuid is None or user_uuid is None:
            raise AdjustmentPersistenceError(
                event_id, "invalid identifier", vendor_id=adjustment.vendor_id
            )

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        select(PaymentAdjustmentRow).where(
                            PaymentAdjustmentRow.event_id == event_uuid,
                            PaymentAdjustmentRow.user_id == user_uuid,
                        )
                    )
                    row = result.scalar_one_or_none()
                    if row is None:
                        row = PaymentAdjustmentRow(event_id=event_uuid, user_id=user_uuid)
                        session.add(row)
                    row.adjustment_amount = adjustment.adjustment_amount
                    row.reimbursement_amount = adjustment.reimbursement_amount
                    row.adjustment_note = adjustment.note
                    row.created_by = _as_uuid(created_by)
        except SQLAlchemyError as e:
            raise AdjustmentPersistenceError(
                event_id, str(e), vendor_id=adjustment.vendor_id
            ) from e

        logger.info(
            "Saved adjustment for event %s vendor %s", event_id, adjustment.vendor_id
        )
        return adjustment

    async def save_event_payments(
        self,
        result: EventPayrollResult,
        created_by: str | None = None,
    ) -> None:
        event_uuid = _as_uuid(result.event_id)
        if event_uuid is None:
            raise PaymentPersistenceError(result.event_id, "invalid event identifier")

        records = result.vendor_payments
        split = result.revenue_split

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    existing = await session.execute(
                        select(EventPayment).where(EventPayment.event_id == event_uuid)
                    )
                    payment = existing.scalar_one_or_none()
                    if payment is None:
                        payment = EventPayment(event_payment_id=uuid4(), event_id=event_uuid)
                        session.add(payment)

                    payment.commission_pool_dollars = split.commission_pool
                    payment.total_tips = split.tips_removed
                    payment.net_sales = split.net_sales
                    payment.base_rate = result.base_rate
                    payment.total_regular_hours = sum((r.actual_hours for r in records), ZERO)
                    payment.total_regular_pay = sum((r.regular_pay for r in records), ZERO)
                    payment.total_commissions = sum(
                        (r.total_final_commission for r in records), ZERO
                    )
                    payment.total_tips_distributed = sum((r.tips for r in records), ZERO)
                    payment.total_payment = sum((r.total_gross_pay for r in records), ZERO)
                    payment.created_by = _as_uuid(created_by)

                    await session.execute(
                        delete(EventVendorPayment).where(
                            EventVendorPayment.event_id == event_uuid
                        )
                    )
                    for record in records:
                        user_uuid = _as_uuid(record.vendor_id)
                        if user_uuid is None:
                            raise PaymentPersistenceError(
                                result.event_id,
                                "invalid vendor identifier",
                                vendor_id=record.vendor_id,
                            )
                        session.add(
                            EventVendorPayment(
                                event_payment_id=payment.event_payment_id,
                                event_id=event_uuid,
                                user_id=user_uuid,
                                actual_hours=record.actual_hours,
                                regular_hours=record.actual_hours,
                                regular_pay=record.regular_pay,
                                commissions=record.commission_amount,
                                tips=record.tips,
                                rest_break=record.rest_break,
                                total_pay=record.total_gross_pay,
                            )
                        )
        except SQLAlchemyError as e:
            raise PaymentPersistenceError(result.event_id, str(e)) from e

        logger.info(
            "Saved payments for event %s (%d vendors)", result.event_id, len(records)
        )

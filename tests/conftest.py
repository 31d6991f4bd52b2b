"""Pytest fixtures for event payroll tests."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from event_payroll.calculators.types import (
    ClockEvent,
    Division,
    EventFinancials,
    EventInfo,
    PayrollPolicy,
    StateRule,
    TeamMember,
)
from event_payroll.database import create_schema, make_session_factory
from event_payroll.models import Event, EventTeam, StateRate, TimeEntry, Vendor
from event_payroll.services.data_source import InMemoryPayrollDataSource

EVENT_DATE = date(2026, 5, 1)


def utc(hour: int, minute: int = 0, day: date = EVENT_DATE) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)


def shift(user_id: str, start: datetime, end: datetime) -> list[ClockEvent]:
    """A clock_in/clock_out pair."""
    return [
        ClockEvent(user_id=user_id, action="clock_in", timestamp=start),
        ClockEvent(user_id=user_id, action="clock_out", timestamp=end),
    ]


@pytest.fixture
def policy() -> PayrollPolicy:
    return PayrollPolicy()


@pytest.fixture
def ca_rule() -> StateRule:
    return StateRule(
        state_code="CA",
        base_rate=Decimal("17.28"),
        rest_break_applies=True,
        uses_flat_commission_formula=False,
    )


@pytest.fixture
def az_rule() -> StateRule:
    return StateRule(
        state_code="AZ",
        base_rate=Decimal("17.28"),
        rest_break_applies=False,
        uses_flat_commission_formula=True,
    )


@pytest.fixture
def financials() -> EventFinancials:
    """$10,500 collected, $500 tips, no tax, 4% pool, 50/30/20 split."""
    return EventFinancials(
        ticket_sales_gross=Decimal("10500"),
        tips=Decimal("500"),
        tax_rate_percent=Decimal("0"),
        commission_pool_fraction=Decimal("0.04"),
        artist_share_percent=Decimal("50"),
        venue_share_percent=Decimal("30"),
        operator_share_percent=Decimal("20"),
        state="CA",
    )


@pytest.fixture
def in_memory_source(financials: EventFinancials) -> InMemoryPayrollDataSource:
    """CA event with two vendors (8h, 4h) and one trailers member (6h)."""
    return InMemoryPayrollDataSource(
        events={
            "evt-1": EventInfo(
                event_id="evt-1",
                event_date=EVENT_DATE,
                financials=financials,
                start_time=time(9, 0),
                end_time=time(23, 0),
                name="Spring Show",
                state="CA",
            )
        },
        rosters={
            "evt-1": [
                TeamMember(vendor_id="v1", division=Division.VENDOR, status="confirmed"),
                TeamMember(vendor_id="v2", division=Division.BOTH, status="confirmed"),
                TeamMember(vendor_id="v3", division=Division.TRAILERS, status="assigned"),
            ]
        },
        clock_events={
            "v1": shift("v1", utc(9), utc(17)),
            "v2": shift("v2", utc(9), utc(13)),
            "v3": shift("v3", utc(9), utc(15)),
        },
    )


# ============================================================================
# SQL fixtures
# ============================================================================


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine so concurrent sessions share one database."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'event_payroll.db'}",
        echo=False,
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(db_engine)


@pytest_asyncio.fixture
async def seeded_event(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, str]:
    """Persist the in-memory scenario: returns event and vendor IDs as strings."""
    event_id = uuid4()
    v1, v2, v3 = uuid4(), uuid4(), uuid4()

    async with session_factory() as session:
        session.add_all(
            [
                Vendor(vendor_id=v1, email="v1@example.com", division="vendor"),
                Vendor(vendor_id=v2, email="v2@example.com", division=" Both "),
                Vendor(vendor_id=v3, email="v3@example.com", division="TRAILERS"),
                Event(
                    event_id=event_id,
                    name="Spring Show",
                    event_date=EVENT_DATE,
                    start_time=time(9, 0),
                    end_time=time(23, 0),
                    state="CA",
                    ticket_sales=Decimal("10500"),
                    tips=Decimal("500"),
                    tax_rate_percent=Decimal("0"),
                    commission_pool=Decimal("0.04"),
                    artist_share_percent=Decimal("50"),
                    venue_share_percent=Decimal("30"),
                    operator_share_percent=Decimal("20"),
                ),
                StateRate(state_code="CA", state_name="California", base_rate=Decimal("17.28")),
            ]
        )
        await session.flush()
        session.add_all(
            [
                EventTeam(event_id=event_id, vendor_id=v1, status="confirmed"),
                EventTeam(event_id=event_id, vendor_id=v2, status="confirmed"),
                EventTeam(event_id=event_id, vendor_id=v3, status="assigned"),
            ]
        )
        for user_id, start, end in (
            (v1, utc(9), utc(17)),
            (v2, utc(9), utc(13)),
            (v3, utc(9), utc(15)),
        ):
            session.add_all(
                [
                    TimeEntry(user_id=user_id, event_id=event_id, action="clock_in", timestamp=start),
                    TimeEntry(user_id=user_id, event_id=event_id, action="clock_out", timestamp=end),
                ]
            )
        # Previous day punch, outside the event window
        session.add(
            TimeEntry(
                user_id=v1,
                event_id=None,
                action="clock_in",
                timestamp=utc(8, day=date(2026, 4, 30)),
            )
        )
        await session.commit()

    return {"event_id": str(event_id), "v1": str(v1), "v2": str(v2), "v3": str(v3)}

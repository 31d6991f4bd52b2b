"""Seed script for state base rates.

Run with:
    python scripts/seed_state_rates.py [--create-schema]

Creates or updates the state_rate rows the payroll engine reads.
"""

from __future__ import annotations

import argparse
import asyncio
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from event_payroll.calculators.state_rates import DEFAULT_BASE_RATES
from event_payroll.database import create_schema, dispose_db, get_session, init_db
from event_payroll.models import StateRate

STATE_NAMES = {
    "CA": "California",
    "NY": "New York",
    "AZ": "Arizona",
    "WI": "Wisconsin",
}


async def seed_state_rates(
    session: AsyncSession, rates: dict[str, Decimal]
) -> dict[str, StateRate]:
    """Insert missing state rates and update changed ones."""
    seeded = {}
    for code, rate in sorted(rates.items()):
        result = await session.execute(select(StateRate).where(StateRate.state_code == code))
        row = result.scalar_one_or_none()

        if row is None:
            row = StateRate(state_code=code, state_name=STATE_NAMES.get(code), base_rate=rate)
            session.add(row)
            print(f"Created {code} base rate {rate}")
        elif row.base_rate != rate:
            print(f"Updated {code} base rate {row.base_rate} -> {rate}")
            row.base_rate = rate
        seeded[code] = row

    await session.flush()
    return seeded


async def run(create: bool) -> None:
    """Run seed script."""
    print("Seeding state rates...")

    try:
        if create:
            engine, _ = init_db()
            await create_schema(engine)

        async with get_session() as session:
            await seed_state_rates(session, dict(DEFAULT_BASE_RATES))
    finally:
        await dispose_db()

    print("\nDone! State rates seeded successfully.")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed state base rates")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create missing tables before seeding",
    )
    args = parser.parse_args()
    asyncio.run(run(args.create_schema))


if __name__ == "__main__":
    main()

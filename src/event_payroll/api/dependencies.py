"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from event_payroll.calculators.types import PayrollPolicy
from event_payroll.config import get_settings
from event_payroll.database import init_db
from event_payroll.services.data_source import PayrollDataSource
from event_payroll.services.payment_aggregator import PaymentAggregator
from event_payroll.services.sql_source import SqlPayrollDataSource


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Global session factory."""
    _, factory = init_db()
    return factory


async def get_db_session(
    factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_payroll_policy() -> PayrollPolicy:
    return get_settings().payroll_policy()


def get_data_source(
    factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> PayrollDataSource:
    return SqlPayrollDataSource(factory)


def get_aggregator(
    source: Annotated[PayrollDataSource, Depends(get_data_source)],
    policy: Annotated[PayrollPolicy, Depends(get_payroll_policy)],
) -> PaymentAggregator:
    return PaymentAggregator(source, policy)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Aggregator = Annotated[PaymentAggregator, Depends(get_aggregator)]

"""Integration test fixtures: the FastAPI app over a SQLite database."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from event_payroll.api.app import create_app
from event_payroll.api.dependencies import get_payroll_policy, get_session_factory
from event_payroll.calculators.types import PayrollPolicy


@pytest_asyncio.fixture
async def app(session_factory: async_sessionmaker[AsyncSession]):
    """App wired to the test database with default payroll policy."""
    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_payroll_policy] = lambda: PayrollPolicy()
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets its own engine on ``settings.test_database_url`` (an
  in-memory SQLite database by default) with all tables created.
- The test session runs inside a transaction that rolls back afterwards.
"""

import uuid
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings, to_async_url
from app.database import Base, get_db, make_engine
from app.main import app
from app.models.property import Property

_test_db_url = to_async_url(settings.test_database_url)


# ---------------------------------------------------------------------------
# Per-test engine and transactional session
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """Create an engine with all tables, dropped again after the test."""
    engine = make_engine(_test_db_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: property, guest helpers
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_property(client: AsyncClient) -> dict:
    """Create and return a test property via the API (no tiered rates)."""
    response = await client.post(
        "/api/v1/properties",
        json={
            "name": "Test Apartment",
            "property_type": "apartment",
            "location": "Lekki Phase 1",
            "city": "Lagos",
            "state": "Lagos",
            "max_guests": 4,
            "base_rate": 65000.00,
            "cleaning_fee": 5000.00,
            "amenities": ["wifi", "ac"],
            "description": "A test apartment for automated tests.",
        },
    )
    assert response.status_code == 201, f"Failed to create test property: {response.text}"
    return response.json()


@pytest_asyncio.fixture
async def tiered_property(db_session: AsyncSession) -> Property:
    """Create a property with weekend, weekly, and monthly rates directly in the DB."""
    prop = Property(
        name="Tiered Rates Villa",
        property_type="villa",
        location="Ikoyi",
        city="Lagos",
        state="Lagos",
        max_guests=6,
        base_rate=100,
        weekend_rate=150,
        weekly_rate=600,
        monthly_rate=2500,
        cleaning_fee=20,
    )
    db_session.add(prop)
    await db_session.flush()
    await db_session.refresh(prop)
    return prop


@pytest_asyncio.fixture
async def test_guest(client: AsyncClient) -> dict:
    """Create and return a test guest via the API."""
    unique = uuid.uuid4().hex[:8]
    response = await client.post(
        "/api/v1/guests",
        json={
            "name": "Test Guest",
            "email": f"guest-{unique}@test.com",
            "phone": "+2348030000000",
            "nationality": "Nigerian",
        },
    )
    assert response.status_code == 201, f"Failed to create test guest: {response.text}"
    return response.json()

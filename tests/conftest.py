"""
Shared fixtures.

Environment is pinned before the package is imported so settings,
factories and the database engine pick up the test configuration.
"""

import os

os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["MOCK_FAILURE_RATE"] = "0"
os.environ["CURRENT_BRANCH_ID"] = ""

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from restaurant_portal.database import Base, get_db
from restaurant_portal.main import app
from restaurant_portal.schemas import Ingredient
from restaurant_portal.seed import seed_database
from restaurant_portal.services.availability.mock import InMemoryAvailabilityStore


@pytest.fixture
def lime_and_gin() -> list[Ingredient]:
    return [
        Ingredient(ingredient_name="Lime", description="Fresh limes"),
        Ingredient(ingredient_name="Gin", description="London dry"),
    ]


@pytest.fixture
def memory_store() -> InMemoryAvailabilityStore:
    """Instant, never-failing in-memory store holding {"Gin"} for "downtown"."""
    return InMemoryAvailabilityStore(
        failure_rate=0.0,
        min_latency=0.0,
        max_latency=0.0,
        branches={"downtown": {"Gin"}},
    )


@pytest.fixture
async def api_client():
    """API client over an in-memory SQLite database seeded with sample data."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        await seed_database(session)

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    await engine.dispose()

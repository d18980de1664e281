"""
Car Store Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session for service unit tests
    ├── car_payload:     A valid POST /api/cars body
    ├── test_settings:   Settings pointing at a throwaway SQLite file
    ├── test_app:        App built with test_settings, tables created
    └── test_client:     HTTPX AsyncClient bound to test_app
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone  # noqa: E402
from typing import Any, Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from app.config import Settings  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_car(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = car
            result = await car_service.get_car(mock_db_session, str(car.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def car_payload() -> Dict[str, Any]:
    return {
        "brand": "Toyota",
        "model": "Corolla",
        "year": 2020,
        "price": 20000,
        "quantity": 5,
        "category": "Sedan",
    }


@pytest.fixture
def sample_car_data():
    """Column values for a persisted Car row."""
    now = datetime.now(timezone.utc)
    return {
        "id": uuid4(),
        "brand": "Honda",
        "model": "Civic",
        "year": 2022,
        "price": 24000.0,
        "category": "Sedan",
        "description": None,
        "quantity": 3,
        "in_stock": True,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'carstore.db'}",
        log_level="WARNING",
        debug=False,
    )


@pytest_asyncio.fixture
async def test_app(test_settings):
    """
    A fresh application with its own database.

    ASGITransport does not run the lifespan, so tables are created and the
    engine disposed here instead.
    """
    from app.main import create_app

    app = create_app(test_settings)
    await app.state.database.create_all()
    yield app
    await app.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient talking to test_app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

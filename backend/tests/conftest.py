"""
Naviga8 Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── database: in-memory SQLite Database with tables created
    ├── app: create_app() wired to that database
    ├── test_client: HTTPX AsyncClient talking to the app over ASGI
    ├── seed_routes: helper inserting Route rows with chosen timestamps
    └── public_dir: temporary directory holding the two HTML pages
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["GOOGLE_MAPS_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.config import settings
from app.database import Database
from app.main import create_app
from app.models.route import Route


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_list(mock_db_session):
            mock_db_session.execute.return_value.scalars.return_value.all.return_value = []
            await route_service.list_routes(mock_db_session, "u1")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database():
    """In-memory SQLite store shared by every session of one test."""
    db = Database("sqlite+aiosqlite://")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient configured to talk to the FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def seed_routes(database):
    """
    Insert routes directly, bypassing the API.

    Each item is (user_id, origin, destination); created_at is spaced one
    minute apart in list order, so the last item is the newest.
    """
    async def _seed(items):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        routes = []
        async with database.session() as session:
            for index, (user_id, origin, destination) in enumerate(items):
                stamp = base + timedelta(minutes=index)
                route = Route(
                    user_id=user_id,
                    origin_address=origin,
                    destination_address=destination,
                    created_at=stamp,
                    updated_at=stamp,
                )
                session.add(route)
                routes.append(route)
        return routes

    return _seed


@pytest.fixture
def public_dir(tmp_path, monkeypatch):
    pages = tmp_path / "public"
    pages.mkdir()
    (pages / "map.html").write_text("<html><body>map page</body></html>", encoding="utf-8")
    (pages / "saved-routes.html").write_text(
        "<html><body>saved routes page</body></html>", encoding="utf-8"
    )
    monkeypatch.setattr(settings, "public_dir", str(pages))
    return pages

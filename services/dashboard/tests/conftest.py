"""
Shared test fixtures for the dashboard test suite.

Provides:
- FakeBookingBackend served through httpx.MockTransport (no network)
- async FastAPI test client with app state wired to the fake backend
- an authenticated client carrying a seeded dashboard session
- AsyncMock TripTransitService for sequencer unit tests
"""

import os
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test env vars before any app imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("SENTRY_DSN", "")
os.environ.setdefault("BACKEND_BASE_URL", "http://backend.test")

from services.dashboard.client.http import BackendClient  # noqa: E402
from services.dashboard.client.trip_transits import TripTransitService  # noqa: E402
from services.dashboard.tests.helpers.fake_backend import VALID_TOKEN, FakeBookingBackend  # noqa: E402


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

@pytest.fixture
def backend():
    return FakeBookingBackend()


@pytest.fixture
async def backend_http(backend):
    async with httpx.AsyncClient(transport=backend.transport(), base_url="http://backend.test") as http:
        yield http


@pytest.fixture
def mock_transit_service():
    """TripTransitService with every call mocked. Tests set list_by_trip_id's return value."""
    service = AsyncMock(spec=TripTransitService)
    service.list_by_trip_id = AsyncMock(return_value=[])
    service.create = AsyncMock()
    service.update = AsyncMock(return_value=None)
    service.delete = AsyncMock(return_value=None)
    service.reorder = AsyncMock(return_value=None)
    return service


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------

@pytest.fixture
async def app(backend_http):
    """The dashboard app with fresh state bound to the fake backend."""
    from services.dashboard.config import settings
    from services.dashboard.main import app as _app
    from services.dashboard.sample_data import SampleDataStore
    from services.dashboard.sequencer.registry import SequencerRegistry
    from services.dashboard.sessions import SessionStore

    _app.state.redis = None
    _app.state.settings = settings
    _app.state.backend = BackendClient(backend_http)
    _app.state.sessions = SessionStore(None, ttl_s=3600)
    _app.state.sequencers = SequencerRegistry()
    _app.state.sample_data = SampleDataStore()
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app (no session)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def session_id(app):
    """A dashboard session holding the fake backend's valid token."""
    return await app.state.sessions.create(
        VALID_TOKEN,
        {"id": "u-1", "email": "admin@busgo.com", "name": "Admin User", "role": "ADMIN"},
    )


@pytest.fixture
async def authed_client(app, session_id):
    """Async HTTP client that sends the session as a bearer header."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {session_id}"},
    ) as ac:
        yield ac

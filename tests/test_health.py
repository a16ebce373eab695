"""Tests for the health check endpoint."""
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from salestrack.api.health import get_uptime_seconds, set_app_start_time
from salestrack.core.db import get_db
from salestrack.main import create_app
from salestrack.utils.datetime import now_utc


def _client_with_session(session):
    app = create_app()

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest_asyncio.fixture
async def healthy_client():
    session = AsyncMock()
    async with _client_with_session(session) as ac:
        yield ac


@pytest_asyncio.fixture
async def degraded_client():
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, ConnectionRefusedError())
    async with _client_with_session(session) as ac:
        yield ac


class TestHealthCheckEndpoint:
    """Test suite for /health endpoint."""

    async def test_ok_when_db_reachable(self, healthy_client):
        """Test /health reports ok with a database timing."""
        response = await healthy_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["uptime_seconds"] >= 0
        db_check = data["checks"]["database"]
        assert db_check["status"] == "ok"
        assert isinstance(db_check["response_time_ms"], int)

    async def test_degraded_when_db_down(self, degraded_client):
        """Test a failing database still answers 200, marked degraded."""
        response = await degraded_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["database"]["status"] == "down"
        assert data["checks"]["database"]["error"] == "OperationalError"


class TestUptime:
    def test_uptime_since_start(self):
        set_app_start_time(now_utc() - timedelta(seconds=90))
        assert 90 <= get_uptime_seconds() <= 92

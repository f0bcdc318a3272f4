"""Tests for the health check endpoint."""
import datetime

import httpx
import pytest

from tenancy.core.database import init_db
from tenancy.schemas.health import ConnectionStatus, HealthCheckResponse, TenancyCounts

NOW = datetime.datetime(2024, 1, 15, tzinfo=datetime.timezone.utc)


class TestHealthCheck:
    """Tests for GET /healthcheck"""

    @pytest.mark.asyncio
    async def test_health_check_healthy(self, test_app):
        await init_db()
        transport = httpx.ASGITransport(app=test_app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/healthcheck")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        # Memory pointer backend in tests: Redis is not probed
        assert data["redis"] == "not_used"
        assert data["pointer_backend"] == "memory"
        assert data["counts"] == {"organizations": 0, "memberships": 0}
        datetime.datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))


class TestHealthEvaluation:

    @pytest.mark.parametrize("database,redis,expected", [
        (ConnectionStatus.CONNECTED, ConnectionStatus.NOT_USED, "healthy"),
        (ConnectionStatus.CONNECTED, ConnectionStatus.CONNECTED, "healthy"),
        (ConnectionStatus.CONNECTED, ConnectionStatus.DISCONNECTED, "degraded"),
        (ConnectionStatus.DISCONNECTED, ConnectionStatus.CONNECTED, "unhealthy"),
    ])
    def test_overall_status(self, database, redis, expected):
        response = HealthCheckResponse.evaluate(
            database=database,
            redis=redis,
            pointer_backend="redis",
            counts=TenancyCounts(organizations=1, memberships=2),
            timestamp=NOW,
        )

        assert response.status == expected

    def test_unknown_pointer_backend_is_rejected(self):
        with pytest.raises(ValueError):
            HealthCheckResponse.evaluate(
                database=ConnectionStatus.CONNECTED,
                redis=ConnectionStatus.NOT_USED,
                pointer_backend="cookie",
                counts=None,
                timestamp=NOW,
            )

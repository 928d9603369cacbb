"""Integration tests for the health endpoints served by the real app."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient


class TestHealthEndpoints:

    @pytest.mark.asyncio
    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_readiness_ok(self, client: AsyncClient):
        with patch(
            "notekeep.backend.api.health.check_database",
            AsyncMock(return_value={"status": "healthy", "latency_ms": 1}),
        ):
            response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_readiness_database_down(self, client: AsyncClient):
        with patch(
            "notekeep.backend.api.health.check_database",
            AsyncMock(return_value={"status": "unhealthy", "error": "refused"}),
        ):
            response = await client.get("/health/ready")

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_detailed_reports_storage_and_auth(self, client: AsyncClient):
        with patch(
            "notekeep.backend.api.health.check_database",
            AsyncMock(return_value={"status": "healthy", "latency_ms": 1}),
        ):
            response = await client.get("/health/detailed")

        data = response.json()
        assert response.status_code == 200
        assert data["checks"]["storage"] == {"status": "healthy", "backend": "memory"}
        assert data["application"]["auth_strategy"] == "jwt"

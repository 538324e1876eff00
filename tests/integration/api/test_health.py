"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


class TestHealthEndpoint:
    """Tests for the liveness endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["database"] is None

    @pytest.mark.asyncio
    async def test_health_carries_security_headers(self, client: AsyncClient) -> None:
        """Middleware stack wraps even unauthenticated routes."""
        response = await client.get("/health")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["cache-control"] == "no-store"
        assert "x-request-id" in response.headers


class TestDetailedHealthEndpoint:
    @pytest.mark.asyncio
    async def test_detailed_health_reports_database(self, client: AsyncClient) -> None:
        response = await client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["database"] == "healthy"
        assert data["status"] == "healthy"

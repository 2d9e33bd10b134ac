"""Integration tests for /healthz, /metrics and the root endpoint."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from backend.app.utils.metrics import extraction_failures_total, extraction_latency_ms


class TestHealthEndpoint:
    """Test /health and /healthz endpoints."""

    @pytest.mark.asyncio
    async def test_health_is_always_ok(self, client: httpx.AsyncClient) -> None:
        """Test liveness does not touch dependencies."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_healthz_returns_200_with_real_db(self, client: httpx.AsyncClient) -> None:
        """Test /healthz pings the test database."""
        response = await client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"]["db"] == "ok"
        assert data["components"]["extraction_tasks"] == 0

    @pytest.mark.asyncio
    async def test_healthz_returns_503_when_db_fails(self, client: httpx.AsyncClient) -> None:
        """Test /healthz returns 503 when the DB check fails."""
        with patch(
            "backend.app.api.routes.health.check_db",
            new=AsyncMock(return_value=(False, "connection refused")),
        ):
            response = await client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["db"] == "connection refused"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    @pytest.mark.asyncio
    async def test_metrics_returns_prometheus_format(self, client: httpx.AsyncClient) -> None:
        """Test /metrics returns Prometheus text format."""
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert "# HELP" in response.text

    @pytest.mark.asyncio
    async def test_metrics_includes_extraction_metrics(self, client: httpx.AsyncClient) -> None:
        """Test extraction metrics appear once recorded."""
        extraction_latency_ms.labels(file_type="invoice", outcome="success").observe(100)
        extraction_failures_total.labels(file_type="invoice", reason="format").inc()

        response = await client.get("/metrics")

        assert "extraction_latency_ms" in response.text
        assert "extraction_failures_total" in response.text
        assert "reminders_generated_total" in response.text


class TestRootEndpoint:
    """Test root endpoint."""

    @pytest.mark.asyncio
    async def test_root_returns_api_info(self, client: httpx.AsyncClient) -> None:
        """Test root endpoint returns API information."""
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["message"] == "DocuFlow API"

    @pytest.mark.asyncio
    async def test_cors_allows_any_origin(self, client: httpx.AsyncClient) -> None:
        """Test browsers on other origins can call the API."""
        response = await client.get("/health", headers={"Origin": "http://localhost:8501"})

        assert response.headers["access-control-allow-origin"] == "*"

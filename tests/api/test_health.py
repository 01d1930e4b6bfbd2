"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient

from decision_log.main import app


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    response = await client.get("/health/")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "timestamp" in body
    assert body["data"]["status"] == "healthy"
    assert body["data"]["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_liveness(client: AsyncClient) -> None:
    response = await client.get("/health/live")
    assert response.json()["data"] == {"status": "alive"}


@pytest.mark.asyncio
async def test_readiness(client: AsyncClient) -> None:
    """Readiness reports each dependency."""
    response = await client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "ready"
    assert data["checks"] == {"database": "ok", "decision_service": "ok"}


@pytest.mark.asyncio
async def test_readiness_without_service(client: AsyncClient) -> None:
    service = app.state.decision_service
    app.state.decision_service = None
    try:
        response = await client.get("/health/ready")
    finally:
        app.state.decision_service = service

    assert response.status_code == 503
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "SERVICE_UNAVAILABLE"
    assert body["error"]["details"] == {"database": "ok", "decision_service": "not_configured"}

"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test basic health check endpoint."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert "version" in data
    assert data["environment"] == "test"

    assert data["dependencies"]["database"]["status"] == "healthy"
    assert data["dependencies"]["events"]["type"] == "mock"
    assert data["dependencies"]["storage"]["bucket"] == "music-marketplace-media"


@pytest.mark.asyncio
async def test_version_endpoint(client: AsyncClient):
    """Test version information endpoint."""
    response = await client.get("/version")

    assert response.status_code == 200
    data = response.json()

    assert data["service"] == "music-marketplace-service"
    assert data["api_version"] == "v1"
    assert data["payout"]["artist_revenue_share"] == 0.7
    assert data["payout"]["min_stream_duration_seconds"] == 30
    assert data["payout"]["platform_revenue_share"] == 0.3


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """Test root endpoint."""
    response = await client.get("/")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "running"
    assert "version" in data


@pytest.mark.asyncio
async def test_responses_carry_request_id(client: AsyncClient):
    response = await client.get("/health")

    assert response.headers["X-Request-ID"]

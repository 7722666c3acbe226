"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status and version."""
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert "version" in data
    assert "mongodb" in data


@pytest.mark.asyncio
async def test_health_without_redis(client):
    """Redis isn't initialized in tests; that never fails the check."""
    resp = await client.get("/api/health")
    assert resp.json()["redis"].startswith("unavailable")


@pytest.mark.asyncio
async def test_root_liveness(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Server is running"}

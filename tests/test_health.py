"""Health endpoint tests."""

from httpx import AsyncClient


async def test_health(client: AsyncClient) -> None:
    """GET /health returns 200 with healthy status."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_readiness_memory_backend(client: AsyncClient) -> None:
    """Memory backend without Redis has nothing to check."""
    response = await client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "checks": {"storage": "memory"}}


async def test_readiness_database_not_initialized(client: AsyncClient, monkeypatch) -> None:
    from magilearn.config import get_settings

    monkeypatch.setenv("MAGILEARN_STORAGE_BACKEND", "database")
    get_settings.cache_clear()
    data = (await client.get("/ready")).json()
    assert data["status"] == "degraded"
    assert data["checks"]["database"].startswith("error")


async def test_version(client: AsyncClient) -> None:
    """GET /version returns version and environment."""
    response = await client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": "0.1.0", "environment": "development"}

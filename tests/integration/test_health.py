from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from freight_portal.api.routes import health
from freight_portal.core.config import get_settings


@pytest.mark.asyncio
async def test_health_reports_database(
    async_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(health, "get_session_factory", lambda: session_factory)

    response = await async_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["service"] == get_settings().app_name
    assert payload["status"] == "ok"
    assert payload["environment"] == get_settings().environment
    assert payload["datastores"]["database"]["status"] == "ok"
    assert payload["datastores"]["database"]["latencyMs"] >= 0
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_health_degraded_when_database_fails(
    async_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken_factory():
        raise RuntimeError("connection refused")

    monkeypatch.setattr(health, "get_session_factory", broken_factory)

    response = await async_client.get("/health")

    assert response.json()["status"] == "degraded"
    assert response.json()["datastores"]["database"]["status"] == "error"

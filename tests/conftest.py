from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from freight_portal.api.deps import get_admin_notifier, get_db_session, get_profile_analyzer
from freight_portal.api.main import app
from freight_portal.core.auth import create_access_token
from freight_portal.domain.models import ProfileKind
from freight_portal.infrastructure.db.base import Base
from freight_portal.infrastructure.db.models import ProfileModel
from freight_portal.infrastructure.db.session import build_engine, build_session_factory


class FakeAnalyzer:
    """Records calls; returns canned text or raises when told to."""

    def __init__(self, result: str | None = "Low risk carrier.", error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[tuple[ProfileKind, dict[str, Any]]] = []

    async def analyze(self, kind: ProfileKind, payload: Mapping[str, Any]) -> str | None:
        self.calls.append((kind, dict(payload)))
        if self.error is not None:
            raise self.error
        return self.result


class FakeNotifier:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.sent: list[tuple[ProfileKind, str]] = []

    async def notify_new_registration(self, kind: ProfileKind, profile: ProfileModel) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((kind, profile.id))


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    await engine.dispose()


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
    analyzer: FakeAnalyzer,
    notifier: FakeNotifier,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the app with an in-memory database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_profile_analyzer] = lambda: analyzer
    app.dependency_overrides[get_admin_notifier] = lambda: notifier

    transport = ASGITransport(app=app)  # type: ignore
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture()
def admin_token() -> str:
    """Generate admin JWT token for testing."""
    return create_access_token("admin-user", roles=["admin"], email="admin@lfllogistics.com")


@pytest.fixture()
def carrier_payload() -> dict[str, Any]:
    return {
        "dotNumber": "1234567",
        "mcNumber": "MC123456",
        "authorityDate": "2024-01-01",
        "legalName": "Acme Trucking LLC",
        "dbaName": "Acme",
        "ein": "12-3456789",
        "address": "1 Main St",
        "city": "Charlotte",
        "state": "NC",
        "zip": "28202",
        "contactName": "Ann Driver",
        "contactEmail": "ops@acme.example",
        "contactPhone": "704-555-0100",
        "password": "secret123",
        "equipmentTypes": ["Dry Van", "Reefer"],
        "preferredLanes": ["Southeast"],
    }


@pytest.fixture()
def shipper_payload() -> dict[str, Any]:
    return {
        "legalName": "Big Box Goods Inc",
        "city": "Atlanta",
        "state": "GA",
        "contactName": "Sam Shipper",
        "contactEmail": "freight@bigbox.example",
        "contactPhone": "404-555-0200",
        "password": "secret123",
        "commodityType": "General Freight",
        "monthlyVolume": "50-100 loads",
        "averageValue": "$50,000",
        "preferredEquipment": ["Dry Van"],
    }

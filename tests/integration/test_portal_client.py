"""The wizard's HTTP client against the real app over an in-process transport."""

from __future__ import annotations

from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from freight_portal.api.main import app
from freight_portal.domain.errors import ConflictError, PortalValidationError, UnexpectedError
from freight_portal.domain.models import ProfileKind
from freight_portal.domain.onboarding import OnboardingStep, OnboardingWizard
from freight_portal.libs.portal_client import PortalClient


@pytest.fixture()
def portal(async_client: AsyncClient) -> PortalClient:
    # async_client installs the database overrides on the app
    return PortalClient("http://test", transport=ASGITransport(app=app))  # type: ignore


@pytest.mark.asyncio
async def test_register_and_login(portal: PortalClient, shipper_payload: dict[str, Any]) -> None:
    created = await portal.register(ProfileKind.SHIPPER, shipper_payload)
    login = await portal.login(shipper_payload["contactEmail"], "secret123")

    assert created["success"] is True
    assert login["user"]["profileId"] == created["shipperId"]


@pytest.mark.asyncio
async def test_missing_fields_become_validation_error(portal: PortalClient) -> None:
    with pytest.raises(PortalValidationError) as excinfo:
        await portal.register(ProfileKind.SHIPPER, {"legalName": "Only Name"})

    assert excinfo.value.error == "Missing required fields"
    assert excinfo.value.missing_fields == [
        "contactEmail",
        "contactPhone",
        "password",
        "city",
        "state",
    ]


@pytest.mark.asyncio
async def test_duplicate_becomes_conflict(
    portal: PortalClient, carrier_payload: dict[str, Any]
) -> None:
    await portal.register(ProfileKind.CARRIER, carrier_payload)

    with pytest.raises(ConflictError):
        await portal.register(ProfileKind.CARRIER, carrier_payload)


@pytest.mark.asyncio
async def test_wizard_submits_over_http(portal: PortalClient, carrier_payload: dict[str, Any]) -> None:
    wizard = OnboardingWizard.for_carrier()
    wizard.update(**carrier_payload)
    for _ in range(4):
        wizard.next()

    assert await wizard.submit(portal.registrar(ProfileKind.CARRIER)) is True
    assert wizard.step is OnboardingStep.COMPLETE
    assert wizard.result["carrierId"]


@pytest.mark.asyncio
async def test_unreachable_portal() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = PortalClient("http://portal.invalid", transport=httpx.MockTransport(refuse))

    with pytest.raises(UnexpectedError):
        await client.login("a@b.co", "secret123")

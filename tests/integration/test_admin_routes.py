"""Integration tests for the admin dashboard endpoints."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import status
from httpx import AsyncClient
from freight_portal.core.auth import Role

from tests.utils import PDF_BYTES, auth_headers, bearer, data_url


async def _onboard(client: AsyncClient, kind: str, payload: dict[str, Any]) -> str:
    response = await client.post(f"/{kind}/onboard", json=payload)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()[f"{kind}Id"]


async def _login(client: AsyncClient, email: str, password: str = "secret123") -> dict[str, Any]:
    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == status.HTTP_200_OK
    return response.json()


class TestAccess:
    @pytest.mark.asyncio
    async def test_requires_token(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/admin/data")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_rejects_non_admin(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/admin/data", headers=auth_headers(role=Role.CARRIER))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "Forbidden", "message": "Insufficient role privileges"}


class TestDashboard:
    @pytest.mark.asyncio
    async def test_lists_profiles_with_stats(
        self,
        async_client: AsyncClient,
        admin_token: str,
        carrier_payload: dict[str, Any],
        shipper_payload: dict[str, Any],
    ) -> None:
        carrier_payload["documents"] = {"w9": data_url()}
        carrier_id = await _onboard(async_client, "carrier", carrier_payload)
        await _onboard(async_client, "shipper", shipper_payload)

        response = await async_client.get("/admin/data", headers=bearer(admin_token))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["stats"]["totalCarriers"] == 1
        assert data["stats"]["pendingShippers"] == 1
        carrier = data["carriers"][0]
        assert carrier["id"] == carrier_id
        assert carrier["documents"] == {"w9": True, "coi": False, "mcAuthority": False}
        assert carrier["documentCompleteness"]["uploaded"] == 1
        assert "password" not in carrier

    @pytest.mark.asyncio
    async def test_approval_reflected_immediately(
        self,
        async_client: AsyncClient,
        admin_token: str,
        carrier_payload: dict[str, Any],
    ) -> None:
        carrier_id = await _onboard(async_client, "carrier", carrier_payload)

        response = await async_client.patch(
            f"/admin/carrier/{carrier_id}",
            json={"status": "approved"},
            headers=bearer(admin_token),
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "id": carrier_id,
            "type": "carrier",
            "status": "approved",
        }

        data = (await async_client.get("/admin/data", headers=bearer(admin_token))).json()
        assert data["stats"]["approvedCarriers"] == 1
        assert data["stats"]["pendingCarriers"] == 0
        assert data["carriers"][0]["status"] == "approved"

    @pytest.mark.asyncio
    async def test_status_visible_to_owner(
        self,
        async_client: AsyncClient,
        admin_token: str,
        shipper_payload: dict[str, Any],
    ) -> None:
        shipper_id = await _onboard(async_client, "shipper", shipper_payload)
        login = await _login(async_client, shipper_payload["contactEmail"])
        owner = bearer(login["token"]["access_token"])

        await async_client.patch(
            f"/admin/shipper/{shipper_id}",
            json={"status": "suspended"},
            headers=bearer(admin_token),
        )
        response = await async_client.get("/shipper/profile", headers=owner)

        assert response.json()["shipper"]["status"] == "suspended"

    @pytest.mark.asyncio
    async def test_invalid_status(
        self, async_client: AsyncClient, admin_token: str, shipper_payload: dict[str, Any]
    ) -> None:
        shipper_id = await _onboard(async_client, "shipper", shipper_payload)

        response = await async_client.patch(
            f"/admin/shipper/{shipper_id}", json={"status": "archived"}, headers=bearer(admin_token)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid status"

    @pytest.mark.asyncio
    async def test_unknown_profile(self, async_client: AsyncClient, admin_token: str) -> None:
        response = await async_client.patch(
            "/admin/carrier/does-not-exist", json={"status": "approved"}, headers=bearer(admin_token)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_removes_login(
        self, async_client: AsyncClient, admin_token: str, carrier_payload: dict[str, Any]
    ) -> None:
        carrier_id = await _onboard(async_client, "carrier", carrier_payload)

        response = await async_client.delete(
            f"/admin/carrier/{carrier_id}", headers=bearer(admin_token)
        )
        assert response.status_code == status.HTTP_200_OK

        login = await async_client.post(
            "/auth/login",
            json={"email": carrier_payload["contactEmail"], "password": "secret123"},
        )
        assert login.status_code == status.HTTP_401_UNAUTHORIZED


class TestDocumentReview:
    @pytest.mark.asyncio
    async def test_checklist_and_download(
        self, async_client: AsyncClient, admin_token: str, carrier_payload: dict[str, Any]
    ) -> None:
        carrier_payload["documents"] = {"mcAuthority": data_url()}
        carrier_id = await _onboard(async_client, "carrier", carrier_payload)

        review = await async_client.get(
            f"/admin/carrier/{carrier_id}/documents", headers=bearer(admin_token)
        )
        assert review.status_code == status.HTTP_200_OK
        slots = {slot["key"]: slot for slot in review.json()["slots"]}
        assert slots["w9"]["present"] is False
        assert slots["mcAuthority"]["link"] == (
            f"/admin/carrier/{carrier_id}/documents/mcAuthority"
        )

        download = await async_client.get(slots["mcAuthority"]["link"], headers=bearer(admin_token))
        assert download.status_code == status.HTTP_200_OK
        assert download.headers["content-type"] == "application/pdf"
        assert download.content == PDF_BYTES

    @pytest.mark.asyncio
    async def test_empty_slot_download_is_404(
        self, async_client: AsyncClient, admin_token: str, carrier_payload: dict[str, Any]
    ) -> None:
        carrier_id = await _onboard(async_client, "carrier", carrier_payload)

        response = await async_client.get(
            f"/admin/carrier/{carrier_id}/documents/w9", headers=bearer(admin_token)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestOrphans:
    @pytest.mark.asyncio
    async def test_repair_is_idempotent(self, async_client: AsyncClient, admin_token: str) -> None:
        listed = await async_client.get("/admin/orphans", headers=bearer(admin_token))
        assert listed.json() == {"orphans": []}

        first = await async_client.post("/admin/orphans/repair", headers=bearer(admin_token))
        second = await async_client.post("/admin/orphans/repair", headers=bearer(admin_token))

        assert first.json() == {"success": True, "removed": 0, "relinked": 0}
        assert second.json() == {"success": True, "removed": 0, "relinked": 0}

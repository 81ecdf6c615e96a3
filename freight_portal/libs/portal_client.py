"""
HTTP client for the portal API, used by the onboarding wizard to submit registrations.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from freight_portal.domain.errors import UnexpectedError, error_from_response
from freight_portal.domain.models import ProfileKind

logger = structlog.get_logger(__name__)


class PortalClient:
    """Async client for the onboarding and auth endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout_seconds
        self._transport = transport

    async def register(self, kind: ProfileKind, payload: dict[str, Any]) -> dict[str, Any]:
        """POST the onboarding payload; raises a ``PortalError`` on rejection."""
        return await self._post_json(f"/{kind.value}/onboard", payload)

    async def login(self, email: str, password: str) -> dict[str, Any]:
        return await self._post_json("/auth/login", {"email": email, "password": password})

    def registrar(self, kind: ProfileKind):
        """Bind ``kind`` so the result can be handed to ``OnboardingWizard.submit``."""

        async def _register(payload: dict[str, Any]) -> dict[str, Any]:
            return await self.register(kind, payload)

        return _register

    async def _post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            await logger.awarning("portal_request_failed", path=path, error=str(exc))
            raise UnexpectedError(
                "Could not reach the portal. Please try again later.",
                error="Request failed",
            ) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            return body if isinstance(body, dict) else {}

        raise error_from_response(response.status_code, body if isinstance(body, dict) else None)

"""
Resend API client for admin notification emails.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog
from freight_portal.core.config import get_settings

logger = structlog.get_logger(__name__)


class ResendClientError(Exception):
    """Email could not be handed to Resend."""


class ResendAPIError(ResendClientError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class ResendEmailResponse:
    id: str


class ResendClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_seconds: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key or settings.resend_api_key
        self.base_url = (base_url or settings.resend_base_url).rstrip("/")
        self.timeout = timeout_seconds if timeout_seconds is not None else settings.resend_timeout_seconds
        self._transport = transport

    async def send_email(
        self,
        *,
        from_email: str,
        to_emails: list[str],
        subject: str,
        html: str,
        text: str,
    ) -> ResendEmailResponse:
        if not self.api_key:
            raise ResendClientError("RESEND_API_KEY not configured")

        message = {"from": from_email, "to": to_emails, "subject": subject, "html": html, "text": text}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    "/emails",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=message,
                )
        except httpx.HTTPError as exc:
            raise ResendClientError(f"Resend request failed: {exc}") from exc

        if not response.is_success:
            await logger.awarning("resend_rejected", status_code=response.status_code, subject=subject)
            raise ResendAPIError(
                f"Resend error {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            email_id = response.json().get("id")
        except ValueError as exc:
            raise ResendAPIError("Resend response was not valid JSON", response.status_code) from exc
        if not email_id:
            raise ResendAPIError("Resend response missing email id", response.status_code)

        return ResendEmailResponse(id=email_id)

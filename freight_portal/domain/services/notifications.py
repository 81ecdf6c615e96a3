"""
Admin notifications for new onboarding applications.
"""

from __future__ import annotations

from html import escape
from typing import Protocol

import structlog
from freight_portal.core.config import get_settings
from freight_portal.domain.models import ProfileKind
from freight_portal.infrastructure.db.models import ProfileModel
from freight_portal.libs.resend_client import ResendClient, ResendClientError

logger = structlog.get_logger(__name__)


class AdminNotificationError(Exception):
    """Raised when the admin notification could not be delivered."""


class AdminNotifier(Protocol):
    async def notify_new_registration(self, kind: ProfileKind, profile: ProfileModel) -> None:
        ...


class EmailAdminNotifier:
    """Emails the operations inbox when a carrier or shipper applies."""

    def __init__(self, client: ResendClient | None = None) -> None:
        self.client = client or ResendClient()
        self.settings = get_settings()

    async def notify_new_registration(self, kind: ProfileKind, profile: ProfileModel) -> None:
        to_email = self.settings.admin_notification_email
        from_email = self.settings.resend_from_email
        if not to_email or not from_email:
            await logger.ainfo(
                "admin_notification_skipped",
                reason="recipient_or_sender_not_configured",
                profile_id=profile.id,
            )
            return

        subject = f"New {kind.value} application: {profile.legal_name}"
        text_body, html_body = build_notification_content(kind, profile)

        try:
            response = await self.client.send_email(
                from_email=from_email,
                to_emails=[to_email],
                subject=subject,
                html=html_body,
                text=text_body,
            )
        except ResendClientError as exc:
            raise AdminNotificationError("Failed to send admin notification") from exc

        await logger.ainfo(
            "admin_notification_sent",
            kind=kind.value,
            profile_id=profile.id,
            resend_id=response.id,
        )


def build_notification_content(kind: ProfileKind, profile: ProfileModel) -> tuple[str, str]:
    rows: list[tuple[str, str]] = [
        ("Company", profile.legal_name),
        ("Contact", profile.contact_name or "-"),
        ("Email", profile.contact_email),
        ("Phone", profile.contact_phone),
        ("Location", f"{profile.city}, {profile.state}"),
    ]
    if kind is ProfileKind.CARRIER:
        rows.insert(1, ("DOT / MC", f"{profile.dot_number} / {profile.mc_number}"))

    text_lines = [f"A new {kind.value} application is pending review.", ""]
    text_lines.extend(f"{label}: {value}" for label, value in rows)
    text_lines.extend(["", f"Profile id: {profile.id}"])

    items_html = "".join(
        f"<li><strong>{escape(label)}:</strong> {escape(str(value))}</li>" for label, value in rows
    )
    html_body = (
        f"<p>A new {escape(kind.value)} application is pending review.</p>"
        f"<ul>{items_html}</ul>"
        f"<p>Profile id: {escape(profile.id)}</p>"
    )
    return "\n".join(text_lines), html_body

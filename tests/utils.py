from __future__ import annotations

import base64

from freight_portal.api.deps import issue_smoke_token
from freight_portal.core.auth import Role

PDF_BYTES = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF"


def auth_headers(
    user_id: str = "carrier-1",
    role: Role = Role.CARRIER,
    *,
    profile_id: str | None = None,
    email: str | None = None,
) -> dict[str, str]:
    token = issue_smoke_token(user_id, role=role, email=email, profile_id=profile_id)
    return {"Authorization": f"Bearer {token}"}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def data_url(content: bytes = PDF_BYTES, media_type: str = "application/pdf") -> str:
    return f"data:{media_type};base64,{base64.b64encode(content).decode('ascii')}"

"""
Signed bearer tokens for portal sessions.

Carrier and shipper tokens carry the id of the profile they own, so the
self-service routes can scope every read and write without a user lookup.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt
from freight_portal.core.config import get_settings

_REQUIRED_CLAIMS = ["sub", "roles", "exp"]


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


class Role(str, Enum):
    ADMIN = "admin"
    CARRIER = "carrier"
    SHIPPER = "shipper"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {role.value for role in cls}


@dataclass(slots=True, frozen=True)
class TokenClaims:
    subject: str
    roles: list[str] = field(default_factory=list)
    email: str | None = None
    profile_id: str | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TokenClaims:
        roles = list(payload.get("roles") or [])
        unknown = [role for role in roles if not Role.contains(role)]
        if unknown:
            raise TokenError(f"Unsupported role: {unknown[0]}")

        exp = payload.get("exp")
        return cls(
            subject=str(payload.get("sub") or ""),
            roles=roles,
            email=payload.get("email"),
            profile_id=payload.get("profile_id"),
            expires_at=datetime.fromtimestamp(exp, UTC) if exp is not None else None,
        )

    def to_payload(self, *, issued_at: datetime, issuer: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "sub": self.subject,
            "roles": self.roles,
            "iat": int(issued_at.timestamp()),
            "iss": issuer,
        }
        if self.expires_at is not None:
            payload["exp"] = int(self.expires_at.timestamp())
        # Optional claims are omitted rather than sent as null.
        if self.email:
            payload["email"] = self.email
        if self.profile_id:
            payload["profile_id"] = self.profile_id
        return payload


def create_access_token(
    subject: str,
    *,
    roles: Sequence[str],
    email: str | None = None,
    profile_id: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token for ``subject`` with the configured secret and TTL."""
    settings = get_settings()

    rejected = sorted(set(roles) - set(settings.allowed_roles))
    if rejected:
        raise TokenError(f"Unsupported role(s): {', '.join(rejected)}")

    issued_at = datetime.now(UTC)
    ttl = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)
    claims = TokenClaims(
        subject=subject,
        roles=list(roles),
        email=email,
        profile_id=profile_id,
        expires_at=issued_at + ttl,
    )
    payload = claims.to_payload(issued_at=issued_at, issuer=settings.app_name)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """Verify signature and expiry, then return the typed claims."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token expired") from exc
    except jwt.PyJWTError as exc:
        raise TokenError("Invalid token") from exc

    return TokenClaims.from_payload(payload)

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from fastapi.security import HTTPAuthorizationCredentials
from freight_portal.api.deps import get_current_user, require_roles
from freight_portal.core.auth import (
    Role,
    TokenClaims,
    TokenError,
    create_access_token,
    decode_access_token,
)
from freight_portal.domain import User
from freight_portal.domain.errors import AuthError


def test_token_round_trip_carries_profile_id() -> None:
    token = create_access_token("user-1", roles=["shipper"], email="a@b.co", profile_id="s-1")

    claims = decode_access_token(token)

    assert claims.subject == "user-1"
    assert claims.roles == ["shipper"]
    assert claims.email == "a@b.co"
    assert claims.profile_id == "s-1"
    assert claims.expires_at is not None


def test_unknown_role_rejected() -> None:
    with pytest.raises(TokenError):
        create_access_token("user-1", roles=["student"])


def test_expired_token_rejected() -> None:
    token = create_access_token("user-1", roles=["admin"], expires_delta=timedelta(seconds=-5))

    with pytest.raises(TokenError, match="expired"):
        decode_access_token(token)


def test_token_signed_with_other_secret_rejected() -> None:
    token = jwt.encode({"sub": "user-1", "roles": ["admin"], "exp": 9999999999}, "other-secret")

    with pytest.raises(TokenError, match="Invalid token"):
        decode_access_token(token)


def test_claims_with_unknown_role_rejected() -> None:
    with pytest.raises(TokenError):
        TokenClaims.from_payload({"sub": "u", "roles": ["student"], "exp": 0})


def test_role_enum_contains() -> None:
    assert Role.contains("carrier")
    assert not Role.contains("student")


@pytest.mark.asyncio
async def test_get_current_user_requires_token() -> None:
    with pytest.raises(AuthError) as excinfo:
        await get_current_user(None)

    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user_builds_user() -> None:
    token = create_access_token("user-9", roles=["carrier"], profile_id="c-9")
    credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

    user = await get_current_user(credentials)

    assert user.user_id == "user-9"
    assert user.role == "carrier"
    assert user.profile_id == "c-9"


def test_require_roles_forbids_other_roles() -> None:
    dependency = require_roles(["admin"])

    with pytest.raises(AuthError) as excinfo:
        dependency(User(user_id="u", roles=["carrier"]))

    assert excinfo.value.status_code == 403
    assert excinfo.value.to_dict() == {
        "error": "Forbidden",
        "message": "Insufficient role privileges",
    }


def test_require_roles_rejects_unknown_role_names() -> None:
    with pytest.raises(ValueError):
        require_roles(["student"])


def test_require_roles_admits_any_listed_role() -> None:
    dependency = require_roles([Role.CARRIER, Role.SHIPPER])
    user = User(user_id="u", roles=["shipper"], profile_id="s-1")

    assert dependency(user) is user

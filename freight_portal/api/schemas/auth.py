"""Wire models for ``/auth``.

Account fields follow the camelCase convention of the rest of the API. The
token block keeps the OAuth2 field names clients already expect.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field
from freight_portal.api.schemas.common import CamelModel

DASHBOARD_PATHS = {
    "admin": "/admin",
    "carrier": "/carrier-dashboard",
    "shipper": "/shipper-dashboard",
}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Seconds until the token expires")


class AccountResponse(CamelModel):
    id: str
    email: str
    role: str = Field(..., description="admin, carrier or shipper")
    status: str
    profile_id: str | None = Field(None, description="Owned carrier or shipper profile")
    created_at: datetime
    last_login_at: datetime | None = None

    @property
    def dashboard_path(self) -> str:
        return DASHBOARD_PATHS.get(self.role, "/")


class LoginResponse(CamelModel):
    message: str = "Login successful"
    user: AccountResponse
    token: TokenResponse
    dashboard_path: str = Field(..., description="Where the portal sends this role after sign-in")


class MeResponse(CamelModel):
    user: AccountResponse

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from freight_portal.api.deps import get_current_user, get_db_session
from freight_portal.api.schemas.auth import (
    AccountResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    TokenResponse,
)
from freight_portal.api.schemas.common import ErrorResponse
from freight_portal.domain import User
from freight_portal.domain.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Unknown email or wrong password"},
        403: {"model": ErrorResponse, "description": "Account suspended"},
    },
    summary="Sign in",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    """Exchange email and password for a bearer token.

    Pending carriers and shippers may sign in to follow their review.
    """
    result = await AuthService(session).login(email=payload.email, password=payload.password)
    account = AccountResponse(**result["user"])
    return LoginResponse(
        user=account,
        token=TokenResponse(**result["token"]),
        dashboard_path=account.dashboard_path,
    )


@router.get("/me", response_model=MeResponse, summary="Current account")
async def get_me(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    account = await AuthService(session).get_user_by_id(user.user_id)
    return MeResponse(user=AccountResponse(**account))

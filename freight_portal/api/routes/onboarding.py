"""Public onboarding endpoints: one submission creates a pending profile and its account."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from freight_portal.api.deps import get_admin_notifier, get_db_session, get_profile_analyzer
from freight_portal.api.schemas.common import ErrorResponse
from freight_portal.api.schemas.onboarding import (
    CarrierOnboardRequest,
    CarrierOnboardResponse,
    ShipperOnboardRequest,
    ShipperOnboardResponse,
)
from freight_portal.domain.models import ProfileKind
from freight_portal.domain.services.notifications import AdminNotifier
from freight_portal.domain.services.profile_analysis import ProfileAnalyzer
from freight_portal.domain.services.registration import RegistrationService

logger = structlog.get_logger()
router = APIRouter(tags=["Onboarding"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing fields, bad email or weak password"},
    409: {"model": ErrorResponse, "description": "Email already registered"},
    500: {"model": ErrorResponse, "description": "Registration failed"},
}


@router.post(
    "/carrier/onboard",
    response_model=CarrierOnboardResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
    summary="Register a carrier",
)
async def onboard_carrier(
    payload: CarrierOnboardRequest,
    session: AsyncSession = Depends(get_db_session),
    analyzer: ProfileAnalyzer = Depends(get_profile_analyzer),
    notifier: AdminNotifier = Depends(get_admin_notifier),
) -> CarrierOnboardResponse:
    service = RegistrationService(session, analyzer=analyzer, notifier=notifier)
    result = await service.register(ProfileKind.CARRIER, payload.model_dump(by_alias=True))
    await logger.ainfo("carrier_registration_success", carrier_id=result.profile_id)
    return CarrierOnboardResponse(message=result.message, carrier_id=result.profile_id)


@router.post(
    "/shipper/onboard",
    response_model=ShipperOnboardResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
    summary="Register a shipper",
)
async def onboard_shipper(
    payload: ShipperOnboardRequest,
    session: AsyncSession = Depends(get_db_session),
    analyzer: ProfileAnalyzer = Depends(get_profile_analyzer),
    notifier: AdminNotifier = Depends(get_admin_notifier),
) -> ShipperOnboardResponse:
    service = RegistrationService(session, analyzer=analyzer, notifier=notifier)
    result = await service.register(ProfileKind.SHIPPER, payload.model_dump(by_alias=True))
    await logger.ainfo("shipper_registration_success", shipper_id=result.profile_id)
    return ShipperOnboardResponse(message=result.message, shipper_id=result.profile_id)

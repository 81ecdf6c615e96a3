"""Self-service profile endpoints for signed-in carriers and shippers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from freight_portal.api.deps import get_current_user, get_db_session
from freight_portal.api.routes.uploads import read_upload
from freight_portal.api.schemas.common import ErrorResponse
from freight_portal.api.schemas.profiles import (
    CarrierProfileUpdate,
    ProfileEnvelope,
    ShipperProfileUpdate,
    to_profile_response,
)
from freight_portal.api.schemas.uploads import SlotUploadResponse
from freight_portal.domain import User, document_completeness
from freight_portal.domain.models import ProfileKind
from freight_portal.domain.services.profile_service import ProfileService
from freight_portal.infrastructure.db.models import ProfileModel

router = APIRouter(tags=["Profiles"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse, "description": "Profile belongs to another role"},
    404: {"model": ErrorResponse},
}


def _envelope(kind: ProfileKind, profile: ProfileModel) -> ProfileEnvelope:
    return ProfileEnvelope(**{kind.value: to_profile_response(profile)})


@router.get(
    "/carrier/profile",
    response_model=ProfileEnvelope,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def get_carrier_profile(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> ProfileEnvelope:
    profile = await ProfileService(session).get_own(ProfileKind.CARRIER, user)
    return _envelope(ProfileKind.CARRIER, profile)


@router.patch(
    "/carrier/profile",
    response_model=ProfileEnvelope,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def update_carrier_profile(
    payload: CarrierProfileUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> ProfileEnvelope:
    profile = await ProfileService(session).update_own(
        ProfileKind.CARRIER, user, payload.model_dump(exclude_unset=True)
    )
    return _envelope(ProfileKind.CARRIER, profile)


@router.get(
    "/shipper/profile",
    response_model=ProfileEnvelope,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def get_shipper_profile(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> ProfileEnvelope:
    profile = await ProfileService(session).get_own(ProfileKind.SHIPPER, user)
    return _envelope(ProfileKind.SHIPPER, profile)


@router.patch(
    "/shipper/profile",
    response_model=ProfileEnvelope,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def update_shipper_profile(
    payload: ShipperProfileUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> ProfileEnvelope:
    profile = await ProfileService(session).update_own(
        ProfileKind.SHIPPER, user, payload.model_dump(exclude_unset=True)
    )
    return _envelope(ProfileKind.SHIPPER, profile)


@router.put(
    "/{kind}/profile/documents/{slot}",
    response_model=SlotUploadResponse,
    responses=_ERROR_RESPONSES,
    summary="Upload a document into one profile slot",
)
async def put_profile_document(
    kind: ProfileKind,
    slot: str,
    file: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> SlotUploadResponse:
    service = ProfileService(session)
    # Ownership is checked before the body is read.
    await service.get_own(kind, user)
    document = await read_upload(file)
    profile = await service.store_document(kind, user, slot, document)

    return SlotUploadResponse(
        slot=slot,
        file_name=document.file_name,
        file_type=document.file_type,
        size=document.size,
        document_completeness=document_completeness(kind, profile.documents).as_dict(),
    )

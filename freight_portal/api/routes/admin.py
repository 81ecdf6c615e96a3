"""Admin dashboard endpoints: review, approve, suspend and clean up registrations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from freight_portal.api.deps import get_db_session, require_roles
from freight_portal.api.schemas.admin import (
    AdminDataResponse,
    DeleteResponse,
    DocumentReviewResponse,
    DocumentSlotOut,
    OrphanOut,
    OrphansResponse,
    RepairResponse,
    ReviewStatsOut,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from freight_portal.api.schemas.common import ErrorResponse
from freight_portal.api.schemas.profiles import to_list_item
from freight_portal.core.auth import Role
from freight_portal.domain import User
from freight_portal.domain.models import ProfileKind
from freight_portal.domain.services.admin_review import AdminReviewService

router = APIRouter(prefix="/admin", tags=["Admin"])

require_admin = require_roles([Role.ADMIN])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Profile not found"}}


@router.get("/data", response_model=AdminDataResponse, summary="Dashboard data")
async def get_admin_data(
    session: AsyncSession = Depends(get_db_session),
    _admin: User = Depends(require_admin),
) -> AdminDataResponse:
    overview = await AdminReviewService(session).overview()
    return AdminDataResponse(
        stats=ReviewStatsOut.model_validate(overview.stats.as_dict()),
        carriers=[to_list_item(profile) for profile in overview.carriers],
        shippers=[to_list_item(profile) for profile in overview.shippers],
    )


@router.get("/orphans", response_model=OrphansResponse, summary="Profiles with no live account")
async def list_orphans(
    session: AsyncSession = Depends(get_db_session),
    _admin: User = Depends(require_admin),
) -> OrphansResponse:
    orphans = await AdminReviewService(session).find_orphans()
    return OrphansResponse(
        orphans=[
            OrphanOut(
                type=orphan.kind.value,
                profile_id=orphan.profile_id,
                legal_name=orphan.legal_name,
                contact_email=orphan.contact_email,
                user_id=orphan.user_id,
            )
            for orphan in orphans
        ]
    )


@router.post(
    "/orphans/repair",
    response_model=RepairResponse,
    summary="Re-link or delete orphaned profiles",
)
async def repair_orphans(
    session: AsyncSession = Depends(get_db_session),
    admin: User = Depends(require_admin),
) -> RepairResponse:
    result = await AdminReviewService(session).repair_orphans(admin_id=admin.user_id)
    return RepairResponse(removed=result.removed, relinked=result.relinked)


@router.patch(
    "/{kind}/{profile_id}",
    response_model=StatusUpdateResponse,
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse, "description": "Invalid status"}},
    summary="Change review status",
)
async def update_status(
    kind: ProfileKind,
    profile_id: str,
    payload: StatusUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    admin: User = Depends(require_admin),
) -> StatusUpdateResponse:
    profile = await AdminReviewService(session).set_status(
        kind, profile_id, payload.status, admin_id=admin.user_id
    )
    return StatusUpdateResponse(id=profile.id, type=kind.value, status=profile.status)


@router.delete(
    "/{kind}/{profile_id}",
    response_model=DeleteResponse,
    responses=_NOT_FOUND,
    summary="Delete a profile and its account",
)
async def delete_profile(
    kind: ProfileKind,
    profile_id: str,
    session: AsyncSession = Depends(get_db_session),
    admin: User = Depends(require_admin),
) -> DeleteResponse:
    await AdminReviewService(session).delete(kind, profile_id, admin_id=admin.user_id)
    return DeleteResponse(id=profile_id, type=kind.value)


@router.get(
    "/{kind}/{profile_id}/documents",
    response_model=DocumentReviewResponse,
    responses=_NOT_FOUND,
    summary="Document checklist for one profile",
)
async def review_documents(
    kind: ProfileKind,
    profile_id: str,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    _admin: User = Depends(require_admin),
) -> DocumentReviewResponse:
    review = await AdminReviewService(session).review_documents(
        kind, profile_id, link_base=request.url.path
    )
    return DocumentReviewResponse(
        type=review.kind.value,
        profile_id=review.profile_id,
        company_name=review.company_name,
        slots=[
            DocumentSlotOut(key=slot.key, label=slot.label, present=slot.present, link=slot.link)
            for slot in review.slots
        ],
        completeness=review.completeness.as_dict(),
    )


@router.get(
    "/{kind}/{profile_id}/documents/{slot}",
    response_class=Response,
    responses={404: {"model": ErrorResponse, "description": "Slot empty or unknown"}},
    summary="Download one stored document",
)
async def download_document(
    kind: ProfileKind,
    profile_id: str,
    slot: str,
    session: AsyncSession = Depends(get_db_session),
    _admin: User = Depends(require_admin),
) -> Response:
    media_type, content = await AdminReviewService(session).fetch_document(kind, profile_id, slot)
    filename = f"{profile_id}-{slot}.{media_type.rsplit('/', 1)[-1]}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )

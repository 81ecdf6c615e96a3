"""Pydantic schemas for the admin review endpoints."""

from __future__ import annotations

from pydantic import Field
from freight_portal.infrastructure.db.models import ProfileStatus

from .common import CamelModel
from .profiles import CarrierListItem, DocumentCompletenessOut, ShipperListItem


class ReviewStatsOut(CamelModel):
    total_carriers: int
    pending_carriers: int
    approved_carriers: int
    total_shippers: int
    pending_shippers: int
    approved_shippers: int


class AdminDataResponse(CamelModel):
    stats: ReviewStatsOut
    carriers: list[CarrierListItem]
    shippers: list[ShipperListItem]


class StatusUpdateRequest(CamelModel):
    status: str = Field(..., description="pending | approved | suspended")


class StatusUpdateResponse(CamelModel):
    success: bool = True
    id: str
    type: str
    status: ProfileStatus


class DeleteResponse(CamelModel):
    success: bool = True
    id: str
    type: str


class DocumentSlotOut(CamelModel):
    key: str
    label: str
    present: bool
    link: str | None = None


class DocumentReviewResponse(CamelModel):
    type: str
    profile_id: str
    company_name: str
    slots: list[DocumentSlotOut]
    completeness: DocumentCompletenessOut


class OrphanOut(CamelModel):
    type: str
    profile_id: str
    legal_name: str
    contact_email: str
    user_id: str | None = None


class OrphansResponse(CamelModel):
    orphans: list[OrphanOut]


class RepairResponse(CamelModel):
    success: bool = True
    removed: int
    relinked: int = 0

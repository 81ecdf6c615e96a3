"""Pydantic schemas for carrier/shipper profiles (self-service and admin views)."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict
from freight_portal.domain.models import ProfileKind, document_completeness
from freight_portal.infrastructure.db.models import CarrierModel, ProfileModel, ProfileStatus

from .common import CamelModel


class DocumentCompletenessOut(CamelModel):
    uploaded: int
    total: int
    ratio: float


class _ProfileBase(CamelModel):
    id: str
    user_id: str | None = None
    legal_name: str
    dba_name: str = ""
    ein: str = ""
    address: str = ""
    city: str
    state: str
    zip: str = ""
    contact_name: str = ""
    contact_email: str
    contact_phone: str
    status: ProfileStatus
    onboarding_completed: bool
    ai_analysis: str | None = None
    created_at: datetime
    updated_at: datetime
    document_completeness: DocumentCompletenessOut


class _CarrierFields(CamelModel):
    dot_number: str
    mc_number: str
    authority_date: str | None = None
    equipment_types: list[str] = []
    preferred_lanes: list[str] = []


class _ShipperFields(CamelModel):
    commodity_type: str = ""
    monthly_volume: str = ""
    average_value: str = ""
    preferred_equipment: list[str] = []


class CarrierProfileResponse(_ProfileBase, _CarrierFields):
    documents: dict[str, str] = {}


class ShipperProfileResponse(_ProfileBase, _ShipperFields):
    documents: dict[str, str] = {}


class CarrierListItem(_ProfileBase, _CarrierFields):
    """Admin list entry: slot fill state instead of document bodies."""

    documents: dict[str, bool] = {}


class ShipperListItem(_ProfileBase, _ShipperFields):
    documents: dict[str, bool] = {}


class ProfileEnvelope(CamelModel):
    carrier: CarrierProfileResponse | None = None
    shipper: ShipperProfileResponse | None = None


class _ProfileUpdate(CamelModel):
    """Shallow-merge update. Undeclared keys (status, dotNumber, ...) are ignored."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    legal_name: str | None = None
    dba_name: str | None = None
    ein: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    contact_name: str | None = None
    contact_phone: str | None = None
    documents: dict[str, str | None] | None = None


class CarrierProfileUpdate(_ProfileUpdate):
    authority_date: str | None = None
    equipment_types: list[str] | None = None
    preferred_lanes: list[str] | None = None


class ShipperProfileUpdate(_ProfileUpdate):
    commodity_type: str | None = None
    monthly_volume: str | None = None
    average_value: str | None = None
    preferred_equipment: list[str] | None = None


def kind_of(profile: ProfileModel) -> ProfileKind:
    return ProfileKind.CARRIER if isinstance(profile, CarrierModel) else ProfileKind.SHIPPER


def _base_fields(profile: ProfileModel) -> dict:
    kind = kind_of(profile)
    completeness = document_completeness(kind, profile.documents)
    data = {
        "id": profile.id,
        "user_id": profile.user_id,
        "legal_name": profile.legal_name,
        "dba_name": profile.dba_name,
        "ein": profile.ein,
        "address": profile.address,
        "city": profile.city,
        "state": profile.state,
        "zip": profile.zip,
        "contact_name": profile.contact_name,
        "contact_email": profile.contact_email,
        "contact_phone": profile.contact_phone,
        "status": profile.status,
        "onboarding_completed": profile.onboarding_completed,
        "ai_analysis": profile.ai_analysis,
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
        "document_completeness": completeness.as_dict(),
    }
    if kind is ProfileKind.CARRIER:
        data.update(
            dot_number=profile.dot_number,
            mc_number=profile.mc_number,
            authority_date=profile.authority_date,
            equipment_types=list(profile.equipment_types or []),
            preferred_lanes=list(profile.preferred_lanes or []),
        )
    else:
        data.update(
            commodity_type=profile.commodity_type,
            monthly_volume=profile.monthly_volume,
            average_value=profile.average_value,
            preferred_equipment=list(profile.preferred_equipment or []),
        )
    return data


def to_profile_response(profile: ProfileModel) -> CarrierProfileResponse | ShipperProfileResponse:
    documents = {key: url for key, url in (profile.documents or {}).items() if url}
    data = {**_base_fields(profile), "documents": documents}
    if kind_of(profile) is ProfileKind.CARRIER:
        return CarrierProfileResponse.model_validate(data)
    return ShipperProfileResponse.model_validate(data)


def to_list_item(profile: ProfileModel) -> CarrierListItem | ShipperListItem:
    kind = kind_of(profile)
    stored = profile.documents or {}
    documents = {key: bool(stored.get(key)) for key in kind.slot_keys}
    data = {**_base_fields(profile), "documents": documents}
    if kind is ProfileKind.CARRIER:
        return CarrierListItem.model_validate(data)
    return ShipperListItem.model_validate(data)

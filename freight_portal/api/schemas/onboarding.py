"""Pydantic schemas for the carrier and shipper onboarding endpoints."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from .common import CamelModel


class _OnboardRequest(CamelModel):
    # Required-ness is checked by the registration service so that every
    # missing field is reported together.
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    legal_name: str | None = None
    dba_name: str | None = None
    ein: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    password: str | None = None
    documents: dict[str, str | None] | None = Field(
        default=None,
        description="Optional data URLs keyed by document slot",
    )


class CarrierOnboardRequest(_OnboardRequest):
    """Request schema for carrier onboarding."""

    dot_number: str | None = None
    mc_number: str | None = None
    authority_date: str | None = None
    equipment_types: list[str] | None = None
    preferred_lanes: list[str] | None = None


class ShipperOnboardRequest(_OnboardRequest):
    """Request schema for shipper onboarding."""

    commodity_type: str | None = None
    monthly_volume: str | None = None
    average_value: str | None = None
    preferred_equipment: list[str] | None = None


class CarrierOnboardResponse(CamelModel):
    success: bool = True
    message: str
    carrier_id: str


class ShipperOnboardResponse(CamelModel):
    success: bool = True
    message: str
    shipper_id: str

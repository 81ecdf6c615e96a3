from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
    roles: list[str] = field(default_factory=list)
    profile_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def role(self) -> str | None:
        return self.roles[0] if self.roles else None


@dataclass(frozen=True, slots=True)
class DocumentSlot:
    """A named compliance artifact a profile may hold."""

    key: str
    label: str


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A registration payload field: wire name and the label shown to people."""

    name: str
    label: str


CARRIER_DOCUMENT_SLOTS: tuple[DocumentSlot, ...] = (
    DocumentSlot("w9", "W-9 Form"),
    DocumentSlot("coi", "Certificate of Insurance"),
    DocumentSlot("mcAuthority", "MC Authority"),
)

SHIPPER_DOCUMENT_SLOTS: tuple[DocumentSlot, ...] = (
    DocumentSlot("w9", "W-9 Form"),
    DocumentSlot("creditApp", "Credit Application"),
    DocumentSlot("shippingAgreement", "Shipping Agreement"),
)

CARRIER_REQUIRED_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("dotNumber", "DOT Number"),
    FieldSpec("mcNumber", "MC Number"),
    FieldSpec("legalName", "Legal Company Name"),
    FieldSpec("contactEmail", "Contact Email"),
    FieldSpec("contactPhone", "Contact Phone"),
    FieldSpec("password", "Password"),
    FieldSpec("city", "City"),
    FieldSpec("state", "State"),
)

SHIPPER_REQUIRED_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("legalName", "Legal Company Name"),
    FieldSpec("contactEmail", "Contact Email"),
    FieldSpec("contactPhone", "Contact Phone"),
    FieldSpec("password", "Password"),
    FieldSpec("city", "City"),
    FieldSpec("state", "State"),
)

CARRIER_EQUIPMENT_OPTIONS: tuple[str, ...] = (
    "Dry Van",
    "Reefer",
    "Flatbed",
    "Intermodal",
    "Step Deck",
    "Hotshot",
)

SHIPPER_EQUIPMENT_OPTIONS: tuple[str, ...] = ("Dry Van", "Reefer", "Flatbed", "Intermodal")


class ProfileKind(str, enum.Enum):
    """The two sides of the brokerage, each with its own document slots."""

    CARRIER = "carrier"
    SHIPPER = "shipper"

    @property
    def document_slots(self) -> tuple[DocumentSlot, ...]:
        if self is ProfileKind.CARRIER:
            return CARRIER_DOCUMENT_SLOTS
        return SHIPPER_DOCUMENT_SLOTS

    @property
    def required_fields(self) -> tuple[FieldSpec, ...]:
        if self is ProfileKind.CARRIER:
            return CARRIER_REQUIRED_FIELDS
        return SHIPPER_REQUIRED_FIELDS

    @property
    def equipment_options(self) -> tuple[str, ...]:
        if self is ProfileKind.CARRIER:
            return CARRIER_EQUIPMENT_OPTIONS
        return SHIPPER_EQUIPMENT_OPTIONS

    @property
    def slot_keys(self) -> tuple[str, ...]:
        return tuple(slot.key for slot in self.document_slots)

    def slot(self, key: str) -> DocumentSlot:
        for slot in self.document_slots:
            if slot.key == key:
                return slot
        raise KeyError(key)


@dataclass(frozen=True, slots=True)
class DocumentCompleteness:
    uploaded: int
    total: int

    @property
    def ratio(self) -> float:
        return self.uploaded / self.total if self.total else 0.0

    def as_dict(self) -> dict[str, float | int]:
        return {"uploaded": self.uploaded, "total": self.total, "ratio": round(self.ratio, 4)}


def document_completeness(
    kind: ProfileKind, documents: Mapping[str, str | None] | None
) -> DocumentCompleteness:
    """Count filled slots for ``kind``; keys outside the slot set are not counted."""
    documents = documents or {}
    uploaded = sum(1 for key in kind.slot_keys if documents.get(key))
    return DocumentCompleteness(uploaded=uploaded, total=len(kind.document_slots))


def unique_strings(values: Iterable[str] | None) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values or ():
        text = str(value).strip()
        if text:
            seen.setdefault(text, None)
    return list(seen)

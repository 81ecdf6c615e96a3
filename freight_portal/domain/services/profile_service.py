"""
Self-service access for carriers and shippers to their own profile.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from freight_portal.domain import User
from freight_portal.domain.errors import AuthError, PortalValidationError
from freight_portal.domain.models import ProfileKind, unique_strings
from freight_portal.domain.services.admin_review import ProfileNotFoundError
from freight_portal.domain.services.documents import (
    EncodedDocument,
    decode_data_url,
    validate_document,
)
from freight_portal.infrastructure.db.models import ProfileModel
from freight_portal.infrastructure.repositories import ProfileRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)

_COMMON_EDITABLE = (
    "legal_name",
    "dba_name",
    "ein",
    "address",
    "city",
    "state",
    "zip",
    "contact_name",
    "contact_phone",
)

# Identity fields (role, status, DOT/MC, login email) are not in these sets.
EDITABLE_TEXT_FIELDS: dict[ProfileKind, tuple[str, ...]] = {
    ProfileKind.CARRIER: (*_COMMON_EDITABLE, "authority_date"),
    ProfileKind.SHIPPER: (*_COMMON_EDITABLE, "commodity_type", "monthly_volume", "average_value"),
}

EDITABLE_LIST_FIELDS: dict[ProfileKind, tuple[str, ...]] = {
    ProfileKind.CARRIER: ("equipment_types", "preferred_lanes"),
    ProfileKind.SHIPPER: ("preferred_equipment",),
}

# Blank values would break a completed registration.
_NON_BLANK = frozenset({"legal_name", "city", "state", "contact_phone"})


class ProfileService:
    """Read and edit the profile linked to the signed-in user."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.profiles = ProfileRepository(session)

    async def get_own(self, kind: ProfileKind, user: User) -> ProfileModel:
        profile_id = self._profile_id_for(kind, user)
        profile = await self.profiles.get(kind, profile_id)
        if profile is None or (profile.user_id and profile.user_id != user.user_id):
            raise ProfileNotFoundError(f"{kind.value.capitalize()} profile not found")
        return profile

    async def update_own(
        self, kind: ProfileKind, user: User, changes: Mapping[str, Any]
    ) -> ProfileModel:
        """
        Shallow-merge ``changes`` (snake_case keys) into the profile.

        Keys outside the editable set are ignored. ``documents`` merges slot by
        slot; naming a slot the kind does not have is rejected.
        """
        profile = await self.get_own(kind, user)
        applied: list[str] = []

        for field in EDITABLE_TEXT_FIELDS[kind]:
            if field not in changes or changes[field] is None:
                continue
            value = str(changes[field]).strip()
            if field in _NON_BLANK and not value:
                raise PortalValidationError(
                    f"{field} cannot be blank", error="Invalid profile update"
                )
            setattr(profile, field, value)
            applied.append(field)

        for field in EDITABLE_LIST_FIELDS[kind]:
            if field in changes and changes[field] is not None:
                setattr(profile, field, unique_strings(changes[field]))
                applied.append(field)

        documents = changes.get("documents")
        if documents:
            profile.documents = self._merge_documents(kind, profile.documents, documents)
            applied.append("documents")

        if applied:
            await self.session.commit()
            await self.session.refresh(profile)

        await logger.ainfo(
            "profile_updated",
            kind=kind.value,
            profile_id=profile.id,
            fields=applied,
        )
        return profile

    async def store_document(
        self, kind: ProfileKind, user: User, slot_key: str, document: EncodedDocument
    ) -> ProfileModel:
        """Put an encoded upload into one slot, replacing whatever was there."""
        if slot_key not in kind.slot_keys:
            raise _unknown_slot(kind, slot_key)

        profile = await self.get_own(kind, user)
        replaced = bool((profile.documents or {}).get(slot_key))
        profile.documents = {**(profile.documents or {}), slot_key: document.url}
        await self.session.commit()
        await self.session.refresh(profile)

        await logger.ainfo(
            "profile_document_stored",
            kind=kind.value,
            profile_id=profile.id,
            slot=slot_key,
            size=document.size,
            replaced=replaced,
        )
        return profile

    def _merge_documents(
        self, kind: ProfileKind, current: Mapping[str, str] | None, updates: Mapping[str, Any]
    ) -> dict[str, str]:
        merged = dict(current or {})
        for key, url in updates.items():
            if key not in kind.slot_keys:
                raise _unknown_slot(kind, key)
            if isinstance(url, str) and url:
                media_type, content = decode_data_url(url)
                validate_document(size=len(content), content_type=media_type)
                merged[key] = url
        return merged

    @staticmethod
    def _profile_id_for(kind: ProfileKind, user: User) -> str:
        if kind.value not in user.roles:
            raise AuthError(
                f"Only {kind.value} accounts can access this profile",
                error="Invalid user role",
                forbidden=True,
            )
        if not user.profile_id:
            raise ProfileNotFoundError(f"No {kind.value} profile linked to this account")
        return user.profile_id


def _unknown_slot(kind: ProfileKind, slot_key: str) -> PortalValidationError:
    allowed = ", ".join(kind.slot_keys)
    return PortalValidationError(
        f"Unknown document slot '{slot_key}'. Expected one of: {allowed}",
        error="Invalid document slot",
    )

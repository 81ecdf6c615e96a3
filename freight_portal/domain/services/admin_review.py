"""
Admin review workflow: listing, status transitions, deletion, document review
and reconciliation of profiles that lost their login account.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from freight_portal.domain.errors import NotFoundError, PortalValidationError
from freight_portal.domain.models import DocumentCompleteness, ProfileKind, document_completeness
from freight_portal.domain.services.documents import decode_data_url
from freight_portal.infrastructure.db.models import ProfileModel, ProfileStatus, UserStatus
from freight_portal.infrastructure.repositories import ProfileRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)


class ProfileNotFoundError(NotFoundError):
    """Raised when the profile does not exist."""

    default_error = "Profile not found"


class DocumentNotFoundError(NotFoundError):
    """Raised when a document slot is empty."""

    default_error = "Document not found"


@dataclass(slots=True)
class ReviewStats:
    total_carriers: int
    pending_carriers: int
    approved_carriers: int
    total_shippers: int
    pending_shippers: int
    approved_shippers: int

    def as_dict(self) -> dict[str, int]:
        return {
            "totalCarriers": self.total_carriers,
            "pendingCarriers": self.pending_carriers,
            "approvedCarriers": self.approved_carriers,
            "totalShippers": self.total_shippers,
            "pendingShippers": self.pending_shippers,
            "approvedShippers": self.approved_shippers,
        }


@dataclass(slots=True)
class ReviewOverview:
    stats: ReviewStats
    carriers: Sequence[ProfileModel]
    shippers: Sequence[ProfileModel]


@dataclass(slots=True)
class DocumentSlotState:
    key: str
    label: str
    present: bool
    link: str | None


@dataclass(slots=True)
class DocumentReview:
    kind: ProfileKind
    profile_id: str
    company_name: str
    slots: list[DocumentSlotState]
    completeness: DocumentCompleteness


@dataclass(slots=True)
class OrphanedProfile:
    kind: ProfileKind
    profile_id: str
    legal_name: str
    contact_email: str
    user_id: str | None


@dataclass(slots=True)
class RepairResult:
    removed: int = 0
    relinked: int = 0


def parse_status(value: str) -> ProfileStatus:
    try:
        return ProfileStatus(value)
    except ValueError as exc:
        allowed = ", ".join(status.value for status in ProfileStatus)
        raise PortalValidationError(
            f"Status must be one of: {allowed}",
            error="Invalid status",
        ) from exc


class AdminReviewService:
    """Operations behind the admin dashboard."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.profiles = ProfileRepository(session)

    async def overview(self) -> ReviewOverview:
        """All carriers and shippers plus per-type counts. No pagination."""
        carriers = await self.profiles.list_all(ProfileKind.CARRIER)
        shippers = await self.profiles.list_all(ProfileKind.SHIPPER)
        carrier_counts = await self.profiles.status_counts(ProfileKind.CARRIER)
        shipper_counts = await self.profiles.status_counts(ProfileKind.SHIPPER)

        stats = ReviewStats(
            total_carriers=sum(carrier_counts.values()),
            pending_carriers=carrier_counts[ProfileStatus.PENDING],
            approved_carriers=carrier_counts[ProfileStatus.APPROVED],
            total_shippers=sum(shipper_counts.values()),
            pending_shippers=shipper_counts[ProfileStatus.PENDING],
            approved_shippers=shipper_counts[ProfileStatus.APPROVED],
        )
        return ReviewOverview(stats=stats, carriers=carriers, shippers=shippers)

    async def set_status(
        self,
        kind: ProfileKind,
        profile_id: str,
        status: ProfileStatus | str,
        *,
        admin_id: str | None = None,
    ) -> ProfileModel:
        """
        Move a profile to any review status.

        The profile is the source of truth for account status; the linked
        user is updated to the same value in the same commit.
        """
        new_status = status if isinstance(status, ProfileStatus) else parse_status(status)
        profile = await self._require(kind, profile_id)
        previous = profile.status

        profile.status = new_status
        user = await self.profiles.get_linked_user(profile)
        if user is not None:
            user.status = UserStatus(new_status.value)
        else:
            await logger.awarning(
                "status_change_without_user",
                kind=kind.value,
                profile_id=profile_id,
            )

        await self.session.commit()
        await self.session.refresh(profile)

        await logger.ainfo(
            "profile_status_changed",
            kind=kind.value,
            profile_id=profile_id,
            from_status=previous.value,
            to_status=new_status.value,
            admin_user=admin_id,
        )
        return profile

    async def delete(self, kind: ProfileKind, profile_id: str, *, admin_id: str | None = None) -> None:
        """Permanently remove a profile and its linked user."""
        profile = await self._require(kind, profile_id)
        user_ids = await self.profiles.delete_with_user(kind, profile)
        await self.session.commit()

        await logger.ainfo(
            "profile_deleted",
            kind=kind.value,
            profile_id=profile_id,
            user_ids=user_ids,
            admin_user=admin_id,
        )

    async def review_documents(
        self, kind: ProfileKind, profile_id: str, *, link_base: str = ""
    ) -> DocumentReview:
        profile = await self._require(kind, profile_id)
        documents = profile.documents or {}
        base = link_base.rstrip("/")

        slots = [
            DocumentSlotState(
                key=slot.key,
                label=slot.label,
                present=bool(documents.get(slot.key)),
                link=f"{base}/{slot.key}" if documents.get(slot.key) else None,
            )
            for slot in kind.document_slots
        ]
        return DocumentReview(
            kind=kind,
            profile_id=profile.id,
            company_name=profile.legal_name,
            slots=slots,
            completeness=document_completeness(kind, documents),
        )

    async def fetch_document(self, kind: ProfileKind, profile_id: str, slot_key: str) -> tuple[str, bytes]:
        """Return (media type, bytes) of a stored document."""
        if slot_key not in kind.slot_keys:
            raise DocumentNotFoundError(f"Unknown document slot '{slot_key}' for {kind.value}")

        profile = await self._require(kind, profile_id)
        url = (profile.documents or {}).get(slot_key)
        if not url:
            raise DocumentNotFoundError(f"No {kind.slot(slot_key).label} on file")
        return decode_data_url(url)

    async def find_orphans(self) -> list[OrphanedProfile]:
        orphans: list[OrphanedProfile] = []
        for kind in ProfileKind:
            for profile in await self.profiles.find_orphans(kind):
                orphans.append(
                    OrphanedProfile(
                        kind=kind,
                        profile_id=profile.id,
                        legal_name=profile.legal_name,
                        contact_email=profile.contact_email,
                        user_id=profile.user_id,
                    )
                )
        return orphans

    async def repair_orphans(self, *, admin_id: str | None = None) -> RepairResult:
        """Restore missing back-references, then delete profiles no user reaches.

        A profile whose ``user_id`` was never written but which a user still
        points at is re-linked, not deleted. Safe to run repeatedly.
        """
        result = RepairResult()
        for kind in ProfileKind:
            for profile, user_id in await self.profiles.find_unlinked(kind):
                profile.user_id = user_id
                result.relinked += 1
            for profile in await self.profiles.find_orphans(kind):
                await self.session.delete(profile)
                result.removed += 1
        await self.session.commit()

        await logger.ainfo(
            "orphan_profiles_repaired",
            removed=result.removed,
            relinked=result.relinked,
            admin_user=admin_id,
        )
        return result

    async def _require(self, kind: ProfileKind, profile_id: str) -> ProfileModel:
        profile = await self.profiles.get(kind, profile_id)
        if profile is None:
            raise ProfileNotFoundError(f"{kind.value.capitalize()} {profile_id} not found")
        return profile

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, func, select
from freight_portal.domain.models import ProfileKind
from freight_portal.infrastructure.db.models import (
    CarrierModel,
    ProfileModel,
    ProfileStatus,
    ShipperModel,
    UserModel,
)

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

logger = structlog.get_logger(__name__)

_MODELS: dict[ProfileKind, type[CarrierModel] | type[ShipperModel]] = {
    ProfileKind.CARRIER: CarrierModel,
    ProfileKind.SHIPPER: ShipperModel,
}


def profile_model(kind: ProfileKind) -> type[CarrierModel] | type[ShipperModel]:
    return _MODELS[kind]


def user_link_column(kind: ProfileKind) -> InstrumentedAttribute[str | None]:
    """The users column that points at a profile of ``kind``."""
    return UserModel.carrier_id if kind is ProfileKind.CARRIER else UserModel.shipper_id


class ProfileRepository:
    """Queries over the carrier and shipper tables and their linked users."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, kind: ProfileKind, profile_id: str) -> ProfileModel | None:
        model = profile_model(kind)
        return await self.session.scalar(select(model).where(model.id == profile_id))

    async def list_all(self, kind: ProfileKind) -> Sequence[ProfileModel]:
        model = profile_model(kind)
        stmt = select(model).order_by(model.created_at.desc(), model.id)
        return (await self.session.execute(stmt)).scalars().all()

    async def status_counts(self, kind: ProfileKind) -> dict[ProfileStatus, int]:
        model = profile_model(kind)
        stmt = select(model.status, func.count(model.id)).group_by(model.status)
        rows = (await self.session.execute(stmt)).all()
        counts = {status: 0 for status in ProfileStatus}
        for status, count in rows:
            counts[ProfileStatus(status)] = count
        return counts

    async def get_linked_user(self, profile: ProfileModel) -> UserModel | None:
        if not profile.user_id:
            return None
        return await self.session.scalar(select(UserModel).where(UserModel.id == profile.user_id))

    async def find_orphans(self, kind: ProfileKind) -> Sequence[ProfileModel]:
        """Profiles no user reaches, neither through ``user_id`` nor a user's back-reference."""
        model = profile_model(kind)
        link = user_link_column(kind)
        stmt = (
            select(model)
            .where(_missing_owner(model))
            .where(model.id.not_in(select(link).where(link.is_not(None))))
            .order_by(model.created_at)
        )
        return (await self.session.execute(stmt)).scalars().all()

    async def find_unlinked(self, kind: ProfileKind) -> list[tuple[ProfileModel, str]]:
        """Profiles whose ``user_id`` was never written while a user still points at them."""
        model = profile_model(kind)
        link = user_link_column(kind)
        stmt = (
            select(model, UserModel.id)
            .join(UserModel, link == model.id)
            .where(_missing_owner(model))
            .order_by(model.created_at, UserModel.created_at)
        )
        pairs: dict[str, tuple[ProfileModel, str]] = {}
        for profile, user_id in (await self.session.execute(stmt)).all():
            pairs.setdefault(profile.id, (profile, user_id))
        return list(pairs.values())

    async def delete_with_user(self, kind: ProfileKind, profile: ProfileModel) -> list[str]:
        """Delete a profile and every user linked to it either way. Caller commits."""
        link = user_link_column(kind)
        back_refs = await self.session.execute(select(UserModel.id).where(link == profile.id))
        user_ids = set(back_refs.scalars())
        if profile.user_id:
            user_ids.add(profile.user_id)
        if user_ids:
            await self.session.execute(delete(UserModel).where(UserModel.id.in_(user_ids)))
        await self.session.delete(profile)
        return sorted(user_ids)


def _missing_owner(model: type[CarrierModel] | type[ShipperModel]) -> ColumnElement[bool]:
    return model.user_id.is_(None) | model.user_id.not_in(select(UserModel.id))

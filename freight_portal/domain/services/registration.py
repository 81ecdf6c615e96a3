"""
Registration service for carrier and shipper onboarding.

Validates a submitted onboarding payload and creates the profile and its
login account together. AI analysis and the admin notification are
best-effort: their failures are logged and never reach the caller.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from freight_portal.domain.errors import ConflictError, PortalValidationError, UnexpectedError
from freight_portal.domain.models import ProfileKind, unique_strings
from freight_portal.domain.services.auth_service import hash_password
from freight_portal.domain.services.documents import decode_data_url, validate_document
from freight_portal.domain.services.notifications import AdminNotifier
from freight_portal.domain.services.profile_analysis import ProfileAnalyzer
from freight_portal.infrastructure.db.models import (
    CarrierModel,
    ProfileModel,
    ProfileStatus,
    ShipperModel,
    UserModel,
    UserRole,
    UserStatus,
)

logger = structlog.get_logger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

# wire name -> column, per kind; list-valued fields are handled separately
_COMMON_TEXT_FIELDS: dict[str, str] = {
    "legalName": "legal_name",
    "dbaName": "dba_name",
    "ein": "ein",
    "address": "address",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "contactName": "contact_name",
    "contactEmail": "contact_email",
    "contactPhone": "contact_phone",
}

TEXT_FIELDS: dict[ProfileKind, dict[str, str]] = {
    ProfileKind.CARRIER: {
        **_COMMON_TEXT_FIELDS,
        "dotNumber": "dot_number",
        "mcNumber": "mc_number",
        "authorityDate": "authority_date",
    },
    ProfileKind.SHIPPER: {
        **_COMMON_TEXT_FIELDS,
        "commodityType": "commodity_type",
        "monthlyVolume": "monthly_volume",
        "averageValue": "average_value",
    },
}

LIST_FIELDS: dict[ProfileKind, dict[str, str]] = {
    ProfileKind.CARRIER: {
        "equipmentTypes": "equipment_types",
        "preferredLanes": "preferred_lanes",
    },
    ProfileKind.SHIPPER: {
        "preferredEquipment": "preferred_equipment",
    },
}

SUCCESS_MESSAGE = "Registration successful! Your application is pending admin approval."


@dataclass(slots=True)
class RegistrationResult:
    kind: ProfileKind
    profile_id: str
    user_id: str
    status: str
    message: str = SUCCESS_MESSAGE

    def to_response(self) -> dict[str, Any]:
        return {
            "success": True,
            "message": self.message,
            f"{self.kind.value}Id": self.profile_id,
        }


def normalize_payload(kind: ProfileKind, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Trim text fields, dedupe list fields and drop keys the kind does not know."""
    data: dict[str, Any] = {}
    for name in TEXT_FIELDS[kind]:
        value = payload.get(name)
        data[name] = str(value).strip() if value is not None else ""
    for name in LIST_FIELDS[kind]:
        data[name] = unique_strings(payload.get(name))
    password = payload.get("password")
    data["password"] = password if isinstance(password, str) else ""
    documents = payload.get("documents") or {}
    data["documents"] = {
        key: documents[key]
        for key in kind.slot_keys
        if isinstance(documents, Mapping) and isinstance(documents.get(key), str) and documents[key]
    }
    return data


def find_missing_fields(kind: ProfileKind, data: Mapping[str, Any]) -> list[str]:
    """Every required field that is absent or blank, in declaration order."""
    missing = []
    for field in kind.required_fields:
        value = data.get(field.name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field.name)
    return missing


def validate_payload(kind: ProfileKind, data: Mapping[str, Any]) -> None:
    """Run presence, email and password checks; raise on the first failing rule."""
    missing = find_missing_fields(kind, data)
    if missing:
        labels = {field.name: field.label for field in kind.required_fields}
        joined = ", ".join(labels[name] for name in missing)
        raise PortalValidationError(
            f"Please fill in the following required fields: {joined}",
            error="Missing required fields",
            missing_fields=missing,
        )

    if not EMAIL_RE.match(data["contactEmail"]):
        raise PortalValidationError(
            "Please provide a valid email address",
            error="Invalid email format",
        )

    if len(data["password"]) < MIN_PASSWORD_LENGTH:
        raise PortalValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            error="Weak password",
        )

    for slot_key, url in data.get("documents", {}).items():
        media_type, content = decode_data_url(url)
        try:
            validate_document(size=len(content), content_type=media_type)
        except PortalValidationError as exc:
            raise PortalValidationError(
                f"{kind.slot(slot_key).label}: {exc.message}", error=exc.error
            ) from exc


class RegistrationService:
    """Creates paired profile + user records from an onboarding submission."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        analyzer: ProfileAnalyzer | None = None,
        notifier: AdminNotifier | None = None,
    ) -> None:
        self.session = session
        self.analyzer = analyzer
        self.notifier = notifier

    async def register(self, kind: ProfileKind, payload: Mapping[str, Any]) -> RegistrationResult:
        data = normalize_payload(kind, payload)
        validate_payload(kind, data)

        email = data["contactEmail"]
        await logger.ainfo("registration_attempt", kind=kind.value, email=email)

        if await self._email_taken(email):
            await logger.awarning("registration_duplicate_email", kind=kind.value, email=email)
            raise _duplicate_email_error()

        ai_analysis = await self._analyze(kind, data)
        hashed_password = hash_password(data["password"])

        profile = self._build_profile(kind, data, ai_analysis)
        try:
            self.session.add(profile)
            await self.session.flush()

            user = UserModel(
                email=email.lower(),
                hashed_password=hashed_password,
                role=UserRole(kind.value),
                status=UserStatus.PENDING,
            )
            if kind is ProfileKind.CARRIER:
                user.carrier_id = profile.id
            else:
                user.shipper_id = profile.id
            self.session.add(user)
            await self.session.flush()

            profile.user_id = user.id
            await self.session.commit()
        except IntegrityError as exc:
            # Unique email index caught a concurrent registration.
            await self.session.rollback()
            await logger.awarning("registration_duplicate_email_race", kind=kind.value, email=email)
            raise _duplicate_email_error() from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            await logger.aerror(
                "registration_persist_failed",
                kind=kind.value,
                email=email,
                error=str(exc),
                exc_info=True,
            )
            raise UnexpectedError(
                "An error occurred during registration. Please try again later.",
                error="Registration failed",
            ) from exc

        await logger.ainfo(
            "registration_success",
            kind=kind.value,
            profile_id=profile.id,
            user_id=user.id,
            has_ai_analysis=ai_analysis is not None,
        )

        await self._notify(kind, profile)

        return RegistrationResult(
            kind=kind,
            profile_id=profile.id,
            user_id=user.id,
            status=profile.status.value,
        )

    def registrar(self, kind: ProfileKind):
        """In-process counterpart of ``PortalClient.registrar`` for the wizard."""

        async def _register(payload: dict[str, Any]) -> dict[str, Any]:
            return (await self.register(kind, payload)).to_response()

        return _register

    async def _email_taken(self, email: str) -> bool:
        stmt = select(UserModel.id).where(func.lower(UserModel.email) == email.lower()).limit(1)
        return (await self.session.scalar(stmt)) is not None

    async def _analyze(self, kind: ProfileKind, data: Mapping[str, Any]) -> str | None:
        if self.analyzer is None:
            return None
        try:
            return await self.analyzer.analyze(kind, data)
        except Exception as exc:
            await logger.awarning("profile_analysis_failed", kind=kind.value, error=str(exc))
            return None

    async def _notify(self, kind: ProfileKind, profile: ProfileModel) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.notify_new_registration(kind, profile)
        except Exception as exc:
            await logger.awarning(
                "admin_notification_failed",
                kind=kind.value,
                profile_id=profile.id,
                error=str(exc),
            )

    def _build_profile(
        self, kind: ProfileKind, data: Mapping[str, Any], ai_analysis: str | None
    ) -> ProfileModel:
        values: dict[str, Any] = {
            column: data[name] for name, column in TEXT_FIELDS[kind].items()
        }
        values.update({column: data[name] for name, column in LIST_FIELDS[kind].items()})
        if kind is ProfileKind.CARRIER:
            values["authority_date"] = values["authority_date"] or None

        model = CarrierModel if kind is ProfileKind.CARRIER else ShipperModel
        return model(
            **values,
            documents=dict(data["documents"]),
            status=ProfileStatus.PENDING,
            onboarding_completed=True,
            ai_analysis=ai_analysis,
        )


def _duplicate_email_error() -> ConflictError:
    return ConflictError(
        "This email is already registered. Please use a different email or try logging in.",
        error="Email already registered",
    )

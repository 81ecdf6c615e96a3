"""Idempotent demo accounts for local and staging environments."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from freight_portal.domain.services.auth_service import hash_password
from freight_portal.infrastructure.db.models import (
    CarrierModel,
    ProfileStatus,
    ShipperModel,
    UserModel,
    UserRole,
    UserStatus,
)

logger = structlog.get_logger(__name__)

TEST_PASSWORD = "TestPass123"
ADMIN_EMAIL = "admin@lfllogistics.com"
CARRIER_EMAIL = "testcarrier@example.com"
SHIPPER_EMAIL = "testshipper@example.com"

TEST_CARRIER: dict[str, Any] = {
    "dot_number": "1234567",
    "mc_number": "MC123456",
    "authority_date": "2024-01-01",
    "legal_name": "Test Carrier LLC",
    "dba_name": "Test Transport",
    "ein": "12-3456789",
    "address": "123 Carrier Street",
    "city": "Charlotte",
    "state": "NC",
    "zip": "28202",
    "contact_name": "John Carrier",
    "contact_email": CARRIER_EMAIL,
    "contact_phone": "(704) 555-0100",
    "equipment_types": ["Dry Van", "Refrigerated"],
    "preferred_lanes": ["Southeast", "Northeast"],
}

TEST_SHIPPER: dict[str, Any] = {
    "legal_name": "Test Shipper Corp",
    "dba_name": "Test Logistics",
    "ein": "98-7654321",
    "address": "456 Shipper Avenue",
    "city": "Atlanta",
    "state": "GA",
    "zip": "30303",
    "contact_name": "Jane Shipper",
    "contact_email": SHIPPER_EMAIL,
    "contact_phone": "(404) 555-0200",
    "commodity_type": "General Freight",
    "monthly_volume": "50-100 loads",
    "average_value": "$50,000",
    "preferred_equipment": ["Dry Van", "Flatbed"],
}


async def seed_test_users(session: AsyncSession, *, password: str = TEST_PASSWORD) -> dict[str, str]:
    """
    Create one admin, one approved carrier and one approved shipper.

    Accounts are matched by email, so running this twice changes nothing.
    Returns ``{email: "created" | "exists"}``.
    """
    hashed = hash_password(password)
    report: dict[str, str] = {}

    if await _user_exists(session, ADMIN_EMAIL):
        report[ADMIN_EMAIL] = "exists"
    else:
        session.add(
            UserModel(
                email=ADMIN_EMAIL,
                hashed_password=hashed,
                role=UserRole.ADMIN,
                status=UserStatus.ACTIVE,
            )
        )
        await session.flush()
        report[ADMIN_EMAIL] = "created"

    for role, model, values in (
        (UserRole.CARRIER, CarrierModel, TEST_CARRIER),
        (UserRole.SHIPPER, ShipperModel, TEST_SHIPPER),
    ):
        email = values["contact_email"]
        if await _user_exists(session, email):
            report[email] = "exists"
            continue

        profile = model(
            **values,
            documents={},
            status=ProfileStatus.APPROVED,
            onboarding_completed=True,
        )
        session.add(profile)
        await session.flush()

        user = UserModel(
            email=email,
            hashed_password=hashed,
            role=role,
            status=UserStatus.APPROVED,
        )
        setattr(user, f"{role.value}_id", profile.id)
        session.add(user)
        await session.flush()

        profile.user_id = user.id
        report[email] = "created"

    await session.commit()
    await logger.ainfo("test_users_seeded", **{email.split("@")[0]: state for email, state in report.items()})
    return report


async def _user_exists(session: AsyncSession, email: str) -> bool:
    stmt = select(UserModel.id).where(func.lower(UserModel.email) == email.lower()).limit(1)
    return (await session.scalar(stmt)) is not None

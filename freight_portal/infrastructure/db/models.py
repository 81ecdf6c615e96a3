from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class UserStatus(str, enum.Enum):
    """User account status. Carrier/shipper users mirror their profile's status."""

    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"
    ACTIVE = "active"


class UserRole(str, enum.Enum):
    """User role enum matching auth.Role."""

    ADMIN = "admin"
    CARRIER = "carrier"
    SHIPPER = "shipper"


class ProfileStatus(str, enum.Enum):
    """Review status an admin assigns to a carrier or shipper profile."""

    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"


def _new_id() -> str:
    return str(uuid.uuid4())


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=_enum_values),
        nullable=False,
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, name="user_status", values_callable=_enum_values),
        default=UserStatus.PENDING,
        nullable=False,
    )
    # Plain id references; profiles point back through ``user_id``.
    carrier_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    shipper_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def profile_id(self) -> str | None:
        if self.role == UserRole.CARRIER:
            return self.carrier_id
        if self.role == UserRole.SHIPPER:
            return self.shipper_id
        return None

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, role={self.role.value})>"


class _ProfileColumns:
    """Columns shared by carrier and shipper profiles."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    legal_name: Mapped[str] = mapped_column(String(255), nullable=False)
    dba_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    ein: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    address: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False)
    state: Mapped[str] = mapped_column(String(64), nullable=False)
    zip: Mapped[str] = mapped_column(String(16), default="", nullable=False)
    contact_name: Mapped[str] = mapped_column(String(128), default="", nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    contact_phone: Mapped[str] = mapped_column(String(64), nullable=False)
    documents: Mapped[dict[str, str]] = mapped_column(JSON, default=dict, nullable=False)
    status: Mapped[ProfileStatus] = mapped_column(
        Enum(ProfileStatus, name="profile_status", values_callable=_enum_values),
        default=ProfileStatus.PENDING,
        nullable=False,
    )
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ai_analysis: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class CarrierModel(_ProfileColumns, Base):
    """Motor carrier profile."""

    __tablename__ = "carriers"

    dot_number: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    mc_number: Mapped[str] = mapped_column(String(32), nullable=False)
    authority_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    equipment_types: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    preferred_lanes: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    def __repr__(self) -> str:
        return f"<CarrierModel(id={self.id}, dot={self.dot_number}, status={self.status.value})>"


class ShipperModel(_ProfileColumns, Base):
    """Shipper profile."""

    __tablename__ = "shippers"

    commodity_type: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    monthly_volume: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    average_value: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    preferred_equipment: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    def __repr__(self) -> str:
        return f"<ShipperModel(id={self.id}, name={self.legal_name}, status={self.status.value})>"


ProfileModel = CarrierModel | ShipperModel

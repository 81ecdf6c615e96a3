"""Users, carriers and shippers

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum("admin", "carrier", "shipper", name="user_role")
user_status_enum = sa.Enum("pending", "approved", "suspended", "active", name="user_status")
profile_status_enum = sa.Enum("pending", "approved", "suspended", name="profile_status")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _profile_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("legal_name", sa.String(length=255), nullable=False),
        sa.Column("dba_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("ein", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("address", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("city", sa.String(length=128), nullable=False),
        sa.Column("state", sa.String(length=64), nullable=False),
        sa.Column("zip", sa.String(length=16), nullable=False, server_default=""),
        sa.Column("contact_name", sa.String(length=128), nullable=False, server_default=""),
        sa.Column("contact_email", sa.String(length=255), nullable=False),
        sa.Column("contact_phone", sa.String(length=64), nullable=False),
        sa.Column("documents", sa.JSON(), nullable=False),
        sa.Column("status", profile_status_enum, nullable=False, server_default="pending"),
        sa.Column(
            "onboarding_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("ai_analysis", sa.Text(), nullable=True),
        *_timestamps(),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("status", user_status_enum, nullable=False, server_default="pending"),
        sa.Column("carrier_id", sa.String(length=36), nullable=True),
        sa.Column("shipper_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )
    # Unique: the final guard against two concurrent registrations for one email
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_carrier_id", "users", ["carrier_id"])
    op.create_index("ix_users_shipper_id", "users", ["shipper_id"])

    op.create_table(
        "carriers",
        *_profile_columns(),
        sa.Column("dot_number", sa.String(length=32), nullable=False),
        sa.Column("mc_number", sa.String(length=32), nullable=False),
        sa.Column("authority_date", sa.String(length=32), nullable=True),
        sa.Column("equipment_types", sa.JSON(), nullable=False),
        sa.Column("preferred_lanes", sa.JSON(), nullable=False),
    )
    op.create_index("ix_carriers_user_id", "carriers", ["user_id"])
    op.create_index("ix_carriers_contact_email", "carriers", ["contact_email"])
    op.create_index("ix_carriers_dot_number", "carriers", ["dot_number"])

    op.create_table(
        "shippers",
        *_profile_columns(),
        sa.Column("commodity_type", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("monthly_volume", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("average_value", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("preferred_equipment", sa.JSON(), nullable=False),
    )
    op.create_index("ix_shippers_user_id", "shippers", ["user_id"])
    op.create_index("ix_shippers_contact_email", "shippers", ["contact_email"])


def downgrade() -> None:
    op.drop_index("ix_shippers_contact_email", "shippers")
    op.drop_index("ix_shippers_user_id", "shippers")
    op.drop_table("shippers")
    op.drop_index("ix_carriers_dot_number", "carriers")
    op.drop_index("ix_carriers_contact_email", "carriers")
    op.drop_index("ix_carriers_user_id", "carriers")
    op.drop_table("carriers")
    op.drop_index("ix_users_shipper_id", "users")
    op.drop_index("ix_users_carrier_id", "users")
    op.drop_index("ix_users_email", "users")
    op.drop_table("users")
    bind = op.get_bind()
    profile_status_enum.drop(bind, checkfirst=True)
    user_status_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)

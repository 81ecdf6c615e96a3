"""Authentication service with password hashing and login."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import structlog
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from freight_portal.core.auth import create_access_token
from freight_portal.core.config import get_settings
from freight_portal.domain.errors import AuthError, NotFoundError
from freight_portal.infrastructure.db.models import UserModel, UserStatus

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidCredentialsError(AuthError):
    """Raised when login credentials are invalid."""

    default_error = "Invalid credentials"


class UserInactiveError(AuthError):
    """Raised when the account is suspended."""

    default_error = "Account suspended"

    def __init__(self, message: str) -> None:
        super().__init__(message, forbidden=True)


class UserNotFoundError(NotFoundError):
    """Raised when user is not found."""

    default_error = "User not found"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def login(self, *, email: str, password: str) -> dict:
        """
        Authenticate a portal account and issue a bearer token.

        Pending accounts may sign in so they can follow their review status;
        suspended accounts are refused.
        """
        normalized = email.strip().lower()
        user = await self._authenticate(normalized, password)

        if user.status == UserStatus.SUSPENDED:
            await logger.awarning("login_suspended_user", email=normalized, user_id=user.id)
            raise UserInactiveError(f"Account is {user.status.value}")

        if pwd_context.needs_update(user.hashed_password):
            user.hashed_password = hash_password(password)
        user.last_login_at = datetime.now(UTC)
        await self.session.commit()
        await self.session.refresh(user)

        await logger.ainfo("login_success", user_id=user.id, role=user.role.value)
        return {"user": self.user_to_dict(user), "token": self._generate_token(user)}

    async def _authenticate(self, email: str, password: str) -> UserModel:
        user = await self.session.scalar(select(UserModel).where(UserModel.email == email))
        # Unknown email and wrong password share one message.
        if user is None or not verify_password(password, user.hashed_password):
            await logger.awarning("login_rejected", email=email, known_email=user is not None)
            raise InvalidCredentialsError("Invalid email or password")
        return user

    async def get_user_by_id(self, user_id: str) -> dict:
        """Get user by ID."""
        user = await self.session.scalar(select(UserModel).where(UserModel.id == user_id))

        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")

        return self.user_to_dict(user)

    def _generate_token(self, user: UserModel) -> dict:
        ttl = get_settings().access_token_ttl_seconds
        return {
            "access_token": create_access_token(
                user.id,
                roles=[user.role.value],
                email=user.email,
                profile_id=user.profile_id,
                expires_delta=timedelta(seconds=ttl),
            ),
            "token_type": "bearer",
            "expires_in": ttl,
        }

    @staticmethod
    def user_to_dict(user: UserModel) -> dict:
        return {
            "id": user.id,
            "email": user.email,
            "role": user.role.value,
            "status": user.status.value,
            "profile_id": user.profile_id,
            "created_at": user.created_at,
            "last_login_at": user.last_login_at,
        }

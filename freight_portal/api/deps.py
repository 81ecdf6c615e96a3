"""FastAPI dependencies: bearer auth, role gates, DB sessions and collaborators."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from freight_portal.core.auth import Role, TokenError, create_access_token, decode_access_token
from freight_portal.core.config import get_settings
from freight_portal.domain import User
from freight_portal.domain.errors import AuthError
from freight_portal.domain.services.notifications import AdminNotifier, EmailAdminNotifier
from freight_portal.domain.services.profile_analysis import GPTProfileAnalyzer, ProfileAnalyzer
from freight_portal.infrastructure.db.session import get_session

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User:
    if credentials is None:
        raise AuthError("Missing bearer token")

    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise AuthError(str(exc)) from exc

    if not claims.subject:
        raise AuthError("Token missing subject")
    if not claims.roles:
        raise AuthError("Token missing required roles", error="Forbidden", forbidden=True)

    return User(
        user_id=claims.subject,
        email=claims.email or "",
        roles=claims.roles,
        profile_id=claims.profile_id,
    )


def require_roles(roles: list[Role | str]) -> Callable[[User], User]:
    """Build a dependency that admits users holding any of ``roles``.

    Role names are checked when the route module is imported, so a typo
    fails at startup instead of locking every caller out.
    """
    wanted = {Role(role).value for role in roles}
    disabled = wanted - set(get_settings().allowed_roles)
    if disabled:
        raise ValueError(f"Role(s) not enabled: {', '.join(sorted(disabled))}")

    def dependency(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if wanted.isdisjoint(user.roles):
            raise AuthError("Insufficient role privileges", error="Forbidden", forbidden=True)
        return user

    return dependency


def issue_smoke_token(
    user_id: str,
    *,
    role: Role,
    email: str | None = None,
    profile_id: str | None = None,
) -> str:
    """Sign a token for manual testing against a running portal."""
    return create_access_token(user_id, roles=[role.value], email=email, profile_id=profile_id)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


# Overridden in tests so no request reaches OpenAI or Resend.
def get_profile_analyzer() -> ProfileAnalyzer:
    return GPTProfileAnalyzer()


def get_admin_notifier() -> AdminNotifier:
    return EmailAdminNotifier()

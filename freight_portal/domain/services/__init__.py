"""Domain services."""

from freight_portal.domain.services.admin_review import AdminReviewService
from freight_portal.domain.services.auth_service import AuthService
from freight_portal.domain.services.profile_service import ProfileService
from freight_portal.domain.services.registration import (
    RegistrationResult,
    RegistrationService,
)

__all__ = [
    "AdminReviewService",
    "AuthService",
    "ProfileService",
    "RegistrationResult",
    "RegistrationService",
]

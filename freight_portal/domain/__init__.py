from freight_portal.domain.models import (
    DocumentCompleteness,
    DocumentSlot,
    ProfileKind,
    User,
    document_completeness,
)

__all__ = [
    "DocumentCompleteness",
    "DocumentSlot",
    "ProfileKind",
    "User",
    "document_completeness",
]

"""Error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations

from typing import Any


class PortalError(Exception):
    """Base error carrying a short label, a caller-facing message and an HTTP status."""

    status_code: int = 500
    default_error: str = "Request failed"

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error or self.default_error

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.message}


class PortalValidationError(PortalError):
    """Missing or malformed fields."""

    status_code = 400
    default_error = "Validation failed"

    def __init__(
        self,
        message: str,
        *,
        error: str | None = None,
        missing_fields: list[str] | None = None,
    ) -> None:
        super().__init__(message, error=error)
        self.missing_fields = missing_fields

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.missing_fields is not None:
            data["missingFields"] = list(self.missing_fields)
        return data


class ConflictError(PortalError):
    """Duplicate of an existing record (e.g. an email already registered)."""

    status_code = 409
    default_error = "Conflict"


class AuthError(PortalError):
    """Unauthenticated caller, or a role not allowed to perform the operation."""

    status_code = 401
    default_error = "Unauthorized"

    def __init__(self, message: str, *, error: str | None = None, forbidden: bool = False) -> None:
        super().__init__(message, error=error)
        if forbidden:
            self.status_code = 403


class NotFoundError(PortalError):
    """Operation targets a profile or user that does not exist."""

    status_code = 404
    default_error = "Not found"


class UnexpectedError(PortalError):
    """Store unavailable, encoding failure and anything else the caller cannot fix."""

    status_code = 500
    default_error = "Unexpected error"


_ERRORS_BY_STATUS: dict[int, type[PortalError]] = {
    400: PortalValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    409: ConflictError,
}


def error_from_response(status_code: int, body: dict[str, Any] | None) -> PortalError:
    """Rebuild a ``PortalError`` from an HTTP error response body."""
    body = body or {}
    message = str(body.get("message") or body.get("detail") or body.get("error") or "Request failed")
    error = body.get("error") if isinstance(body.get("error"), str) else None
    error_cls = _ERRORS_BY_STATUS.get(status_code, UnexpectedError)

    if error_cls is PortalValidationError:
        return PortalValidationError(
            message, error=error, missing_fields=body.get("missingFields")
        )
    if error_cls is AuthError:
        return AuthError(message, error=error, forbidden=status_code == 403)
    return error_cls(message, error=error)

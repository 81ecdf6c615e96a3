"""
Document upload encoding.

Uploaded compliance documents are stored inline on the profile record as
base64 data URLs, so every upload is bounded by a fixed size limit.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

import structlog
from freight_portal.core.config import get_settings
from freight_portal.domain.errors import PortalValidationError, UnexpectedError

logger = structlog.get_logger(__name__)

ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(
    {
        "application/pdf",
        "image/jpeg",
        "image/jpg",
        "image/png",
    }
)

_DATA_URL_RE = re.compile(r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.S)


@dataclass(slots=True)
class EncodedDocument:
    url: str
    file_name: str
    file_type: str
    size: int

    def as_dict(self) -> dict[str, object]:
        return {
            "success": True,
            "url": self.url,
            "fileName": self.file_name,
            "fileType": self.file_type,
            "size": self.size,
        }


def max_upload_bytes() -> int:
    return get_settings().max_upload_bytes


def validate_document(*, size: int, content_type: str | None, max_bytes: int | None = None) -> None:
    """Reject oversized or unsupported files. Size is checked first."""
    limit = max_bytes if max_bytes is not None else max_upload_bytes()
    if size > limit:
        raise PortalValidationError(
            f"File size exceeds {limit // (1024 * 1024)}MB limit",
            error="File too large",
        )
    if (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
        raise PortalValidationError(
            "Invalid file type. Only PDF, JPG, and PNG files are allowed.",
            error="Invalid file type",
        )


def encode_document(
    *,
    file_name: str,
    content_type: str | None,
    data: bytes,
    max_bytes: int | None = None,
) -> EncodedDocument:
    """Validate an uploaded file and turn it into an inline data URL."""
    if not data:
        raise PortalValidationError("No file provided", error="No file provided")

    validate_document(size=len(data), content_type=content_type, max_bytes=max_bytes)
    media_type = (content_type or "").lower()

    try:
        encoded = base64.b64encode(data).decode("ascii")
    except (TypeError, ValueError) as exc:
        raise UnexpectedError("Could not encode the uploaded file", error="Upload failed") from exc

    logger.info(
        "document_encoded",
        file_name=file_name,
        file_type=media_type,
        size_kb=round(len(data) / 1024, 2),
    )
    return EncodedDocument(
        url=f"data:{media_type};base64,{encoded}",
        file_name=file_name,
        file_type=media_type,
        size=len(data),
    )


def decode_data_url(url: str) -> tuple[str, bytes]:
    """Split a stored data URL back into its media type and raw bytes."""
    match = _DATA_URL_RE.match(url or "")
    if match is None:
        raise PortalValidationError("Document is not an inline data URL", error="Invalid document")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PortalValidationError(
            "Document data is not valid base64", error="Invalid document"
        ) from exc
    return match.group("media_type"), data

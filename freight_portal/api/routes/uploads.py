"""Standalone document upload: validate and hand back an inline data URL."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from freight_portal.api.deps import require_roles
from freight_portal.api.schemas.common import ErrorResponse
from freight_portal.api.schemas.uploads import UploadResponse
from freight_portal.core.auth import Role
from freight_portal.domain import User
from freight_portal.domain.errors import PortalValidationError
from freight_portal.domain.services.documents import (
    EncodedDocument,
    encode_document,
    max_upload_bytes,
)

router = APIRouter(tags=["Uploads"])


async def read_upload(file: UploadFile | None) -> EncodedDocument:
    """Read at most one byte past the limit so oversized bodies fail fast."""
    if file is None:
        raise PortalValidationError("No file provided", error="No file provided")

    limit = max_upload_bytes()
    try:
        data = await file.read(limit + 1)
    finally:
        await file.close()

    return encode_document(
        file_name=file.filename or "upload",
        content_type=file.content_type,
        data=data,
        max_bytes=limit,
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse, "description": "Missing, oversized or unsupported file"}},
    summary="Upload a compliance document",
)
async def upload_document(
    file: UploadFile | None = File(None),
    _user: User = Depends(require_roles([Role.CARRIER, Role.SHIPPER])),
) -> UploadResponse:
    document = await read_upload(file)
    return UploadResponse(
        url=document.url,
        file_name=document.file_name,
        file_type=document.file_type,
        size=document.size,
    )

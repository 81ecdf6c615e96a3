"""Pydantic schemas for document uploads."""

from __future__ import annotations

from .common import CamelModel
from .profiles import DocumentCompletenessOut


class UploadResponse(CamelModel):
    success: bool = True
    url: str
    file_name: str
    file_type: str
    size: int


class SlotUploadResponse(CamelModel):
    success: bool = True
    slot: str
    file_name: str
    file_type: str
    size: int
    document_completeness: DocumentCompletenessOut

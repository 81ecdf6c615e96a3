"""Unit tests for upload validation and data URL encoding."""

from __future__ import annotations

import pytest
from freight_portal.domain.errors import PortalValidationError
from freight_portal.domain.models import ProfileKind, document_completeness
from freight_portal.domain.services.documents import (
    decode_data_url,
    encode_document,
    validate_document,
)

from tests.utils import PDF_BYTES


class TestValidateDocument:
    def test_accepts_allowed_types(self) -> None:
        for content_type in ("application/pdf", "image/jpeg", "image/jpg", "image/png"):
            validate_document(size=10, content_type=content_type, max_bytes=100)

    def test_rejects_unknown_type(self) -> None:
        with pytest.raises(PortalValidationError) as excinfo:
            validate_document(size=10, content_type="text/plain", max_bytes=100)

        assert excinfo.value.error == "Invalid file type"

    def test_size_checked_before_type(self) -> None:
        with pytest.raises(PortalValidationError) as excinfo:
            validate_document(size=101, content_type="text/plain", max_bytes=100)

        assert excinfo.value.error == "File too large"

    def test_limit_is_inclusive(self) -> None:
        validate_document(size=100, content_type="image/png", max_bytes=100)

    def test_default_limit_is_five_mib(self) -> None:
        validate_document(size=5 * 1024 * 1024, content_type="application/pdf")
        with pytest.raises(PortalValidationError):
            validate_document(size=6 * 1024 * 1024, content_type="application/pdf")


class TestEncodeDocument:
    def test_encode_then_decode(self) -> None:
        document = encode_document(file_name="w9.pdf", content_type="application/pdf", data=PDF_BYTES)

        assert document.url.startswith("data:application/pdf;base64,")
        assert document.size == len(PDF_BYTES)
        assert document.as_dict()["fileName"] == "w9.pdf"
        assert decode_data_url(document.url) == ("application/pdf", PDF_BYTES)

    def test_empty_file_rejected(self) -> None:
        with pytest.raises(PortalValidationError) as excinfo:
            encode_document(file_name="w9.pdf", content_type="application/pdf", data=b"")

        assert excinfo.value.error == "No file provided"

    def test_decode_rejects_plain_urls(self) -> None:
        with pytest.raises(PortalValidationError):
            decode_data_url("https://files.example/w9.pdf")

    def test_decode_rejects_bad_base64(self) -> None:
        with pytest.raises(PortalValidationError):
            decode_data_url("data:application/pdf;base64,@@@")


class TestCompleteness:
    def test_counts_only_known_filled_slots(self) -> None:
        completeness = document_completeness(
            ProfileKind.CARRIER, {"w9": "data:x", "coi": None, "creditApp": "data:y"}
        )

        assert (completeness.uploaded, completeness.total) == (1, 3)

    def test_empty_documents(self) -> None:
        assert document_completeness(ProfileKind.SHIPPER, None).as_dict() == {
            "uploaded": 0,
            "total": 3,
            "ratio": 0.0,
        }

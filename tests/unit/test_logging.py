from __future__ import annotations

import logging

import pytest
from freight_portal.core.logging import resolve_level


def test_resolve_level_accepts_names_and_numbers() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR


def test_resolve_level_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        resolve_level("chatty")

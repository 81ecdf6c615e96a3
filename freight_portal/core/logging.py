"""
structlog setup shared by the API process and the maintenance scripts.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Third-party loggers that are chatty at INFO; pinned to WARNING unless the
# portal itself runs at DEBUG.
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "passlib")

_configured_level: int | None = None


def resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(level: int | str = logging.INFO, *, json_logs: bool = True) -> None:
    """Configure stdlib logging and structlog once per process.

    ``json_logs=False`` uses the console renderer for local runs.
    """
    global _configured_level
    numeric_level = resolve_level(level)
    if _configured_level is not None:
        return

    logging.basicConfig(level=numeric_level, format="%(message)s", stream=sys.stdout)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
    ]
    if json_logs:
        tail: list[Any] = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        tail = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=shared + tail,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )
    _configured_level = numeric_level

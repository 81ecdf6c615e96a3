from __future__ import annotations

import time
from datetime import UTC, datetime

import structlog
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from freight_portal.core.config import get_settings
from freight_portal.infrastructure.db.session import get_session_factory

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


async def check_database() -> dict:
    """Run ``SELECT 1`` and report status with round-trip latency."""
    started = time.perf_counter()
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, RuntimeError) as exc:
        return {"status": "error", "message": str(exc)[:100]}
    return {"status": "ok", "latencyMs": round((time.perf_counter() - started) * 1000, 2)}


@router.get("/health", summary="Service health probe")
async def health_check() -> dict:
    settings = get_settings()
    database = await check_database()
    healthy = database["status"] == "ok"

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "status": "ok" if healthy else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {"database": database},
    }
    if healthy:
        logger.info("health_probe", status=payload["status"])
    else:
        logger.warning("health_probe_degraded", database=database)
    return payload

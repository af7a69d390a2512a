# 📄 File: app/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# Tiny public pages that let load balancers and monitors ask "is the plant care service alive?"
# and "can it reach its database right now?".
# 🧪 Purpose (Technical Summary):
# Unauthenticated liveness and readiness endpoints. Readiness runs a SELECT 1 through the
# session manager under the request timeout and answers 503 when that fails.
# 🔗 Dependencies:
# FastAPI, SQLAlchemy, app.shared.infrastructure.database.session, app.shared.config.settings
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, container orchestrator probes, uptime monitors

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.shared.config.settings import get_settings
from app.shared.core.exceptions import PlantCareException
from app.shared.infrastructure.database.session import run_with_timeout, session_manager

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health Check"])

_started_at = datetime.now(timezone.utc)


def _not_ready(database: str) -> JSONResponse:
    return JSONResponse(status_code=503, content={"status": "not_ready", "database": database})


@health_router.get("/health", summary="Service status")
async def health_check() -> JSONResponse:
    """Static process information; never touches the database."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    return JSONResponse(content={
        "status": "healthy",
        "timestamp": now.isoformat(),
        "service": "plant-care-api",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "uptime_seconds": int((now - _started_at).total_seconds()),
    })


@health_router.get("/health/live", summary="Liveness probe")
async def liveness_probe() -> Response:
    return Response(status_code=200)


@health_router.get("/health/ready",
                   summary="Readiness probe",
                   description="200 once the database answers, 503 otherwise")
async def readiness_probe() -> JSONResponse:
    if not session_manager.is_initialized():
        return _not_ready("uninitialized")

    try:
        async with session_manager.get_session() as session:
            await run_with_timeout(session.execute(text("SELECT 1")), "readiness_probe")
    except PlantCareException as e:
        logger.warning(f"Readiness probe failed: {e.message}")
        return _not_ready("unhealthy")

    return JSONResponse(content={"status": "ready", "database": "healthy"})

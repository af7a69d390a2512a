# 📄 File: app/main.py
#
# 🧭 Purpose (Layman Explanation):
# Switches the plant care backend on and off: opens the database, starts the cleaners that
# remove forgotten photos and stale rate-limit counters, plugs in every API route, and turns
# any failure into the same friendly error message for the mobile app.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: lifespan (logging, database, periodic tasks,
# client cleanup), middleware stack, router registration and the exception handlers that
# render every failure as {"error": {code, message, details, timestamp, request_id}}.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - app.shared.config (settings, identity client)
# - app.shared.infrastructure (database session manager, object store)
# - app.shared.core (exceptions, periodic tasks, rate limiter)
# - app.api.v1.router
#
# 🔄 Connected Modules / Calls From:
# - uvicorn (`uvicorn app.main:app`)
# - `plantcare-api` console script
# - tests (ASGI transport)

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, List, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app.api.middleware.logging import RequestContextMiddleware, get_request_id
from app.api.v1.router import api_v1_router
from app.modules.plants.infrastructure.database.plant_repository_impl import PlantRepositoryImpl
from app.modules.uploads.domain.services.upload_service import UploadService
from app.modules.uploads.infrastructure.database.upload_repository_impl import UploadRepositoryImpl
from app.shared.config.settings import Settings, get_settings
from app.shared.config.supabase import cleanup_supabase
from app.shared.core.exceptions import (
    PlantCareException,
    RateLimitError,
    StoreUnavailableError,
    ValidationError,
)
from app.shared.core.rate_limiter import get_rate_limiter
from app.shared.core.tasks import PeriodicTask
from app.shared.core.validation import FieldError
from app.shared.infrastructure.database.session import session_manager
from app.shared.infrastructure.storage.object_store import cleanup_object_store, get_object_store
from app.shared.utils.logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


# =========================================================================
# BACKGROUND JOBS
# =========================================================================

async def sweep_orphaned_uploads() -> int:
    """Delete uploads older than the retention window that no plant references."""
    current = get_settings()
    object_store = await get_object_store()
    async with session_manager.get_session() as session:
        service = UploadService(
            upload_repository=UploadRepositoryImpl(session),
            object_store=object_store,
            plant_repository=PlantRepositoryImpl(session),
            settings=current,
        )
        removed = await service.cleanup_orphaned_uploads(
            older_than=timedelta(seconds=current.ORPHAN_RETENTION_SECONDS),
            # Leave headroom so the sweep stops by itself before wait_for cancels it
            budget_seconds=current.ORPHAN_CLEANUP_BUDGET_SECONDS * 0.9,
        )
    return removed


async def evict_rate_limiter_entries() -> int:
    return get_rate_limiter().evict_stale(get_settings().RATE_LIMIT_IDLE_SECONDS)


def build_periodic_tasks(current: Settings) -> List[PeriodicTask]:
    tasks = [
        PeriodicTask(
            name="rate-limiter-eviction",
            interval=current.RATE_LIMIT_EVICTION_SECONDS,
            job=evict_rate_limiter_entries,
        )
    ]
    if current.ORPHAN_CLEANUP_ENABLED:
        tasks.append(PeriodicTask(
            name="orphan-upload-cleanup",
            interval=current.ORPHAN_CLEANUP_INTERVAL_SECONDS,
            job=sweep_orphaned_uploads,
            run_budget=current.ORPHAN_CLEANUP_BUDGET_SECONDS,
        ))
    return tasks



@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database and background tasks for the lifetime of the server."""
    setup_logging()
    logger.info(f"🌱 {settings.APP_NAME} {settings.APP_VERSION} booting ({settings.ENVIRONMENT})")

    await session_manager.initialize(create_tables=True)

    tasks = build_periodic_tasks(settings)
    for task in tasks:
        task.start()
    logger.info(f"✅ Ready with {len(tasks)} background task(s): {', '.join(task.name for task in tasks)}")

    try:
        yield
    finally:
        logger.info("🔄 Stopping background tasks and closing clients")
        for task in tasks:
            await task.stop()

        await session_manager.close()
        await cleanup_supabase()
        await cleanup_object_store()
        logger.info("✅ Shutdown complete")


# =========================================================================
# ERROR RENDERING
# =========================================================================

def _render(request: Request, exc: PlantCareException, headers: Optional[dict] = None) -> JSONResponse:
    error = exc.to_dict()
    if isinstance(exc, StoreUnavailableError):
        # Driver details stay in the logs
        error["details"] = {}
    error["timestamp"] = datetime.now(timezone.utc).isoformat()
    error["request_id"] = get_request_id(request) or None
    return JSONResponse(status_code=exc.status_code, content={"error": error}, headers=headers)


def _field_path(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the handlers that give every error response the same envelope.

    Domain exceptions keep their own status and code. FastAPI's request
    validation is reshaped into the field error list used by the services,
    and anything unexpected becomes an opaque 500.
    """

    @app.exception_handler(PlantCareException)
    async def plant_care_error(request: Request, exc: PlantCareException) -> JSONResponse:
        where = f"{request.method} {request.url.path}"
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {where}: {exc.message}")
        elif not isinstance(exc, ValidationError):
            logger.info(f"{exc.error_code} on {where}: {exc.message}")

        headers = None
        if isinstance(exc, RateLimitError):
            headers = {"Retry-After": str(exc.retry_after)}
        return _render(request, exc, headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            FieldError(_field_path(error.get("loc", ())), error.get("msg", "Invalid value"))
            for error in exc.errors()
        ]
        return _render(request, ValidationError(errors=errors))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}", exc_info=True)
        details = {"error_type": type(exc).__name__} if settings.DEBUG else None
        return _render(request, PlantCareException(details=details))


# =========================================================================
# APPLICATION FACTORY
# =========================================================================

def create_application() -> FastAPI:
    """
    Build the FastAPI app: middleware, the versioned API router and error handlers.

    Returns:
        FastAPI: The configured application; lifespan work runs only once served.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.ENABLE_SWAGGER_UI else None,
        redoc_url="/redoc" if settings.ENABLE_REDOC else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # Added last runs first: request ids must exist before anything logs
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(api_v1_router, prefix="/api/v1")
    register_exception_handlers(app)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_application()


def main():
    """Console entry point (`plantcare-api`); reload only in development."""
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

"""
Shared test fixtures for the plant care backend test suite.

Provides:
- In-memory SQLite database (aiosqlite) with all tables created
- Repository instances wired to a test session
- An in-memory object store with failure injection (see fakes.py)
- An httpx client over the ASGI app with the principal, object store and
  rate limiter dependencies overridden

Usage:
    async def test_example(plant_repository, principal):
        plants = await plant_repository.get_all(principal.user_id)
"""

import logging
import os
from datetime import datetime, timezone

# Settings are read on first import of the app package
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import httpx
import pytest
from fastapi import Request

from app.main import app
from app.modules.notifications.infrastructure.database.notification_repository_impl import (
    NotificationConfigRepositoryImpl,
)
from app.modules.plants.domain.services.plant_service import PlantService
from app.modules.plants.infrastructure.database.plant_repository_impl import PlantRepositoryImpl
from app.modules.uploads.domain.services.upload_service import UploadService
from app.modules.uploads.infrastructure.database.upload_repository_impl import UploadRepositoryImpl
from app.shared.config.database import DatabaseConfig
from app.shared.config.settings import get_settings
from app.shared.core.dependencies import Principal, get_current_principal
from app.shared.core.rate_limiter import InMemoryRateLimiter, RateLimitRule, get_rate_limiter
from app.shared.infrastructure.database.session import session_manager
from app.shared.infrastructure.storage.object_store import ObjectStore, get_object_store
from fakes import OTHER_USER_ID, TEST_USER_HEADER, USER_ID, FakeObjectStore

# ---------------------------------------------------------------------------
# Logging: keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("app").setLevel(logging.WARNING)

# ========================== Basic Fixtures =================================


@pytest.fixture()
def settings():
    return get_settings()


@pytest.fixture()
def principal() -> Principal:
    return Principal(user_id=USER_ID, email="alice@example.com")


@pytest.fixture()
def other_principal() -> Principal:
    return Principal(user_id=OTHER_USER_ID, email="bob@example.com")


@pytest.fixture()
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture()
def now() -> datetime:
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


# ========================== Database Fixtures ==============================


@pytest.fixture()
async def db_config():
    """In-memory SQLite database with all tables created.

    Each test gets a fresh database.
    """
    config = DatabaseConfig(url="sqlite+aiosqlite:///:memory:")
    await config.create_tables()
    yield config
    await config.close_async_engine()


@pytest.fixture()
async def db_session(db_config):
    factory = db_config.create_async_session_factory()
    async with factory() as session:
        yield session
        await session.rollback()


# ========================== Repository Fixtures ============================


@pytest.fixture()
def plant_repository(db_session):
    return PlantRepositoryImpl(db_session)


@pytest.fixture()
def upload_repository(db_session):
    return UploadRepositoryImpl(db_session)


@pytest.fixture()
def notification_repository(db_session):
    return NotificationConfigRepositoryImpl(db_session)


# ========================== Service Fixtures ===============================


@pytest.fixture()
def plant_service(plant_repository, object_store, settings):
    return PlantService(plant_repository, object_store=object_store, settings=settings)


@pytest.fixture()
def upload_service(upload_repository, plant_repository, object_store, settings):
    return UploadService(
        upload_repository=upload_repository,
        object_store=object_store,
        plant_repository=plant_repository,
        settings=settings,
    )


# ========================== API Fixtures ===================================


@pytest.fixture()
def rate_limiter() -> InMemoryRateLimiter:
    return InMemoryRateLimiter(
        user_rule=RateLimitRule(limit=100, window_seconds=60),
        ip_rule=RateLimitRule(limit=1000, window_seconds=60),
    )


@pytest.fixture()
async def client(db_config, object_store, rate_limiter):
    """httpx client over the ASGI app; the caller is chosen with the X-Test-User header."""

    async def _principal(request: Request) -> Principal:
        user_id = request.headers.get(TEST_USER_HEADER, USER_ID)
        request.state.user_id = user_id
        return Principal(user_id=user_id, email=f"{user_id}@example.com")

    async def _object_store() -> ObjectStore:
        return object_store

    await session_manager.initialize(config=db_config)
    app.dependency_overrides[get_current_principal] = _principal
    app.dependency_overrides[get_object_store] = _object_store
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client

    app.dependency_overrides.clear()
    await session_manager.close()

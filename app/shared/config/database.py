# 📄 File: app/shared/config/database.py
#
# 🧭 Purpose (Layman Explanation):
# Decides how the app talks to its database: which driver, how many connections to keep
# open, and the shared blueprint every plant, upload and reminder table is built from.
#
# 🧪 Purpose (Technical Summary):
# Lazily builds one SQLAlchemy AsyncEngine plus session factory per DatabaseConfig.
# PostgreSQL (asyncpg) gets a tuned connection pool; SQLite (aiosqlite) URLs share a
# single StaticPool connection so in-memory databases survive across sessions.
# DatabaseBase carries the constraint naming convention for every table.
#
# 🔗 Dependencies:
# - SQLAlchemy asyncio extension and declarative ORM
# - asyncpg / aiosqlite drivers (selected by URL)
# - app.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - app.shared.infrastructure.database.session (SessionManager)
# - modules/*/infrastructure/database/models.py
# - tests/conftest.py

from typing import Any, Dict, Optional

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool, StaticPool

from .settings import Settings, get_settings


class DatabaseBase(DeclarativeBase):
    """Declarative base for every table of the application."""

    metadata = MetaData(naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    })


class DatabaseConfig:
    """
    Owner of the async engine for one database URL.

    Args:
        settings: Settings to read pool sizes from; the process settings by default
        url: Explicit URL, mainly for tests; falls back to ``settings.database_url``
    """

    def __init__(self, settings: Optional[Settings] = None, url: Optional[str] = None):
        self.settings = settings or get_settings()
        self.url = url or self.settings.database_url
        self._engine: Optional[AsyncEngine] = None
        self._sessions: Optional[async_sessionmaker[AsyncSession]] = None

    def _engine_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"echo": self.settings.DEBUG and self.settings.is_development}

        if self.url.startswith("sqlite"):
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
            return options

        server_settings = {
            "application_name": f"{self.settings.APP_NAME}_{self.settings.ENVIRONMENT}",
            "jit": "off",
        }
        connect_args: Dict[str, Any] = {"server_settings": server_settings}

        if self.settings.is_testing:
            options["poolclass"] = NullPool
        else:
            options.update(
                pool_size=self.settings.DB_POOL_SIZE,
                max_overflow=self.settings.DB_MAX_OVERFLOW,
                pool_timeout=self.settings.DB_POOL_TIMEOUT,
                pool_recycle=self.settings.DB_POOL_RECYCLE,
                pool_pre_ping=True,
            )

        if self.settings.is_production:
            connect_args["command_timeout"] = 30
            server_settings.update(
                timezone="UTC",
                statement_timeout="300000",
                idle_in_transaction_session_timeout="300000",
            )

        options["connect_args"] = connect_args
        return options

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.url, **self._engine_options())
        return self._engine

    def create_async_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._sessions is None:
            self._sessions = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._sessions

    async def create_tables(self) -> None:
        """Create any table registered on DatabaseBase that does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(DatabaseBase.metadata.create_all)

    async def close_async_engine(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessions = None

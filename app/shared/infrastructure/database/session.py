# 📄 File: app/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Hands every request and background sweep its own short conversation with the database,
# saving the changes when the work succeeds and throwing them away when it does not.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy session management with a FastAPI dependency, commit/rollback handling,
# translation of driver failures into StoreUnavailableError, and a per-call timeout helper
# so store round trips honour the request budget.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - app.shared.config.database (DatabaseConfig)
# - app.shared.core.exceptions
#
# 🔄 Connected Modules / Calls From:
# - Module presentation dependencies (repository construction per request)
# - Background sweeps (app.main lifespan) opening their own sessions
# - Repository implementations (run_with_timeout)

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Optional, TypeVar

from sqlalchemy import exc
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.shared.config.database import DatabaseConfig
from app.shared.config.settings import get_settings
from app.shared.core.exceptions import PlantCareException, RequestTimeoutError, StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseSessionManager:
    """
    Process-wide owner of the session factory.

    One session per unit of work: committed on success, rolled back on any error.
    """

    def __init__(self):
        self._config: Optional[DatabaseConfig] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._initialized = False

    async def initialize(self, config: Optional[DatabaseConfig] = None, create_tables: bool = False) -> None:
        """
        Build the engine and session factory; safe to call again after close().

        Args:
            config: Database configuration; defaults to one built from settings
            create_tables: Create missing tables on the shared metadata
        """
        self._config = config or DatabaseConfig()
        try:
            self._session_factory = self._config.create_async_session_factory()
            if create_tables:
                await self._config.create_tables()
        except exc.SQLAlchemyError as e:
            logger.error(f"Database unreachable during startup: {e}")
            raise StoreUnavailableError(operation="initialize") from e

        self._initialized = True
        logger.info(f"Database ready ({self._config.url.split(':', 1)[0]})")

    async def close(self) -> None:
        if self._config is not None:
            await self._config.close_async_engine()
        self._session_factory = None
        self._initialized = False
        logger.info("Database engine disposed")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session scoped to the `async with` block.

        Yields:
            AsyncSession: Committed when the block exits normally

        Raises:
            StoreUnavailableError: If the session cannot be used or a driver error occurs
        """
        if not self._initialized or self._session_factory is None:
            raise StoreUnavailableError(message="Session manager not initialized")

        session: AsyncSession = self._session_factory()

        try:
            yield session
            await session.commit()

        except exc.SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Transaction rolled back after driver error: {e}")
            raise StoreUnavailableError() from e

        except BaseException:
            await session.rollback()
            raise

        finally:
            await session.close()

    def is_initialized(self) -> bool:
        return self._initialized


session_manager = DatabaseSessionManager()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; the repositories of one request share it."""
    async with session_manager.get_session() as session:
        yield session


async def run_with_timeout(
    awaitable: Awaitable[T],
    operation: str,
    timeout: Optional[float] = None
) -> T:
    """
    Await a store round trip under the configured request timeout.

    Args:
        awaitable: The pending store call
        operation: Name used for logging and the error payload
        timeout: Override in seconds; defaults to REQUEST_TIMEOUT_SECONDS

    Returns:
        Whatever the awaitable returns

    Raises:
        RequestTimeoutError: When the call does not finish in time
        StoreUnavailableError: When the driver raises
    """
    if timeout is None:
        timeout = get_settings().REQUEST_TIMEOUT_SECONDS

    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.warning(f"Store operation '{operation}' timed out after {timeout}s")
        raise RequestTimeoutError(operation=operation, timeout_seconds=timeout) from e
    except PlantCareException:
        raise
    except exc.SQLAlchemyError as e:
        logger.error(f"Store operation '{operation}' failed: {e}")
        raise StoreUnavailableError(operation=operation) from e

# 📄 File: app/modules/stats/domain/services/stats_cache.py
# 🧭 Purpose (Layman Explanation):
# Remembers the public user and plant counts for a few minutes so the landing page does not
# make the database count everything on every visit.
#
# 🧪 Purpose (Technical Summary):
# Single-entry TTL cache around an async loader. An asyncio.Lock collapses concurrent
# reloads into one; the clock is injectable for tests.
#
# 🔗 Dependencies:
# - asyncio, time
# - app.modules.stats.domain.models.stats
#
# 🔄 Connected Modules / Calls From:
# - app.modules.stats.presentation.dependencies

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Tuple

from app.modules.stats.domain.models.stats import StatsSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0

StatsLoader = Callable[[], Awaitable[StatsSnapshot]]


class StatsCache:
    """
    Holds one StatsSnapshot and reloads it once it is older than the TTL.

    Args:
        loader: Coroutine function producing a fresh snapshot
        ttl: Lifetime of a snapshot in seconds
        clock: Monotonic time source
    """

    def __init__(
        self,
        loader: StatsLoader,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self._loader = loader
        self._ttl = ttl
        self._clock = clock
        self._entry: Optional[Tuple[float, StatsSnapshot]] = None
        self._lock: Optional[asyncio.Lock] = None

    def _is_fresh(self) -> bool:
        return self._entry is not None and self._clock() - self._entry[0] < self._ttl

    async def get(self) -> StatsSnapshot:
        if self._is_fresh():
            return self._entry[1]

        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            # Another caller may have reloaded while we waited
            if self._is_fresh():
                return self._entry[1]
            snapshot = await self._loader()
            self._entry = (self._clock(), snapshot)
            logger.debug(f"Stats reloaded: users={snapshot.users} plants={snapshot.plants}")
            return snapshot

    def invalidate(self) -> None:
        self._entry = None

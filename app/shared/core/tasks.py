# 📄 File: app/shared/core/tasks.py
# 🧭 Purpose (Layman Explanation):
# Runs small housekeeping jobs on a timer in the background (for example, throwing away
# photos nobody uses) and stops them cleanly when the app shuts down.
# 🧪 Purpose (Technical Summary):
# PeriodicTask: a cancellable asyncio loop that runs a job every ``interval`` seconds, each
# run bounded by asyncio.wait_for(run_budget). Failures and timeouts are logged and the
# loop keeps going.
# 🔗 Dependencies:
# asyncio, logging, app.shared.utils.logging (log_context)
# 🔄 Connected Modules / Calls From:
# app.main lifespan (orphan upload sweep, rate limiter eviction)

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from app.shared.utils.logging import log_context

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[object]]


class PeriodicTask:
    """
    Background job executed on a fixed interval.

    The first run happens one ``interval`` after ``start()``.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        job: Job,
        run_budget: Optional[float] = None
    ):
        if interval <= 0:
            raise ValueError("Interval must be positive")
        self.name = name
        self.interval = interval
        self.run_budget = run_budget
        self._job = job
        self._task: Optional[asyncio.Task] = None
        self.runs = 0
        self.failures = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background loop (no-op when already running)."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop(), name=f"periodic:{self.name}")
        logger.info(f"Started periodic task '{self.name}' every {self.interval}s")

    async def stop(self) -> None:
        """Cancel the loop and wait for it to unwind."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info(f"Stopped periodic task '{self.name}'")

    async def run_once(self) -> None:
        """Run the job once under the run budget, logging instead of raising."""
        self.runs += 1
        with log_context(request_id=f"{self.name}-{self.runs}"):
            try:
                if self.run_budget:
                    await asyncio.wait_for(self._job(), timeout=self.run_budget)
                else:
                    await self._job()
            except asyncio.TimeoutError:
                self.failures += 1
                logger.warning(f"Periodic task '{self.name}' exceeded its {self.run_budget}s budget")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.failures += 1
                logger.error(f"Periodic task '{self.name}' failed: {e}", exc_info=True)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.run_once()

"""
Tests for the public stats snapshot cache.
"""

import asyncio

from app.modules.stats.domain.models.stats import StatsSnapshot
from app.modules.stats.domain.services.stats_cache import StatsCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class CountingLoader:
    def __init__(self):
        self.calls = 0

    async def __call__(self) -> StatsSnapshot:
        self.calls += 1
        await asyncio.sleep(0)
        return StatsSnapshot(users=self.calls, plants=self.calls * 10)


async def test_snapshot_is_reused_within_ttl():
    clock, loader = FakeClock(), CountingLoader()
    cache = StatsCache(loader, ttl=300, clock=clock)

    first = await cache.get()
    clock.now += 299
    second = await cache.get()

    assert first is second
    assert loader.calls == 1
    assert second.reminders == 0


async def test_snapshot_reloads_after_ttl():
    clock, loader = FakeClock(), CountingLoader()
    cache = StatsCache(loader, ttl=300, clock=clock)

    await cache.get()
    clock.now += 300
    snapshot = await cache.get()

    assert loader.calls == 2
    assert snapshot.plants == 20


async def test_invalidate_forces_reload():
    loader = CountingLoader()
    cache = StatsCache(loader, ttl=300, clock=FakeClock())

    await cache.get()
    cache.invalidate()
    await cache.get()

    assert loader.calls == 2


async def test_concurrent_callers_share_one_load():
    loader = CountingLoader()
    cache = StatsCache(loader, ttl=300, clock=FakeClock())

    snapshots = await asyncio.gather(*(cache.get() for _ in range(5)))

    assert loader.calls == 1
    assert {snapshot.users for snapshot in snapshots} == {1}

"""
Tests for background periodic tasks.
"""

import asyncio

import pytest

from app.shared.core.tasks import PeriodicTask


async def test_failures_are_counted_and_swallowed():
    async def broken():
        raise RuntimeError("bucket unreachable")

    task = PeriodicTask(name="broken", interval=60, job=broken)

    await task.run_once()
    await task.run_once()

    assert (task.runs, task.failures) == (2, 2)


async def test_run_budget_cancels_slow_jobs():
    async def slow():
        await asyncio.sleep(5)

    task = PeriodicTask(name="slow", interval=60, job=slow, run_budget=0.01)

    await task.run_once()

    assert task.failures == 1


async def test_loop_keeps_running_after_a_failure():
    calls = []

    async def flaky():
        calls.append(len(calls))
        if len(calls) == 1:
            raise RuntimeError("first run fails")

    task = PeriodicTask(name="flaky", interval=0.01, job=flaky)
    task.start()
    for _ in range(100):
        if len(calls) >= 3:
            break
        await asyncio.sleep(0.01)
    await task.stop()

    assert len(calls) >= 3
    assert task.failures == 1
    assert not task.is_running


def test_interval_must_be_positive():
    async def job():
        return None

    with pytest.raises(ValueError):
        PeriodicTask(name="bad", interval=0, job=job)

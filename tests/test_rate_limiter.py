"""
Tests for the in-memory fixed window rate limiter.
"""

import pytest

from app.shared.core.rate_limiter import InMemoryRateLimiter, RateLimitRule, parse_rate_limit


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_limiter(clock, user_limit=3, ip_limit=5, window=60):
    return InMemoryRateLimiter(
        user_rule=RateLimitRule(limit=user_limit, window_seconds=window),
        ip_rule=RateLimitRule(limit=ip_limit, window_seconds=window),
        clock=clock,
    )


@pytest.mark.parametrize("value, limit, window", [
    ("100/minute", 100, 60),
    ("10/second", 10, 1),
    ("1000/hours", 1000, 3600),
    ("5/Day", 5, 86400),
])
def test_parse_rate_limit(value, limit, window):
    assert parse_rate_limit(value) == RateLimitRule(limit=limit, window_seconds=window)


@pytest.mark.parametrize("value", ["100/fortnight", "0/minute", "minute", "x/minute"])
def test_parse_rate_limit_rejects_bad_values(value):
    with pytest.raises(ValueError):
        parse_rate_limit(value)


def test_user_limit():
    limiter = make_limiter(FakeClock())

    results = [limiter.is_rate_limited("alice", f"10.0.0.{index}") for index in range(4)]

    assert results == [False, False, False, True]
    assert limiter.is_rate_limited("bob", "10.0.0.9") is False


def test_ip_limit_applies_across_users_and_anonymous_callers():
    limiter = make_limiter(FakeClock(), user_limit=100, ip_limit=2)

    assert limiter.is_rate_limited("alice", "10.0.0.1") is False
    assert limiter.is_rate_limited(None, "10.0.0.1") is False
    assert limiter.is_rate_limited("bob", "10.0.0.1") is True
    assert limiter.is_rate_limited("bob", "10.0.0.2") is False


def test_window_resets():
    clock = FakeClock()
    limiter = make_limiter(clock, user_limit=1)

    assert limiter.is_rate_limited("alice", "10.0.0.1") is False
    assert limiter.is_rate_limited("alice", "10.0.0.1") is True

    clock.now += 60
    assert limiter.is_rate_limited("alice", "10.0.0.1") is False


def test_evict_stale_entries():
    clock = FakeClock()
    limiter = make_limiter(clock)
    limiter.is_rate_limited("alice", "10.0.0.1")
    clock.now += 500
    limiter.is_rate_limited("bob", "10.0.0.2")
    clock.now += 200

    assert limiter.evict_stale(600) == 2
    assert limiter.size() == 2

    clock.now += 1000
    assert limiter.evict_stale(600) == 2
    assert limiter.size() == 0


@pytest.mark.parametrize("window_seconds, name", [(1, "second"), (60, "minute"), (86400, "day"), (90, "90s")])
def test_window_name(window_seconds, name):
    assert RateLimitRule(limit=1, window_seconds=window_seconds).window_name == name

"""
Rate limiting implementation for Plant Care Application.
Provides per-user and per-address fixed window limits kept in process memory.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..config.settings import get_settings

logger = logging.getLogger(__name__)

PERIOD_SECONDS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
}


@dataclass(frozen=True)
class RateLimitRule:
    """Rate limiting rule configuration."""
    limit: int                # Maximum requests allowed per window
    window_seconds: int       # Window length

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError("Rate limit must be positive")
        if self.window_seconds <= 0:
            raise ValueError("Rate limit window must be positive")

    @property
    def window_name(self) -> str:
        """Period name of a standard window (minute, hour, day), "<n>s" otherwise."""
        for name, seconds in PERIOD_SECONDS.items():
            if seconds == self.window_seconds:
                return name
        return f"{self.window_seconds}s"


def parse_rate_limit(value: str) -> RateLimitRule:
    """
    Parse rate limit string into a rule.

    Args:
        value: Rate limit string (e.g., "100/minute", "10/second")

    Returns:
        RateLimitRule: Parsed rule
    """
    limit_str, period_str = value.split("/")
    period_str = period_str.strip().lower()
    if period_str.endswith("s"):
        period_str = period_str[:-1]
    if period_str not in PERIOD_SECONDS:
        raise ValueError(f"Invalid rate limit period: {period_str}")
    return RateLimitRule(limit=int(limit_str), window_seconds=PERIOD_SECONDS[period_str])


@dataclass
class _Window:
    started_at: float
    count: int = 0
    last_seen: float = 0.0


class InMemoryRateLimiter:
    """
    Fixed window rate limiter held in process memory.

    Each user id and each client address has its own window. A request is
    limited as soon as either counter goes over its rule. All state sits
    behind one lock so the limiter can be shared by every request handler.
    """

    def __init__(
        self,
        user_rule: RateLimitRule,
        ip_rule: RateLimitRule,
        clock: Callable[[], float] = time.monotonic
    ):
        self.user_rule = user_rule
        self.ip_rule = ip_rule
        self._clock = clock
        self._lock = threading.Lock()
        self._users: Dict[str, _Window] = {}
        self._ips: Dict[str, _Window] = {}

    def is_rate_limited(self, user_id: Optional[str], ip: str) -> bool:
        """
        Count one request for ``user_id`` and ``ip``.

        Args:
            user_id: Authenticated user, or None for anonymous callers
            ip: Client address

        Returns:
            bool: True when the request must be rejected
        """
        with self._lock:
            now = self._clock()

            if user_id:
                count = self._hit(self._users, user_id, self.user_rule, now)
                if count > self.user_rule.limit:
                    logger.warning(f"Rate limit exceeded for user {user_id}: {count} requests")
                    return True

            count = self._hit(self._ips, ip, self.ip_rule, now)
            if count > self.ip_rule.limit:
                logger.warning(f"Rate limit exceeded for IP {ip}: {count} requests")
                return True

            return False

    @staticmethod
    def _hit(windows: Dict[str, _Window], key: str, rule: RateLimitRule, now: float) -> int:
        window = windows.get(key)
        if window is None or now - window.started_at >= rule.window_seconds:
            window = _Window(started_at=now)
            windows[key] = window
        window.count += 1
        window.last_seen = now
        return window.count

    def evict_stale(self, max_idle_seconds: float) -> int:
        """
        Drop entries that saw no request for ``max_idle_seconds``.

        Returns:
            int: Number of entries removed
        """
        with self._lock:
            now = self._clock()
            removed = 0
            for windows in (self._users, self._ips):
                stale = [key for key, window in windows.items() if now - window.last_seen > max_idle_seconds]
                for key in stale:
                    del windows[key]
                removed += len(stale)

        if removed:
            logger.debug(f"Evicted {removed} idle rate limit entries")
        return removed

    def size(self) -> int:
        with self._lock:
            return len(self._users) + len(self._ips)


# Global rate limiter instance
_rate_limiter: Optional[InMemoryRateLimiter] = None


def get_rate_limiter() -> InMemoryRateLimiter:
    """
    Get global rate limiter instance.

    Returns:
        InMemoryRateLimiter: Rate limiter built from settings
    """
    global _rate_limiter
    if _rate_limiter is None:
        settings = get_settings()
        _rate_limiter = InMemoryRateLimiter(
            user_rule=parse_rate_limit(settings.USER_RATE_LIMIT),
            ip_rule=parse_rate_limit(settings.IP_RATE_LIMIT),
        )
    return _rate_limiter

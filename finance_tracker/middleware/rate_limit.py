"""Fixed-window request counters keyed by client address, one window per route group."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Protocol, Tuple

import redis
from fastapi import Request

from finance_tracker.config import Settings
from finance_tracker.core.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitStore(Protocol):
    def hit(self, key: str, window_seconds: int) -> Tuple[int, float]:
        """Count one request; return (requests in current window, seconds until reset)."""


class MemoryRateLimitStore:
    """In-process counters; expired windows are swept at most once per `sweep_interval`."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 60.0,
    ):
        self._clock = clock
        self._sweep_interval = sweep_interval
        # key -> (window start, count, window length)
        self._windows: Dict[str, Tuple[float, int, int]] = {}
        self._lock = threading.Lock()
        self._next_sweep = clock() + sweep_interval

    def __len__(self) -> int:
        return len(self._windows)

    def hit(self, key: str, window_seconds: int) -> Tuple[int, float]:
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            started, count, _ = self._windows.get(key, (now, 0, window_seconds))
            if now - started >= window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count, window_seconds)
        return count, window_seconds - (now - started)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _sweep(self, now: float) -> None:
        expired = [
            key
            for key, (started, _, window) in self._windows.items()
            if now - started >= window
        ]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self._sweep_interval
        if expired:
            logger.debug("Dropped expired rate limit windows", extra={"count": len(expired)})


class RedisRateLimitStore:
    def __init__(self, client: redis.Redis):
        self.client = client

    def hit(self, key: str, window_seconds: int) -> Tuple[int, float]:
        pipe = self.client.pipeline()
        pipe.incr(key)
        pipe.ttl(key)
        count, ttl = pipe.execute()
        if int(count) == 1 or ttl is None or int(ttl) < 0:
            self.client.expire(key, window_seconds)
            ttl = window_seconds
        return int(count), float(ttl)


def create_rate_limit_store(settings: Settings) -> RateLimitStore:
    if settings.RATE_LIMIT_REDIS_URL:
        logger.info("Using Redis rate limit counters")
        return RedisRateLimitStore(
            redis.from_url(settings.RATE_LIMIT_REDIS_URL, decode_responses=True)
        )
    return MemoryRateLimitStore()


class RateLimiter:
    """Route-group dependency; `limit_setting`/`window_setting` name Settings fields."""

    def __init__(self, scope: str, limit_setting: str, window_setting: str, message: str):
        self.scope = scope
        self.limit_setting = limit_setting
        self.window_setting = window_setting
        self.message = message

    def __call__(self, request: Request) -> None:
        settings: Settings = request.app.state.settings
        if not settings.RATE_LIMIT_ENABLED:
            return

        limit: int = getattr(settings, self.limit_setting)
        window: int = getattr(settings, self.window_setting)
        store: RateLimitStore = request.app.state.rate_limit_store

        client = _client_address(request)
        count, reset_in = store.hit(f"ratelimit:{self.scope}:{client}", window)
        if count > limit:
            logger.warning(
                "Rate limit exceeded",
                extra={"scope": self.scope, "client_ip": client, "count": count},
            )
            raise RateLimitExceededError(self.message, retry_after=max(1, int(reset_in)))


def _client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


auth_limiter = RateLimiter(
    "auth",
    "AUTH_RATE_LIMIT",
    "AUTH_RATE_WINDOW_SECONDS",
    "Too many authentication attempts, try again later",
)
transaction_limiter = RateLimiter(
    "transactions",
    "TRANSACTION_RATE_LIMIT",
    "TRANSACTION_RATE_WINDOW_SECONDS",
    "Too many transactions requests, try again later",
)
analytics_limiter = RateLimiter(
    "analytics",
    "ANALYTICS_RATE_LIMIT",
    "ANALYTICS_RATE_WINDOW_SECONDS",
    "Too many analytics requests, try again later",
)

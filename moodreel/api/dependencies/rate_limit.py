"""Rate limiting dependency for FastAPI.

In-memory token buckets per client IP, one refilled per minute and one
refilled per hour. A request must obtain a token from both.
"""

import math
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from threading import Lock
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from moodreel.settings import settings

# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class RateLimitBucket:
    """Tokens left for one client in one window, as of ``last_update``."""

    tokens: float
    last_update: float = field(default_factory=time.monotonic)


@dataclass(frozen=True)
class RateWindow:
    """Capacity of a bucket and the period over which it refills."""

    capacity: int
    period_seconds: float

    @property
    def refill_rate(self) -> float:
        return self.capacity / self.period_seconds


# =============================================================================
# RATE LIMITER
# =============================================================================


class RateLimiter:
    """Per-client token buckets guarded by a lock.

    Tokens are only consumed when every window allows the
    request, so a rejected request does not drain the other buckets.

    Clients are kept in least-recently-seen order. A client idle for the
    longest window period has full buckets again and is forgotten, and
    at most ``max_clients`` clients are tracked at once.
    """

    def __init__(
        self,
        per_minute: int,
        per_hour: int | None = None,
        max_clients: int = 10_000,
    ) -> None:
        """A falsy ``per_hour`` disables the hourly window."""
        self._windows = [RateWindow(per_minute, 60.0)]
        if per_hour:
            self._windows.append(RateWindow(per_hour, 3600.0))
        self._idle_after = max(w.period_seconds for w in self._windows)
        self._max_clients = max_clients
        self._buckets: OrderedDict[str, list[RateLimitBucket]] = OrderedDict()
        self._lock = Lock()

    def is_allowed(self, client_ip: str) -> bool:
        """Take one token from every window, or none if any is empty."""
        with self._lock:
            buckets = self._refilled(client_ip)
            if any(bucket.tokens < 1.0 for bucket in buckets):
                return False
            for bucket in buckets:
                bucket.tokens -= 1.0
            return True

    def _refilled(self, client_ip: str) -> list[RateLimitBucket]:
        buckets = self._client_buckets(client_ip)
        now = time.monotonic()
        for window, bucket in zip(self._windows, buckets, strict=True):
            gained = max(0.0, (now - bucket.last_update) * window.refill_rate)
            bucket.tokens = min(window.capacity, bucket.tokens + gained)
            bucket.last_update = now
        return buckets

    def _client_buckets(self, client_ip: str) -> list[RateLimitBucket]:
        buckets = self._buckets.get(client_ip)
        if buckets is not None:
            self._buckets.move_to_end(client_ip)
            return buckets

        self._evict(time.monotonic())
        buckets = [RateLimitBucket(tokens=float(w.capacity)) for w in self._windows]
        self._buckets[client_ip] = buckets
        return buckets

    def _evict(self, now: float) -> None:
        while self._buckets:
            oldest = next(iter(self._buckets.values()))
            last_seen = max(bucket.last_update for bucket in oldest)
            if len(self._buckets) < self._max_clients and now - last_seen < self._idle_after:
                break
            self._buckets.popitem(last=False)

    def get_remaining(self, client_ip: str) -> int:
        """Requests the client could still make right now."""
        with self._lock:
            return int(min(bucket.tokens for bucket in self._refilled(client_ip)))

    def retry_after(self, client_ip: str) -> int:
        """Whole seconds until every window holds a token again."""
        with self._lock:
            buckets = self._refilled(client_ip)
            wait = 0.0
            for window, bucket in zip(self._windows, buckets, strict=True):
                if bucket.tokens >= 1.0:
                    continue
                if window.refill_rate <= 0:
                    wait = max(wait, window.period_seconds)
                else:
                    wait = max(wait, (1.0 - bucket.tokens) / window.refill_rate)
            return math.ceil(wait)

    @property
    def client_count(self) -> int:
        return len(self._buckets)


# =============================================================================
# SINGLETON & DEPENDENCY
# =============================================================================

_rate_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    """Limiter shared by every router, built from ``settings.rate_limit``."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(
            per_minute=settings.rate_limit.per_minute,
            per_hour=settings.rate_limit.per_hour,
            max_clients=settings.rate_limit.max_clients,
        )
    return _rate_limiter


def check_rate_limit(
    request: Request,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Reject the request with 429 once its client runs out of tokens."""
    client_ip = _extract_client_ip(request)
    if not limiter.is_allowed(client_ip):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Try again later.",
            headers={"Retry-After": str(limiter.retry_after(client_ip))},
        )


def _extract_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"

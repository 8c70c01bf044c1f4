"""
Sliding-window rate limiter keyed by client address.

Provides:
- Four named budgets (general, write, auth, search) read from settings
- Redis sorted-set counters when RATE_LIMIT_BACKEND=redis
- In-memory fallback when Redis is not selected or unreachable (fails closed)
"""

import threading
import time
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from redis.exceptions import RedisError

from meapi.cache import redis_store
from meapi.config import Settings, get_settings
from meapi.errors import ErrorCode
from meapi.logging import get_logger

logger = get_logger("security.rate_limiter")


# =============================================================================
# In-Memory Rate Limiter
# =============================================================================

class InMemoryRateLimiter:
    """
    Process-local sliding-window counter.

    Thread-safe; each key holds the timestamps of the requests still inside
    its window.
    """

    def __init__(self):
        self._buckets: Dict[str, List[float]] = {}
        self._lock = threading.Lock()
        self._last_cleanup = time.time()
        self._cleanup_interval = 60

    def _cleanup_old_entries(self, window: int) -> None:
        """Drop keys whose timestamps all fell out of the window."""
        now = time.time()
        if now - self._last_cleanup < self._cleanup_interval:
            return

        self._last_cleanup = now
        cutoff = now - window - 60

        for key in list(self._buckets):
            self._buckets[key] = [ts for ts in self._buckets[key] if ts > cutoff]
            if not self._buckets[key]:
                del self._buckets[key]

    def check(self, key: str, limit: int, window: int) -> Tuple[bool, int, int]:
        """
        Check if request is allowed under rate limit, recording it if so.

        Args:
            key: Identifier (e.g., "ratelimit:write:192.168.1.1")
            limit: Maximum requests allowed
            window: Time window in seconds

        Returns:
            Tuple of (allowed, remaining, reset_at_timestamp)
        """
        now = time.time()

        with self._lock:
            self._cleanup_old_entries(window)

            window_start = now - window
            bucket = [ts for ts in self._buckets.get(key, []) if ts > window_start]
            self._buckets[key] = bucket

            reset_at = int(bucket[0] + window) if bucket else int(now + window)

            if len(bucket) < limit:
                bucket.append(now)
                return True, limit - len(bucket), reset_at
            return False, 0, reset_at

    def reset(self, key: Optional[str] = None) -> None:
        """Forget one key, or every key when none is given."""
        with self._lock:
            if key is None:
                self._buckets.clear()
            else:
                self._buckets.pop(key, None)


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""
    allowed: bool
    remaining: int
    limit: int
    reset_at: int  # Unix timestamp
    retry_after: Optional[int] = None  # Seconds until retry allowed

    def to_headers(self) -> dict:
        """Rate limit metadata as HTTP response headers."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
        if self.retry_after is not None:
            headers["Retry-After"] = str(self.retry_after)
        return headers


@dataclass(frozen=True)
class RateLimitConfig:
    """One named budget."""
    limit: int
    window: int  # seconds
    key_prefix: str
    code: str
    message: str


def build_configs(settings: Settings) -> Dict[str, RateLimitConfig]:
    """Budgets by name, sized from settings."""
    return {
        "general": RateLimitConfig(
            limit=settings.general_rate_limit,
            window=settings.general_rate_window,
            key_prefix="ratelimit:general:",
            code=ErrorCode.RATE_LIMIT_EXCEEDED,
            message="Too many requests from this IP, please try again later.",
        ),
        "write": RateLimitConfig(
            limit=settings.write_rate_limit,
            window=settings.write_rate_window,
            key_prefix="ratelimit:write:",
            code=ErrorCode.WRITE_RATE_LIMIT_EXCEEDED,
            message="Too many write requests from this IP, please try again later.",
        ),
        "auth": RateLimitConfig(
            limit=settings.auth_rate_limit,
            window=settings.auth_rate_window,
            key_prefix="ratelimit:auth:",
            code=ErrorCode.AUTH_RATE_LIMIT_EXCEEDED,
            message="Too many login attempts from this IP, please try again later.",
        ),
        "search": RateLimitConfig(
            limit=settings.search_rate_limit,
            window=settings.search_rate_window,
            key_prefix="ratelimit:search:",
            code=ErrorCode.SEARCH_RATE_LIMIT_EXCEEDED,
            message="Too many search requests from this IP, please try again later.",
        ),
    }


class RateLimiter:
    """
    Sliding-window rate limiter.

    Usage:
        limiter = get_rate_limiter()

        result = limiter.check("write", client_ip)
        if not result.allowed:
            raise AppError(..., status_code=429, headers=result.to_headers())

    Budgets (defaults):
        - general: 100 requests per 15 minutes
        - write: 20 requests per 15 minutes
        - auth: 5 login attempts per 15 minutes
        - search: 30 searches per minute
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.configs = build_configs(settings)
        self.use_redis = settings.rate_limit_backend == "redis"
        self.memory = InMemoryRateLimiter()

    def get_config(self, name: str) -> RateLimitConfig:
        """Get a budget by name; unknown names use the general budget."""
        return self.configs.get(name, self.configs["general"])

    def check(self, name: str, identifier: str) -> RateLimitResult:
        """
        Count one request against a budget.

        Args:
            name: Budget name ("general", "write", "auth", "search")
            identifier: Client identifier (usually IP address)

        Returns:
            RateLimitResult with allowed status and limits

        Note:
            Uses the in-memory counter unless the Redis backend is selected
            and reachable, so limiting never silently turns off.
        """
        config = self.get_config(name)
        key = f"{config.key_prefix}{identifier}"

        if self.use_redis and redis_store.is_available:
            try:
                return self._check_redis(name, key, config, identifier)
            except RedisError as e:
                logger.error("rate_limit_redis_error", limiter=name, error=str(e))
                redis_store.mark_unavailable()

        allowed, remaining, reset_at = self.memory.check(key, config.limit, config.window)
        if not allowed:
            logger.warning(
                "rate_limit_exceeded",
                limiter=name,
                identifier=identifier[:20],
                backend="memory",
            )
        return RateLimitResult(
            allowed=allowed,
            remaining=remaining,
            limit=config.limit,
            reset_at=reset_at,
            retry_after=max(reset_at - int(time.time()), 1) if not allowed else None,
        )

    def _check_redis(
        self, name: str, key: str, config: RateLimitConfig, identifier: str
    ) -> RateLimitResult:
        """Sorted-set sliding window: one member per request, scored by time."""
        client = redis_store.client
        now = time.time()
        window_start = now - config.window

        pipe = client.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zcard(key)
        pipe.zrange(key, 0, 0, withscores=True)
        _, current_count, oldest_entry = pipe.execute()

        if oldest_entry:
            reset_at = int(oldest_entry[0][1]) + config.window
        else:
            reset_at = int(now) + config.window

        if current_count >= config.limit:
            retry_after = max(reset_at - int(now), 1)
            logger.warning(
                "rate_limit_exceeded",
                limiter=name,
                identifier=identifier[:20],
                backend="redis",
                retry_after=retry_after,
            )
            return RateLimitResult(
                allowed=False,
                remaining=0,
                limit=config.limit,
                reset_at=reset_at,
                retry_after=retry_after,
            )

        client.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
        client.expire(key, config.window)
        return RateLimitResult(
            allowed=True,
            remaining=config.limit - current_count - 1,
            limit=config.limit,
            reset_at=reset_at,
        )

    def reset(self, name: Optional[str] = None, identifier: Optional[str] = None) -> None:
        """
        Clear counters.

        With both arguments only that client's counter for that budget is
        cleared; without arguments every in-memory counter is dropped.
        """
        if name is None or identifier is None:
            self.memory.reset()
            return

        key = f"{self.get_config(name).key_prefix}{identifier}"
        self.memory.reset(key)
        if self.use_redis:
            redis_store.delete(key)


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    """Get the process-wide rate limiter."""
    return RateLimiter()


__all__ = [
    "InMemoryRateLimiter",
    "RateLimitConfig",
    "RateLimitResult",
    "RateLimiter",
    "build_configs",
    "get_rate_limiter",
]

"""
Redis connection layer.

Only used when RATE_LIMIT_BACKEND=redis; the rate limiter stores its
sliding-window counters here so several API instances share them.

Usage:
    from meapi.cache import redis_store

    if redis_store.is_available:
        redis_store.client.zcard("ratelimit:general:127.0.0.1")
"""

from meapi.cache.redis_client import RedisStore, redis_store

__all__ = ["RedisStore", "redis_store"]

"""
Redis client with connection pooling.

Provides a singleton Redis client with:
- Connection pooling
- Lazy connection on first use
- Graceful degradation when the server is unreachable
"""

from typing import Optional

import redis
from redis.exceptions import ConnectionError, TimeoutError

from meapi.config import get_settings
from meapi.logging import get_logger

logger = get_logger("cache")


class RedisStore:
    """
    Redis client holder.

    Features:
    - Singleton pattern for connection reuse
    - One connection pool per process
    - `is_available` stays False when the server cannot be reached, so
      callers can switch to a local fallback
    """

    _instance: Optional["RedisStore"] = None
    _pool: Optional[redis.ConnectionPool] = None
    _initialized: bool = False
    _available: bool = False

    def __new__(cls) -> "RedisStore":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        # Prevent re-initialization
        pass

    def initialize(self, force: bool = False) -> bool:
        """
        Initialize Redis connection pool.

        Args:
            force: Force re-initialization even if already initialized

        Returns:
            True if Redis is available and connected, False otherwise
        """
        if self._initialized and not force:
            return self._available

        settings = get_settings()
        try:
            self._pool = redis.ConnectionPool(
                host=settings.redis_host,
                port=settings.redis_port,
                db=settings.redis_db,
                password=settings.redis_password,
                max_connections=20,
                socket_timeout=2,
                socket_connect_timeout=2,
                decode_responses=True,
            )

            # Test connection
            redis.Redis(connection_pool=self._pool).ping()

            self._available = True
            logger.info("redis_connected", host=settings.redis_host, port=settings.redis_port)
        except (ConnectionError, TimeoutError) as e:
            logger.warning("redis_connection_failed", error=str(e))
            self._available = False
        except redis.RedisError as e:
            logger.warning("redis_init_error", error=str(e))
            self._available = False

        self._initialized = True
        return self._available

    @property
    def client(self) -> Optional[redis.Redis]:
        """Get Redis client from pool."""
        if not self._initialized:
            self.initialize()

        if not self._available or self._pool is None:
            return None

        return redis.Redis(connection_pool=self._pool)

    @property
    def is_available(self) -> bool:
        """Check if Redis is available."""
        if not self._initialized:
            self.initialize()
        return self._available

    def mark_unavailable(self) -> None:
        """Stop using Redis until the next forced initialize()."""
        self._available = False

    def delete(self, *keys: str) -> bool:
        """Delete keys, returning False when Redis cannot be reached."""
        client = self.client
        if client is None:
            return False

        try:
            client.delete(*keys)
            return True
        except (ConnectionError, TimeoutError):
            return False

    def reset(self) -> None:
        """Drop the pool so the next use reconnects."""
        if self._pool is not None:
            self._pool.disconnect()
        self._pool = None
        self._initialized = False
        self._available = False


redis_store = RedisStore()

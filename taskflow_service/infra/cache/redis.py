"""Redis cache client with connection pooling.

Used for short-lived analytics report caching. The service runs without a
cache when Redis is not configured.
"""

from __future__ import annotations

import json
import logging
from typing import Any, cast

from redis.asyncio import ConnectionPool, Redis

from taskflow_service.core.settings import get_redis_settings

logger = logging.getLogger(__name__)


class RedisCache:
    """Redis cache client storing JSON values under a service key prefix.

    Example:
        ```python
        cache = RedisCache()
        await cache.connect()

        await cache.set("analytics:report:abc", {"totalTasks": 3}, ttl=300)
        value = await cache.get("analytics:report:abc")
        await cache.delete("analytics:report:abc")

        await cache.disconnect()
        ```
    """

    def __init__(self, client: Redis | None = None) -> None:
        self._settings = get_redis_settings()
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = client

    async def connect(self) -> None:
        """Establish connection to Redis with connection pooling.

        Raises:
            redis.exceptions.ConnectionError: If unable to connect to Redis.
        """
        logger.info(
            "Connecting to Redis",
            extra={
                "host": self._settings.host,
                "port": self._settings.port,
                "db": self._settings.db,
                "max_connections": self._settings.max_connections,
            },
        )
        self._pool = ConnectionPool.from_url(
            self._settings.url,
            **self._settings.connection_pool_kwargs(),
        )
        self._client = Redis(connection_pool=self._pool)
        await cast("Any", self._client.ping())
        logger.info("Redis connection established successfully")

    async def disconnect(self) -> None:
        """Close Redis connection and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        if self._pool:
            await self._pool.disconnect()
            self._pool = None

    @property
    def client(self) -> Redis:
        """Underlying Redis client.

        Raises:
            RuntimeError: If the cache is not connected.
        """
        if self._client is None:
            msg = "Redis client not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client

    def _key(self, key: str) -> str:
        return self._settings.get_prefixed_key(key)

    async def get(self, key: str) -> Any | None:
        """Get a JSON value from cache, or None if missing."""
        value = await self.client.get(self._key(key))
        if value is None:
            return None
        return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store a value as JSON with an optional TTL in seconds."""
        result = await self.client.set(self._key(key), json.dumps(value), ex=ttl)
        return bool(result)

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        return bool(await self.client.delete(self._key(key)))

    async def health_check(self) -> bool:
        """Ping Redis."""
        try:
            return bool(await cast("Any", self.client.ping()))
        except Exception as e:
            logger.warning("Redis health check failed", extra={"error": str(e)})
            return False


# Global cache instance, set during application startup
_cache: RedisCache | None = None


async def start_cache() -> None:
    """Initialize the global Redis cache.

    This should be called during application startup.
    """
    global _cache
    logger.info("Starting Redis cache")
    cache = RedisCache()
    await cache.connect()
    _cache = cache


async def stop_cache() -> None:
    """Close the global Redis cache.

    This should be called during application shutdown.
    """
    global _cache
    if _cache:
        logger.info("Stopping Redis cache")
        await _cache.disconnect()
        _cache = None


def get_cache_instance() -> RedisCache | None:
    """Get the global Redis cache instance if initialized."""
    return _cache

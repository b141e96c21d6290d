"""Redis-backed cache."""

from taskflow_service.infra.cache.redis import (
    RedisCache,
    get_cache_instance,
    start_cache,
    stop_cache,
)

__all__ = ["RedisCache", "get_cache_instance", "start_cache", "stop_cache"]

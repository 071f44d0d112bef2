from typing import Any
import redis
from cachetools import TTLCache
from .config import settings

# In-process cache for local dev and single-worker deployments.
_local_cache = TTLCache(maxsize=4096, ttl=settings.CACHE_TTL_SECONDS)

class Cache:
    """
    Thin abstraction over Redis/in-memory, selected by USE_REDIS.
    Holds address autocomplete results and rate-limit counters only;
    the units lookup chain always hits upstream.
    """
    def __init__(self):
        self.backend = None
        if settings.USE_REDIS:
            self.backend = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)

    def get(self, key: str) -> Any | None:
        if self.backend:
            return self.backend.get(key)
        return _local_cache.get(key)

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        if self.backend:
            self.backend.setex(key, ttl or settings.CACHE_TTL_SECONDS, value)
        else:
            _local_cache[key] = value

    def incr(self, key: str, ttl: int) -> int:
        """Increment a counter. `ttl` only applies on the Redis backend."""
        if self.backend:
            pipe = self.backend.pipeline()
            pipe.incr(key)
            pipe.expire(key, ttl)
            count, _ = pipe.execute()
            return int(count)
        try:
            count = int(_local_cache.get(key) or 0) + 1
        except ValueError:
            count = 1
        _local_cache[key] = str(count)
        return count

    def clear(self) -> None:
        if self.backend:
            self.backend.flushdb()
        else:
            _local_cache.clear()

cache = Cache()

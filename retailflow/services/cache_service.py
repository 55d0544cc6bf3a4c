"""
Redis cache for the sales report queries.

Values are stored as JSON under "{prefix}:{module}:{key}". When caching is
disabled or Redis cannot be reached every lookup is a miss and writes are
dropped, so callers always fall back to the database.
"""
import json
import logging
from typing import Any, Callable, Optional

import redis
from redis.exceptions import RedisError
from flask import Flask

logger = logging.getLogger(__name__)


class CacheService:
    """JSON cache on top of a Redis client. Disabled instances behave as empty."""

    def __init__(self, app: Optional[Flask] = None):
        self.client: Optional[redis.Redis] = None
        self.prefix = 'retailflow'
        self.default_ttl = 60

        if app:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        self.prefix = app.config.get('CACHE_KEY_PREFIX', self.prefix)
        self.default_ttl = app.config.get('CACHE_DEFAULT_TTL', self.default_ttl)

        if not app.config.get('CACHE_ENABLED', True):
            logger.info("[CACHE] Disabled by configuration")
            return

        url = app.config.get('REDIS_URL', 'redis://localhost:6379/0')
        client = redis.from_url(url, decode_responses=True, socket_connect_timeout=3, socket_timeout=3)
        try:
            client.ping()
        except RedisError as e:
            logger.warning(f"[CACHE] Redis at {url} unreachable ({e}); reports will not be cached")
            return

        self.client = client
        logger.info(f"[CACHE] Using Redis at {url}")

    def is_available(self) -> bool:
        if self.client is None:
            return False
        try:
            return bool(self.client.ping())
        except RedisError:
            return False

    def _key(self, module: str, key: str) -> str:
        return f"{self.prefix}:{module}:{key}"

    def get(self, module: str, key: str) -> Optional[Any]:
        if self.client is None:
            return None
        try:
            raw = self.client.get(self._key(module, key))
            return None if raw is None else json.loads(raw)
        except (RedisError, ValueError) as e:
            logger.warning(f"[CACHE] Read of {module}:{key} failed: {e}")
            return None

    def set(self, module: str, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if self.client is None:
            return False
        try:
            self.client.setex(self._key(module, key), ttl or self.default_ttl, json.dumps(value))
            return True
        except (RedisError, TypeError) as e:
            logger.warning(f"[CACHE] Write of {module}:{key} failed: {e}")
            return False

    def invalidate_module(self, module: str) -> int:
        """Drop every key under module and return how many were removed."""
        if self.client is None:
            return 0
        try:
            keys = list(self.client.scan_iter(match=self._key(module, '*'), count=100))
            if keys:
                self.client.delete(*keys)
                logger.info(f"[CACHE] Invalidated {len(keys)} {module} keys")
            return len(keys)
        except RedisError as e:
            logger.warning(f"[CACHE] Invalidating {module} failed: {e}")
            return 0

    def memoize(self, module: str, key: str, loader_fn: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        cached = self.get(module, key)
        if cached is not None:
            return cached
        value = loader_fn()
        self.set(module, key, value, ttl)
        return value


_cache_service: Optional[CacheService] = None


def init_cache(app: Flask) -> None:
    global _cache_service
    _cache_service = CacheService(app)
    app.extensions['cache'] = _cache_service


def get_cache() -> CacheService:
    if _cache_service is None:
        raise RuntimeError("Cache not initialized.")
    return _cache_service

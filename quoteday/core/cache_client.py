"""
Redis cache client for the quote backend.

Holds the cached search result id lists. Every failure is logged and reported
as a miss (reads) or as False (writes), so callers always fall back to the
database; after ``max_retries`` failed connects the cache stays off.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Optional

from redis import asyncio as aioredis
from redis.asyncio import Redis

from quoteday.config.settings import settings


class CacheClient:
    """
    Redis cache client with lazy connection and graceful degradation.
    """

    def __init__(self, redis_url: Optional[str] = None, max_retries: int = 3):
        """
        Args:
            redis_url: Redis connection URL (optional, uses settings if not provided)
            max_retries: Failed connects before cache operations are skipped
        """
        self.redis_url = redis_url or settings.redis.url
        self.redis_client: Optional[Redis] = None
        self.logger = logging.getLogger(__name__)
        self._connection_lock = asyncio.Lock()
        self._is_connected = False
        self._failed_connects = 0
        self._max_retries = max_retries

    @property
    def is_connected(self) -> bool:
        return self._is_connected and self.redis_client is not None

    async def connect(self) -> bool:
        """Open the connection and ping it. Returns False on failure."""
        async with self._connection_lock:
            if self.is_connected:
                return True
            try:
                self.logger.info(f"Connecting to Redis at {settings.redis.host}:{settings.redis.port}")
                self.redis_client = aioredis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_timeout=settings.redis.socket_timeout,
                    socket_connect_timeout=settings.redis.socket_timeout,
                    retry_on_timeout=True,
                    health_check_interval=30,
                )
                await self.redis_client.ping()
            except Exception as e:
                self._failed_connects += 1
                self.logger.error(f"Failed to connect to Redis (attempt {self._failed_connects}): {e}")
                await self._drop_client()
                return False

            self._is_connected = True
            self._failed_connects = 0
            self.logger.info("Successfully connected to Redis")
            return True

    async def disconnect(self) -> None:
        async with self._connection_lock:
            await self._drop_client()
        self.logger.info("Disconnected from Redis")

    async def get_json(self, key: str) -> Optional[Any]:
        """Decoded value for ``key``; missing, undecodable or unreachable all read as None."""
        raw = await self._guarded("get", key, lambda client: client.get(key), None)
        if raw is None:
            self.logger.debug(f"Cache miss for key: {key}")
            return None
        try:
            return json.loads(raw)
        except ValueError:
            self.logger.warning(f"Discarding undecodable cache entry for key: {key}")
            return None

    async def set_json(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        payload = json.dumps(value)

        def write(client: Redis):
            if ttl_seconds:
                return client.setex(key, ttl_seconds, payload)
            return client.set(key, payload)

        return bool(await self._guarded("set", key, write, False))

    async def ping(self) -> bool:
        result = await self._guarded("ping", None, lambda client: client.ping(), False)
        return result is True

    async def _guarded(
        self,
        operation: str,
        key: Optional[str],
        call: Callable[[Redis], Awaitable[Any]],
        default: Any,
    ) -> Any:
        """Run ``call`` against a live client, or return ``default`` if there is none or it fails."""
        if not self.is_connected:
            if self._failed_connects >= self._max_retries:
                return default
            if not await self.connect():
                return default
        try:
            return await call(self.redis_client)
        except Exception as e:
            self.logger.warning(f"Redis {operation} failed for key '{key}': {e}")
            await self._drop_client()
            return default

    async def _drop_client(self) -> None:
        self._is_connected = False
        if self.redis_client is None:
            return
        try:
            await self.redis_client.aclose()
        except Exception as e:
            self.logger.warning(f"Error during Redis disconnect: {e}")
        self.redis_client = None


# Global cache client instance
cache_client: Optional[CacheClient] = None


async def get_cache_client() -> Optional[CacheClient]:
    """
    Get or create the global cache client instance.

    Returns:
        CacheClient instance or None if caching is disabled
    """
    global cache_client

    if not settings.redis.enabled:
        return None

    if cache_client is None:
        cache_client = CacheClient()
        await cache_client.connect()

    return cache_client


async def close_cache_client() -> None:
    """Close the global cache client connection."""
    global cache_client

    if cache_client:
        await cache_client.disconnect()
        cache_client = None

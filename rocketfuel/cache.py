import json
import logging

import redis.asyncio as redis

from rocketfuel.config import settings

logger = logging.getLogger(__name__)

class CacheManager:
    """
    Cache-aside manager backed by Redis.

    Used for lookups against the chat workspace that rarely change (the
    workspace id behind an e-mail address).  Every public method is safe to
    call while Redis is unavailable: reads miss and writes are skipped, so
    a cache outage only costs an extra round trip to the workspace.
    """

    def __init__(self, url: str | None = None) -> None:
        self._url = url or settings.REDIS_URL
        self._redis: redis.Redis | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool.  Called once at application startup."""
        self._redis = redis.from_url(
            self._url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", self._url)
        except Exception as exc:  # pragma: no cover
            logger.warning("Redis ping failed, cache disabled: %s", exc)
            await self._redis.aclose()
            self._redis = None

    async def disconnect(self) -> None:
        """Close the connection pool.  Called once at application shutdown."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    async def get(self, key: str):
        """Return the cached value for *key*, or None on a miss or error."""
        if not self._redis:
            return None
        try:
            data = await self._redis.get(key)
            if data is not None:
                return json.loads(data)
            return None
        except Exception as exc:
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            return None

    async def set(self, key: str, value, ttl: int | None = None) -> None:
        """Persist *value* under *key*; failures are logged and dropped."""
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except Exception as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    # ------------------------------------------------------------------
    # Domain keys
    # ------------------------------------------------------------------

    @staticmethod
    def slack_user_key(email: str) -> str:
        return f"slack:user:{email.lower()}"

"""Redis-backed session cache.

Entries are JSON projections of profile rows with a fixed TTL. The cache
is never authoritative: every operation swallows Redis failures so that
callers fall back to the profile repository.
"""

import json
import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

PENDING_USERS_KEY = "auth:pending-users"
ALL_USERS_KEY = "users:all"


def user_key(user_id: str) -> str:
    """Cache key for one user's projection."""
    return f"user:{user_id}"


class SessionCache:
    """Thin Redis wrapper for user projections and admin lists."""

    def __init__(self, client: aioredis.Redis) -> None:
        self.client = client

    @classmethod
    def from_settings(
        cls,
        host: str,
        port: int = 6379,
        password: str | None = None,
        db: int = 0,
        *,
        socket_timeout: float = 2.0,
    ) -> "SessionCache":
        client = aioredis.Redis(
            host=host,
            port=port,
            password=password,
            db=db,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss or any failure."""
        try:
            raw = await self.client.get(key)
        except RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Discarding corrupted cache entry {key}")
            await self.invalidate(key)
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a JSON-serializable value for ``ttl`` seconds."""
        try:
            await self.client.setex(key, ttl, json.dumps(value, default=str))
        except (RedisError, TypeError, ValueError) as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    async def invalidate(self, *keys: str) -> None:
        """Delete the given keys."""
        if not keys:
            return
        try:
            await self.client.delete(*keys)
            logger.debug(f"Invalidated cache keys: {', '.join(keys)}")
        except RedisError as e:
            logger.warning(f"Cache invalidation failed for {', '.join(keys)}: {e}")

    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        return await self.get(user_key(user_id))

    async def set_user(self, user_id: str, projection: dict[str, Any], ttl: int) -> None:
        await self.set(user_key(user_id), projection, ttl)

    async def invalidate_user(self, user_id: str, *, lists: bool = True) -> None:
        """Drop a user's entry and, by default, the admin lists containing it."""
        keys = [user_key(user_id)]
        if lists:
            keys += [ALL_USERS_KEY, PENDING_USERS_KEY]
        await self.invalidate(*keys)

    async def ping(self) -> bool:
        """Whether Redis is reachable."""
        try:
            return bool(await self.client.ping())
        except RedisError:
            return False

    async def aclose(self) -> None:
        try:
            await self.client.aclose()
        except RedisError as e:
            logger.warning(f"Error closing Redis connection: {e}")

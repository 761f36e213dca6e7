"""
Optional Redis cache for hot read paths (the menu).

With no REDIS_URL configured every call is a no-op and reads go straight to
the database. Redis errors are logged and treated as a cache miss.
"""
import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from foodfantasy.config import settings

log = logging.getLogger(__name__)

FOODS_KEY = "foods:all"


class CacheService:
    def __init__(self, client: Optional[redis.Redis] = None):
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        try:
            value = await self.client.get(key)
        except RedisError as e:
            log.warning("cache get failed: key=%s error=%s", key, e)
            return None
        return json.loads(value) if value else None

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        if not self.enabled:
            return False
        try:
            await self.client.setex(key, ttl, json.dumps(value))
        except RedisError as e:
            log.warning("cache set failed: key=%s error=%s", key, e)
            return False
        return True

    async def invalidate(self, key: str) -> bool:
        if not self.enabled:
            return False
        try:
            await self.client.delete(key)
        except RedisError as e:
            log.warning("cache invalidate failed: key=%s error=%s", key, e)
            return False
        return True


def _build() -> CacheService:
    if not settings.redis_url:
        log.info("REDIS_URL not set; caching disabled")
        return CacheService()
    return CacheService(redis.Redis.from_url(settings.redis_url, decode_responses=True))


cache = _build()

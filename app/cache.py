"""
Redis-backed JSON cache for read-only endpoints.

Cache errors are logged and treated as a miss; they never fail a request.
"""

import json
import logging
from typing import Any

from fastapi import Request
from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class ResponseCache:
    def __init__(self, redis: Redis, ttl: int, prefix: str = "cache:") -> None:
        self.redis = redis
        self.ttl = ttl
        self.prefix = prefix

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self.redis.get(self.prefix + key)
        except RedisError as exc:
            logger.warning("Cache read failed", extra={"key": key, "error": str(exc)})
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.warning(
                "Discarding unreadable cache entry",
                extra={"key": key, "error": str(exc)},
            )
            return None

    async def set(self, key: str, value: Any) -> None:
        try:
            await self.redis.set(self.prefix + key, json.dumps(value), ex=self.ttl)
        except RedisError as exc:
            logger.warning("Cache write failed", extra={"key": key, "error": str(exc)})


def get_cache(request: Request) -> ResponseCache:
    return request.app.state.cache

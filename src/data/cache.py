"""Redis cache for raw factor-table rows.

Factor tables change on a data-release cadence, not per request, so whole
table reads from the REST backend are cached with a TTL. Only raw rows are
cached; resolved categories and scores are always recomputed.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from src.config import settings

logger = logging.getLogger(__name__)

Rows = list[dict[str, Any]]


class RowCache:
    """TTL cache of JSON row lists. A TTL of 0 disables it.

    Redis outages degrade to uncached reads.
    """

    def __init__(
        self,
        url: str | None = None,
        ttl_seconds: int | None = None,
        namespace: str = "zoneranker",
    ):
        self.url = url or settings.redis_url
        self.ttl_seconds = settings.table_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.namespace = namespace
        self._client: redis.Redis | None = None

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def key(self, *parts: str) -> str:
        return ":".join((self.namespace, *parts))

    def _redis(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(self.url, decode_responses=True)
        return self._client

    async def get(self, key: str) -> Rows | None:
        try:
            raw = await self._redis().get(key)
        except RedisError as e:
            logger.warning("Redis unavailable, skipping cache for %s: %s", key, e)
            return None
        if raw is None:
            return None
        logger.debug("Cache hit: %s", key)
        return json.loads(raw)

    async def set(self, key: str, rows: Rows) -> None:
        try:
            await self._redis().setex(key, self.ttl_seconds, json.dumps(rows, default=str))
        except RedisError as e:
            logger.warning("Failed to write cache for %s: %s", key, e)

    async def get_or_fetch(self, key: str, fetch: Callable[[], Awaitable[Rows]]) -> Rows:
        if not self.enabled:
            return await fetch()
        rows = await self.get(key)
        if rows is None:
            rows = await fetch()
            await self.set(key, rows)
        return rows

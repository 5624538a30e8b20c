"""Fixed-window rate limiting for public endpoints (login, share opens)."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request
import redis.asyncio as redis
from redis.exceptions import RedisError

from config import settings

logger = logging.getLogger(__name__)

# key -> (count, window reset timestamp); used when Redis is unreachable
_local_counters: Dict[str, Tuple[int, float]] = {}
_local_lock = asyncio.Lock()


def _client_identifier(request: Request) -> str:
    peer = request.client.host if request.client and request.client.host else None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded and peer in settings.TRUSTED_PROXIES:
        return forwarded.split(",")[0].strip() or peer
    return peer or "unknown"


async def _consume_redis_quota(key: str, window_seconds: int) -> Tuple[int, int]:
    client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        async with client.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.ttl(key)
            count, ttl = await pipe.execute()
        if ttl is None or int(ttl) < 0:
            await client.expire(key, window_seconds)
            ttl = window_seconds
    finally:
        await client.aclose()
    return int(count), int(ttl)


async def _consume_local_quota(key: str, window_seconds: int) -> Tuple[int, int]:
    now = time.time()
    async with _local_lock:
        count, reset_at = _local_counters.get(key, (0, now + window_seconds))
        if now >= reset_at:
            count = 0
            reset_at = now + window_seconds
        count += 1
        _local_counters[key] = (count, reset_at)
    return count, max(int(math.ceil(reset_at - now)), 1)


def rate_limit(prefix: str, limit: int, window_seconds: int) -> Callable[[Request], None]:
    """Return a dependency allowing `limit` requests per client per window."""

    async def _dependency(request: Request):
        if getattr(request.app.state, "disable_rate_limits", False):
            return

        key = f"lr:rate:{prefix}:{_client_identifier(request)}"
        try:
            count, retry_after = await _consume_redis_quota(key, window_seconds)
        except (RedisError, OSError) as exc:
            logger.debug("Redis rate limit unavailable, using local counters: %s", exc)
            count, retry_after = await _consume_local_quota(key, window_seconds)

        if count > limit:
            logger.info("rate_limited prefix=%s count=%s limit=%s", prefix, count, limit)
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded for {prefix}. Try again later.",
                headers={"Retry-After": str(retry_after)},
            )

    return _dependency

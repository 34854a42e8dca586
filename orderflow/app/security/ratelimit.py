"""Sliding-window rate limiting backed by Redis sorted sets.

Each hit is stored as a unique member scored with its timestamp. Members
older than the window are trimmed and the remaining cardinality is compared
with the limit, so the count always covers exactly the last ``window``
seconds.
"""

from __future__ import annotations

import time
import uuid

from redis.asyncio import Redis

from ..errors import RateLimited


def limiter_key(scope: str, tenant: str, ip: str) -> str:
    return f"ratelimit:{scope}:{tenant}:{ip}"


async def hit(
    redis: Redis, key: str, limit: int, window: int, now: float | None = None
) -> tuple[bool, int]:
    """Record one hit on ``key`` and return ``(allowed, retry_after)``.

    ``retry_after`` is ``0`` when allowed, otherwise the seconds until the
    oldest hit inside the window expires.
    """

    now = time.time() if now is None else now
    pipe = redis.pipeline()
    pipe.zadd(key, {str(uuid.uuid4()): now})
    pipe.zremrangebyscore(key, 0, now - window)
    pipe.zcard(key)
    pipe.expire(key, window)
    _, _, count, _ = await pipe.execute()
    if count <= limit:
        return True, 0
    oldest = await redis.zrange(key, 0, 0, withscores=True)
    if oldest:
        retry_after = int(oldest[0][1] + window - now) + 1
    else:
        retry_after = window
    return False, max(1, min(retry_after, window))


async def guard(redis: Redis, key: str, limit: int, window: int) -> None:
    """Like :func:`hit` but raise :class:`RateLimited` when over the limit."""

    allowed, retry_after = await hit(redis, key, limit, window)
    if not allowed:
        raise RateLimited(retry_after)

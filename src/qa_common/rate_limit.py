"""Fixed-window rate limiting for the public bid endpoint.

Redis INCR + EXPIRE per key; key pattern "ratelimit:bids:{auction_id}:{client}".
The client is the first X-Forwarded-For hop when present (reverse proxy aware),
otherwise the peer address.
"""

import logging

import redis.asyncio as aioredis
from fastapi import Request

from config.settings import settings
from src.qa_common.errors import RateLimitError
from src.qa_common.redis_client import get_redis

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60


def client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def hit(redis: aioredis.Redis, key: str, limit: int, window: int = _WINDOW_SECONDS) -> int:
    """Count one request against `key`; raise RateLimitError once over `limit`."""
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, window)
    if count > limit:
        logger.warning("Rate limit exceeded: key=%s count=%d limit=%d", key, count, limit)
        raise RateLimitError()
    return count


async def bid_rate_limit(auction_id: str, request: Request) -> None:
    """FastAPI dependency guarding POST /auctions/{auction_id}/bids."""
    if not settings.RATE_LIMIT_ENABLED:
        return
    redis = await get_redis()
    key = f"ratelimit:bids:{auction_id}:{client_key(request)}"
    await hit(redis, key, settings.BID_RATE_LIMIT_PER_MINUTE)

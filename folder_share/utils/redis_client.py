from typing import Any

import redis.asyncio as aioredis

from folder_share.config import settings

# Module-level connection pool (lazy init)
_pool: Any = None


def get_redis() -> aioredis.Redis:
    """Get or create the shared async Redis client (binary-safe, no decoding)."""
    global _pool
    if _pool is None:
        _pool = aioredis.from_url(settings.REDIS_URL, decode_responses=False)
    return _pool


async def close_redis() -> None:
    global _pool
    if _pool is not None:
        await _pool.aclose()
        _pool = None

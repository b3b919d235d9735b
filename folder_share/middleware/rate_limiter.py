# folder_share/middleware/rate_limiter.py
# Per-IP publish throttle backed by Redis
# Counters live in Redis so any number of stateless replicas share one budget

import logging
import time
from typing import Any, Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from folder_share.constants import PUBLISH_PATH, RATE_LIMIT_WINDOW_SECONDS
from folder_share.middleware.error_handler import RateLimitError, create_error_response

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """
    Fixed hourly window counter.
    Key per client per window: rl:<client>:<window index>.
    """

    def __init__(self, redis: Any, max_requests: int, window_size: int = RATE_LIMIT_WINDOW_SECONDS):
        self.redis = redis
        self.max_requests = max_requests
        self.window_size = window_size

    def _key(self, client_key: str, now: float) -> str:
        return f"rl:{client_key}:{int(now // self.window_size)}"

    async def hit(self, client_key: str, now: float | None = None) -> bool:
        """Count one request; returns True while the client is within its budget."""
        key = self._key(client_key, time.time() if now is None else now)
        count = await self.redis.incr(key)
        if count == 1:
            await self.redis.expire(key, self.window_size)
        return count <= self.max_requests


def get_client_key(request: Request) -> str:
    """Extract client identifier from request."""
    # Edge deployments put the caller address in a proxy header
    for header in ("CF-Connecting-IP", "X-Real-IP"):
        value = request.headers.get(header)
        if value:
            return value.strip()

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take first IP (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "anon"


class PublishRateLimitMiddleware(BaseHTTPMiddleware):
    """Throttles POST /api/share/folder only; fetches are never limited."""

    def __init__(self, app, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: Callable):
        if request.method != "POST" or request.url.path != PUBLISH_PATH:
            return await call_next(request)

        client_key = get_client_key(request)
        if not await self.limiter.hit(client_key):
            logger.warning(f"Rate limit exceeded for {client_key} on {request.url.path}")
            return create_error_response(RateLimitError.default_message, RateLimitError.status_code)

        return await call_next(request)

# app/core/rate_limit.py
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.settings import Settings

log = logging.getLogger("uvicorn.error")

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


@dataclass
class RateLimitStatus:
    allowed: bool
    limit: int
    remaining: int
    reset_in: int  # seconds until the current window closes


class MemoryRateLimiter:
    """Fixed-window counters kept in process memory."""

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Tuple[int, float]] = {}

    def _prune(self, now: float) -> None:
        expired = [k for k, (_, reset_at) in self._hits.items() if reset_at <= now]
        for k in expired:
            del self._hits[k]

    async def hit(self, key: str) -> RateLimitStatus:
        now = self._clock()
        count, reset_at = self._hits.get(key, (0, 0.0))
        if reset_at <= now:
            self._prune(now)
            count, reset_at = 0, now + self.window_seconds
        count += 1
        self._hits[key] = (count, reset_at)
        return RateLimitStatus(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_in=max(0, math.ceil(reset_at - now)),
        )


class RedisRateLimiter:
    """Fixed-window counters in Redis, shared by every worker using the same URL."""

    def __init__(self, redis: Redis, limit: int, window_seconds: int, prefix: str = "rate_limit:contact"):
        self.redis = redis
        self.limit = limit
        self.window_seconds = window_seconds
        self.prefix = prefix

    async def hit(self, key: str) -> RateLimitStatus:
        redis_key = f"{self.prefix}:{key}"
        try:
            count = await self.redis.incr(redis_key)
            ttl = await self.redis.ttl(redis_key)
            # a key without a TTL would never reset, so (re)arm it
            if count == 1 or ttl < 0:
                await self.redis.expire(redis_key, self.window_seconds)
                ttl = self.window_seconds
        except RedisError as exc:
            log.warning(f"[rate_limit] Redis unavailable, allowing request: {exc}")
            return RateLimitStatus(True, self.limit, self.limit, self.window_seconds)
        return RateLimitStatus(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_in=ttl,
        )


def build_rate_limiter(settings: Settings):
    if settings.redis_url:
        try:
            redis = Redis.from_url(settings.redis_url)
            log.info("[rate_limit] using Redis counters")
            return RedisRateLimiter(redis, settings.rate_limit_max, settings.rate_limit_window_seconds)
        except (RedisError, ValueError) as exc:
            log.warning(f"[rate_limit] Redis init failed, falling back to memory: {exc}")
    return MemoryRateLimiter(settings.rate_limit_max, settings.rate_limit_window_seconds)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Throttles requests under `path_prefix` per client address."""

    def __init__(self, app: ASGIApp, limiter, path_prefix: str = "/api/contact"):
        super().__init__(app)
        self.limiter = limiter
        self.path_prefix = path_prefix

    @staticmethod
    def _client_id(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next: Callable):
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_id = self._client_id(request)
        status = await self.limiter.hit(client_id)
        headers = {
            "X-RateLimit-Limit": str(status.limit),
            "X-RateLimit-Remaining": str(status.remaining),
        }
        if not status.allowed:
            log.warning(f"[rate_limit] limit exceeded for {client_id} on {request.url.path}")
            headers["Retry-After"] = str(status.reset_in)
            return JSONResponse({"error": RATE_LIMIT_MESSAGE}, status_code=429, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response

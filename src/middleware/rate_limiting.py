"""Rate limiting middleware using Redis."""

import logging
import time
from typing import Optional

import redis.asyncio as redis
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.core.settings import get_settings
from src.middleware.logging import get_client_ip

logger = logging.getLogger(__name__)
settings = get_settings()

WINDOW_SECONDS = 60


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window rate limiting backed by Redis.

    Callers are identified by user id when authenticated and by client IP
    otherwise. Writes (plays, complaints, moderation actions) have a lower
    limit than reads. When Redis is unreachable requests are let through.
    """

    EXEMPT_PATHS = {
        "/",
        "/health",
        "/version",
        "/openapi.json",
        "/docs",
        "/redoc",
        "/favicon.ico",
    }

    def __init__(self, app, enabled: Optional[bool] = None):
        super().__init__(app)
        self.enabled = settings.rate_limit_enabled if enabled is None else enabled
        self.redis_client: Optional[redis.Redis] = None
        if self.enabled:
            self._initialize_redis()

    def _initialize_redis(self):
        """Initialize Redis connection."""
        try:
            self.redis_client = redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                max_connections=settings.redis_pool_size,
            )
            logger.info("Redis client initialized for rate limiting")
        except (redis.RedisError, ValueError) as e:
            logger.error(f"Failed to initialize Redis client: {e}")
            self.redis_client = None

    async def dispatch(self, request: Request, call_next):
        """Apply rate limiting to requests."""
        if not self.enabled or request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        if not self.redis_client:
            logger.warning("Rate limiting disabled - Redis not available")
            return await call_next(request)

        user_id = getattr(request.state, "user_id", None)
        caller = f"user:{user_id}" if user_id else f"ip:{get_client_ip(request)}"

        is_write_operation = request.method in {"POST", "PUT", "PATCH", "DELETE"}
        operation_type = "write" if is_write_operation else "read"
        limit = (
            settings.rate_limit_write_per_minute
            if is_write_operation
            else settings.rate_limit_read_per_minute
        )
        key = self._window_key(caller, operation_type)

        try:
            count = await self._increment(key)
        except redis.RedisError as e:
            logger.error(f"Redis error during rate limiting: {e}")
            return await call_next(request)

        if count > limit:
            logger.warning(f"Rate limit exceeded for {caller}, operation: {operation_type}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "errors": [{
                        "status": "429",
                        "code": "RATE_LIMIT_EXCEEDED",
                        "title": "Too Many Requests",
                        "detail": f"Rate limit of {limit} requests per minute exceeded",
                    }]
                },
                headers={
                    "Retry-After": str(WINDOW_SECONDS),
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(max(0, limit - count))
        response.headers["X-RateLimit-Reset"] = str(
            (int(time.time()) // WINDOW_SECONDS + 1) * WINDOW_SECONDS
        )
        return response

    @staticmethod
    def _window_key(caller: str, operation_type: str) -> str:
        window = int(time.time()) // WINDOW_SECONDS
        return f"rate_limit:{caller}:{operation_type}:{window}"

    async def _increment(self, key: str) -> int:
        """Count this request in the current window."""
        async with self.redis_client.pipeline() as pipe:
            pipe.incr(key)
            pipe.expire(key, WINDOW_SECONDS)
            results = await pipe.execute()
        return results[0]

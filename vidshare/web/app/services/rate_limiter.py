"""
Redis-backed Rate Limiting Service.

Implements a sliding window algorithm to enforce per-user and per-IP rate limits.
"""
import math
import time
import uuid
from typing import Dict, Optional, Tuple

from fastapi import Depends, Request
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..config import Settings
from ..dependencies import AuthContext, get_app_settings, get_optional_user
from ..errors import RateLimitedError
from .logging_service import get_logger

logger = get_logger("rate_limit")


def get_redis(request: Request) -> Optional[Redis]:
    """The application's Redis client, or ``None`` when none was configured."""
    return getattr(request.app.state, "redis", None)


def scope_limits(settings: Settings) -> Dict[str, Tuple[int, int]]:
    """(requests, window seconds) for each limiter scope."""
    return {
        "general": (settings.RATE_LIMIT_GENERAL, settings.RATE_LIMIT_GENERAL_WINDOW),
        "comments": (settings.RATE_LIMIT_COMMENTS, settings.RATE_LIMIT_COMMENTS_WINDOW),
        "search": (settings.RATE_LIMIT_SEARCH, settings.RATE_LIMIT_SEARCH_WINDOW),
    }


def get_client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Take the first IP in the chain
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimiter:
    """
    A sliding window rate limiter that uses Redis to track request counts.
    """

    def __init__(self, redis: Redis):
        self.redis = redis

    async def hit(self, key: str, limit: int, window_seconds: int) -> Optional[int]:
        """
        Record one request against ``key``.

        :return: ``None`` while the key is within its limit, otherwise the
            number of seconds until the oldest request leaves the window.
        """
        now = time.time()
        window_start = now - window_seconds

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(key, 0, window_start)
            pipe.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
            pipe.zcard(key)
            pipe.zrange(key, 0, 0, withscores=True)
            pipe.expire(key, window_seconds)
            results = await pipe.execute()

        request_count = results[2]
        if request_count <= limit:
            return None

        oldest = results[3]
        oldest_score = oldest[0][1] if oldest else now
        return max(1, math.ceil(oldest_score + window_seconds - now))


class RateLimit:
    """
    FastAPI dependency that enforces the limit of one scope.

    Authenticated callers are keyed by user id, anonymous callers by client
    IP. If Redis cannot be reached the request is let through.
    """

    def __init__(self, scope: str):
        self.scope = scope

    async def __call__(
        self,
        request: Request,
        user: Optional[AuthContext] = Depends(get_optional_user),
        settings: Settings = Depends(get_app_settings),
    ) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return

        redis = get_redis(request)
        if redis is None:
            return

        limit, window = scope_limits(settings)[self.scope]
        client_key = f"user:{user.user_id}" if user else f"ip:{get_client_ip(request)}"
        key = f"rate_limit:{self.scope}:{client_key}"

        try:
            retry_after = await RateLimiter(redis).hit(key, limit, window)
        except (RedisError, OSError) as e:
            logger.warning(f"Rate limiter unavailable, allowing request: {e}",
                           extra={"scope": self.scope})
            return

        if retry_after is not None:
            logger.info(f"Rate limit exceeded for {client_key}",
                        extra={"scope": self.scope, "event_type": "rate_limited"})
            raise RateLimitedError(
                "Too many requests, please try again later.",
                retry_after=retry_after,
                details={"scope": self.scope},
            )


general_rate_limit = RateLimit("general")
comments_rate_limit = RateLimit("comments")
search_rate_limit = RateLimit("search")

"""
Per-caller request budgets.

Every rate limited endpoint draws from a named budget. A signed-in caller
gets one bucket per budget, shared by all endpoints that draw from it, so
one account dragging cards around never eats into another account's
allowance. Signup and login run before there is a user and are counted
per client address instead.

Hits live in a sliding window: a Redis sorted set per bucket when
RATE_LIMIT_USE_REDIS is on, otherwise timestamps kept in process. A
refused hit is not recorded, so hammering a spent budget does not push
the reset further out.
"""
import math
import time
import uuid
from collections import defaultdict, deque
from functools import wraps
from typing import Any, Callable, NamedTuple, Optional

from fastapi import Request
from redis.asyncio import Redis
from redis.exceptions import RedisError

from thoughtboard.config import settings
from thoughtboard.exceptions import RateLimitExceededException
from thoughtboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class Budget(NamedTuple):
    limit: int
    window: int  # seconds


BUDGETS: dict[str, Budget] = {
    "signup": Budget(10, 60),
    "login": Budget(5, 60),
    # Profile, board list and board contents
    "read": Budget(240, 60),
    # Creating, renaming and deleting boards
    "boards": Budget(60, 60),
    # Thought and connection edits; every drag or resize release saves
    "canvas": Budget(600, 60),
}


class Verdict(NamedTuple):
    allowed: bool
    limit: int
    remaining: int
    reset: int
    retry_after: int

    def headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


def _verdict(allowed: bool, budget: Budget, used: int, oldest: float, now: float) -> Verdict:
    frees_at = oldest + budget.window
    return Verdict(
        allowed=allowed,
        limit=budget.limit,
        remaining=max(0, budget.limit - used),
        reset=math.ceil(frees_at),
        retry_after=max(1, math.ceil(frees_at - now)),
    )


class SlidingWindowLimiter:
    """Counts hits per bucket over the trailing window of its budget."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        use_redis: Optional[bool] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.redis_url = redis_url or settings.REDIS_URL
        if use_redis is None:
            use_redis = settings.RATE_LIMIT_USE_REDIS
        self._use_redis = use_redis
        self._redis: Optional[Redis] = None
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self.clock = clock

    @property
    def backend(self) -> str:
        return "redis" if self._use_redis else "memory"

    async def _connect(self) -> Optional[Redis]:
        if self._redis is None:
            redis = Redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            try:
                await redis.ping()
            except (RedisError, OSError) as e:
                logger.warning(f"Redis unavailable for rate limiting, counting in process: {e}")
                await redis.aclose()
                self._use_redis = False
                return None
            self._redis = redis
        return self._redis

    async def hit(self, key: str, budget: Budget) -> Verdict:
        """Record one request against ``key`` if the budget allows it."""
        now = self.clock()
        if self._use_redis:
            redis = await self._connect()
            if redis is not None:
                try:
                    return await self._hit_redis(redis, key, budget, now)
                except (RedisError, OSError) as e:
                    logger.warning(f"Redis rate limit check failed, counting in process: {e}")
                    self._use_redis = False
                    self._redis = None
        return self._hit_memory(key, budget, now)

    def _hit_memory(self, key: str, budget: Budget, now: float) -> Verdict:
        hits = self._hits[key]
        cutoff = now - budget.window
        while hits and hits[0] <= cutoff:
            hits.popleft()

        allowed = len(hits) < budget.limit
        if allowed:
            hits.append(now)
        return _verdict(allowed, budget, len(hits), hits[0] if hits else now, now)

    async def _hit_redis(self, redis: Redis, key: str, budget: Budget, now: float) -> Verdict:
        member = f"{now}:{uuid.uuid4().hex[:8]}"
        async with redis.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(key, 0, now - budget.window)
            pipe.zadd(key, {member: now})
            pipe.zcard(key)
            pipe.zrange(key, 0, 0, withscores=True)
            pipe.expire(key, budget.window)
            _, _, used, oldest, _ = await pipe.execute()

        allowed = used <= budget.limit
        if not allowed:
            await redis.zrem(key, member)
            used -= 1
        oldest_at = oldest[0][1] if oldest else now
        return _verdict(allowed, budget, used, oldest_at, now)

    def reset(self):
        """Forget every in-process bucket."""
        self._hits.clear()

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


limiter = SlidingWindowLimiter()


async def close_rate_limiter():
    """Close the Redis connection (call on shutdown)."""
    await limiter.close()


def caller_key(request: Request, current_user: Any = None) -> str:
    """Bucket owner: the signed-in user, else the client address."""
    if current_user is not None:
        return f"user:{current_user.id}"
    host = request.client.host if request.client is not None else "unknown"
    return f"addr:{host}"


def rate_limit(budget_name: str):
    """
    Charge one hit against a named budget before running the endpoint.

    The endpoint must take ``request: Request``. When it also takes
    ``current_user``, the bucket belongs to that user.

    Raises:
        RateLimitExceededException: The caller's budget is spent
    """
    if budget_name not in BUDGETS:
        raise KeyError(f"Unknown rate limit budget: {budget_name}")

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            if not settings.RATE_LIMIT_ENABLED:
                return await func(*args, **kwargs)

            request: Request = kwargs["request"]
            owner = caller_key(request, kwargs.get("current_user"))
            verdict = await limiter.hit(f"rate_limit:{budget_name}:{owner}", BUDGETS[budget_name])
            # Picked up by RateLimitHeaderMiddleware
            request.state.rate_budget = verdict

            if not verdict.allowed:
                logger.bind(budget=budget_name, caller=owner).warning("Rate limit exceeded")
                raise RateLimitExceededException(verdict.retry_after, verdict.headers())

            return await func(*args, **kwargs)

        return wrapper
    return decorator

"""Redis-backed rate limiting for the admin-ajax endpoint."""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Callable, Iterable, Protocol, runtime_checkable

from fastapi import status
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.types import ASGIApp

from core import Settings, decode_token
from core.security import ACCESS_TOKEN_TYPE

ACCESS_COOKIE_NAME = "access_token"
Clock = Callable[[], float]
logger = logging.getLogger(__name__)


@runtime_checkable
class SupportsRateLimitClient(Protocol):
    async def incr(self, key: str) -> int: ...

    async def expire(self, key: str, ttl: int) -> None: ...


def _extract_subject_from_token(token: str) -> str | None:
    try:
        payload = decode_token(token)
    except ValueError:
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return None

    subject = payload.get("sub")
    if isinstance(subject, str):
        normalized = subject.strip()
        return normalized or None
    return None


def _extract_bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("authorization")
    if not authorization:
        return None

    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = value.strip()
    return token or None


def default_client_identifier(request: Request) -> str:
    """Resolve a stable client identifier for rate limiting."""
    for token in (request.cookies.get(ACCESS_COOKIE_NAME), _extract_bearer_token(request)):
        if not token:
            continue
        subject = _extract_subject_from_token(token)
        if subject:
            return f"user:{subject}"

    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


class RateLimiter:
    """Fixed-window request counter keyed by client and window number."""

    def __init__(
        self,
        redis_client: SupportsRateLimitClient,
        *,
        limit: int,
        window_seconds: int,
        prefix: str = "notice-dismiss",
        clock: Clock = time.time,
    ) -> None:
        if limit <= 0 or window_seconds <= 0:
            raise ValueError("limit and window_seconds must be positive")
        self.redis = redis_client
        self.limit = limit
        self.window_seconds = window_seconds
        self.prefix = prefix
        self._clock = clock

    def window_key(self, client_key: str) -> str:
        window = int(self._clock()) // self.window_seconds
        return f"{self.prefix}:{client_key}:{window}"

    async def allow(self, client_key: str) -> bool:
        redis_key = self.window_key(client_key)
        count = await self.redis.incr(redis_key)
        if count == 1:
            # The first hit of a window owns its expiry.
            await self.redis.expire(redis_key, self.window_seconds)
        return count <= self.limit


@lru_cache
def get_redis_client(redis_url: str) -> SupportsRateLimitClient:
    return Redis.from_url(redis_url, decode_responses=False)


def build_rate_limiter(config: Settings) -> RateLimiter | None:
    """Return the configured limiter, or None when rate limiting is disabled."""
    if config.rate_limit_requests <= 0 or config.rate_limit_window_seconds <= 0:
        return None
    return RateLimiter(
        get_redis_client(config.redis_url),
        limit=config.rate_limit_requests,
        window_seconds=config.rate_limit_window_seconds,
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limits requests under the given path prefixes.

    The limiter is read from ``app.state.rate_limiter`` on every request, so
    it can be swapped or set to None (disabled) after startup.
    """

    def __init__(
        self,
        app: ASGIApp,
        limited_prefixes: Iterable[str],
        client_identifier: Callable[[Request], str] | None = None,
    ) -> None:
        super().__init__(app)
        self.limited_prefixes = tuple(limited_prefixes)
        self.client_identifier = client_identifier or default_client_identifier

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        path = request.url.path
        limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
        if limiter is None or not any(path.startswith(prefix) for prefix in self.limited_prefixes):
            return await call_next(request)

        try:
            is_allowed = await limiter.allow(self.client_identifier(request) or "anonymous")
        except Exception as exc:  # pragma: no cover - Redis outage
            logger.warning("Rate limiter unavailable", exc_info=exc)
            return await call_next(request)

        if not is_allowed:
            return JSONResponse(
                {"detail": "Too Many Requests"},
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            )

        return await call_next(request)

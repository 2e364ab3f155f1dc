"""Business logic services."""

from .rate_limiter import (
    RateLimitMiddleware,
    RateLimiter,
    build_rate_limiter,
)

__all__ = [
    "RateLimiter",
    "RateLimitMiddleware",
    "build_rate_limiter",
]

"""Login rate limiting adapters."""

from school_auth.infrastructure.rate_limit.in_memory_login_rate_limiter import (
    InMemoryLoginRateLimiter,
)

__all__ = ["InMemoryLoginRateLimiter"]

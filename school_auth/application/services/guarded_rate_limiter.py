"""Timeout-bounded, fail-open wrapper around the LoginRateLimiter port.

The rate limiter is advisory infrastructure: when it is slow or broken the
workflow carries on as if the address were not limited. Every degraded call
is logged.
"""

import asyncio
from collections.abc import Awaitable
from datetime import timedelta
from typing import TypeVar

from school_auth.domain.protocols.logger_protocol import LoggerProtocol
from school_auth.domain.protocols.login_rate_limiter import LoginRateLimiter

T = TypeVar("T")


class GuardedRateLimiter:
    """Wraps a LoginRateLimiter with ``asyncio.wait_for`` and a fallback.

    Args:
        rate_limiter: Underlying limiter.
        logger: Logger for degraded calls.
        timeout_seconds: Upper bound per call.
    """

    def __init__(
        self,
        rate_limiter: LoginRateLimiter,
        logger: LoggerProtocol,
        timeout_seconds: float,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._logger = logger
        self._timeout_seconds = timeout_seconds

    async def too_many_attempts(self, source_address: str, window: timedelta) -> bool:
        return await self._call(
            self._rate_limiter.too_many_attempts(source_address, window),
            fallback=False,
            operation="too_many_attempts",
        )

    async def is_suspicious_address(self, source_address: str) -> bool:
        return await self._call(
            self._rate_limiter.is_suspicious_address(source_address),
            fallback=False,
            operation="is_suspicious_address",
        )

    async def record_attempt(self, source_address: str) -> None:
        await self._call(
            self._rate_limiter.record_attempt(source_address),
            fallback=None,
            operation="record_attempt",
        )

    async def _call(self, call: Awaitable[T], *, fallback: T, operation: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout_seconds)
        except TimeoutError:
            self._logger.warning(
                "rate_limiter_timeout",
                operation=operation,
                timeout_seconds=self._timeout_seconds,
            )
            return fallback
        except Exception as e:
            self._logger.warning(
                "rate_limiter_failed",
                operation=operation,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return fallback

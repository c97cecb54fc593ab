"""In-memory sliding-window login rate limiter.

Implements the LoginRateLimiter protocol with one deque of attempt
timestamps per source address. Suitable for single-process deployments; the
instance is created once by the container and injected into handlers.

Architecture:
    Domain Protocol <- InMemoryLoginRateLimiter -> dict[address, deque]

Usage:
    limiter = InMemoryLoginRateLimiter(clock=clock, logger=logger)
    await limiter.record_attempt("203.0.113.7")
    await limiter.too_many_attempts("203.0.113.7", timedelta(minutes=15))
"""

from __future__ import annotations

import asyncio
from collections import defaultdict, deque
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from school_auth.domain.protocols.clock import Clock
    from school_auth.domain.protocols.logger_protocol import LoggerProtocol


SUSPICIOUS_WINDOW = timedelta(hours=1)
SWEEP_INTERVAL = timedelta(minutes=1)


class InMemoryLoginRateLimiter:
    """Sliding-window attempt counter keyed by source address.

    Only attempts recorded through ``record_attempt`` count. Entries older
    than the longest window in use are pruned on every access, and addresses
    with no remaining entries are forgotten. At most once per minute,
    ``record_attempt`` also sweeps every address, so addresses that are never
    seen again do not accumulate.

    Args:
        clock: Source of "now".
        logger: Structured logger.
        max_attempts: Attempts allowed inside the window before limiting.
        suspicious_threshold: Attempts per hour that flag an address.
    """

    def __init__(
        self,
        *,
        clock: Clock,
        logger: LoggerProtocol,
        max_attempts: int = 10,
        suspicious_threshold: int = 20,
    ) -> None:
        self._clock = clock
        self._logger = logger
        self._max_attempts = max_attempts
        self._suspicious_threshold = suspicious_threshold
        self._retention = SUSPICIOUS_WINDOW
        self._attempts: dict[str, deque[datetime]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._last_sweep: datetime | None = None

    async def too_many_attempts(self, source_address: str, window: timedelta) -> bool:
        """True when ``max_attempts`` or more attempts fall inside ``window``."""
        key = _normalize(source_address)
        if not key:
            return False
        async with self._lock:
            now = self._clock.now()
            self._retention = max(self._retention, window)
            count = self._count_since(key, now - window)

        limited = count >= self._max_attempts
        if limited:
            self._logger.warning(
                "login_address_rate_limited",
                source_address=key,
                attempts=count,
                window_seconds=int(window.total_seconds()),
            )
        return limited

    async def is_suspicious_address(self, source_address: str) -> bool:
        """Advisory: more than ``suspicious_threshold`` attempts in an hour."""
        key = _normalize(source_address)
        if not key:
            return False
        async with self._lock:
            now = self._clock.now()
            count = self._count_since(key, now - SUSPICIOUS_WINDOW)
        return count > self._suspicious_threshold

    async def record_attempt(self, source_address: str) -> None:
        key = _normalize(source_address)
        if not key:
            return
        async with self._lock:
            now = self._clock.now()
            self._sweep(now)
            self._prune(key, now)
            self._attempts[key].append(now)

    async def reset(self, source_address: str) -> None:
        async with self._lock:
            self._attempts.pop(_normalize(source_address), None)

    def _count_since(self, key: str, start: datetime) -> int:
        self._prune(key, self._clock.now())
        attempts = self._attempts.get(key)
        if not attempts:
            return 0
        return sum(1 for at in attempts if at > start)

    def _sweep(self, now: datetime) -> None:
        if self._last_sweep is not None and now - self._last_sweep < SWEEP_INTERVAL:
            return
        self._last_sweep = now
        cutoff = now - self._retention
        stale = [
            key
            for key, attempts in self._attempts.items()
            if not attempts or attempts[-1] <= cutoff
        ]
        for key in stale:
            del self._attempts[key]

    def _prune(self, key: str, now: datetime) -> None:
        attempts = self._attempts.get(key)
        if attempts is None:
            return
        cutoff = now - self._retention
        while attempts and attempts[0] <= cutoff:
            attempts.popleft()
        if not attempts:
            del self._attempts[key]


def _normalize(source_address: str | None) -> str:
    return (source_address or "").strip().lower()

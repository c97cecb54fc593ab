"""Clock adapters."""

from school_auth.infrastructure.clock.system_clock import FixedClock, SystemClock

__all__ = ["FixedClock", "SystemClock"]

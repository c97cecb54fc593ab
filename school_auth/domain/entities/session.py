"""Session domain entity for multi-device session tracking.

Pure business logic, no framework dependencies. A Session is owned by exactly
one User and is only created or mutated through that User aggregate.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from uuid_extensions import uuid7

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import ConflictError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.value_objects.device_summary import DeviceSummary


SUSPICIOUS_IDLE = timedelta(hours=24)
SUSPICIOUS_LIFETIME = timedelta(days=7)
AUTOMATION_KEYWORDS: tuple[str, ...] = (
    "bot",
    "crawler",
    "spider",
    "scraper",
    "curl",
    "wget",
)


@dataclass(slots=True, kw_only=True)
class Session:
    """One authenticated device/browser context.

    Business Rules:
        - Sessions only transition active -> inactive, never back
        - Once inactive, ended_at is set and never changes
        - last_activity_at only moves forward
        - Only the ending transition is allowed on an inactive session

    Attributes:
        id: Unique session identifier.
        user_id: User who owns this session.
        source_address: Client IP address at login.
        user_agent: Raw user agent string at login.
        started_at: When the session was opened.
        last_activity_at: Most recent activity.
        ended_at: When the session ended (None while active).
        is_active: Whether the session is still usable.
        location: Optional geographic label ("Lisbon, PT").

    Example:
        >>> session = Session.start(
        ...     user_id=user.id,
        ...     source_address="10.0.0.1",
        ...     user_agent="Mozilla/5.0 ...",
        ...     now=now,
        ... )
        >>> session.end(now)
        True
        >>> session.end(now)  # idempotent
        False
    """

    id: UUID
    user_id: UUID
    source_address: str
    user_agent: str
    started_at: datetime
    last_activity_at: datetime
    ended_at: datetime | None = None
    is_active: bool = True
    location: str | None = None

    @classmethod
    def start(
        cls,
        *,
        user_id: UUID,
        source_address: str,
        user_agent: str,
        now: datetime,
    ) -> "Session":
        """Create a new active session.

        Raises:
            ValueError: If source address or user agent is blank.
        """
        if not source_address or not source_address.strip():
            raise ValueError("Session source address is required")
        if not user_agent or not user_agent.strip():
            raise ValueError("Session user agent is required")
        return cls(
            id=uuid7(),
            user_id=user_id,
            source_address=source_address.strip(),
            user_agent=user_agent.strip(),
            started_at=now,
            last_activity_at=now,
        )

    def touch(self, now: datetime) -> Result[None, ConflictError]:
        """Record activity.

        Timestamps earlier than the current last activity are ignored, so
        last_activity_at never moves backwards.

        Returns:
            Failure(ConflictError) if the session is no longer active.
        """
        if not self.is_active:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.SESSION_INACTIVE,
                    message="Session has ended",
                    resource_type="Session",
                    conflicting_field="is_active",
                )
            )
        if now > self.last_activity_at:
            self.last_activity_at = now
        return Success(value=None)

    def end(self, now: datetime) -> bool:
        """End the session (one-way).

        Returns:
            True if the session was active and is now ended, False if it was
            already ended (ended_at is left untouched).
        """
        if not self.is_active:
            return False
        self.is_active = False
        self.ended_at = now
        return True

    def set_location(self, location: str | None) -> None:
        """Attach a geographic label while the session is active."""
        if self.is_active:
            self.location = location.strip() if location else None

    def duration(self, now: datetime) -> timedelta:
        """Lifetime so far, or total lifetime once ended."""
        return (self.ended_at or now) - self.started_at

    def idle_time(self, now: datetime) -> timedelta:
        """Time since last activity."""
        return now - self.last_activity_at

    def is_expired(self, max_idle_minutes: int, now: datetime) -> bool:
        """Inactive, or idle for longer than ``max_idle_minutes``."""
        if not self.is_active:
            return True
        return self.idle_time(now) > timedelta(minutes=max_idle_minutes)

    def is_long_running(self, max_hours: int, now: datetime) -> bool:
        """Duration exceeds ``max_hours``."""
        return self.duration(now) > timedelta(hours=max_hours)

    def is_suspicious(self, now: datetime) -> bool:
        """Heuristic for automation or abandonment.

        Suspicious when any of:
            - still active but idle for more than 24 hours
            - lifetime longer than 7 days
            - user agent contains an automation keyword (bot, curl, ...)
        """
        if self.is_active and self.idle_time(now) > SUSPICIOUS_IDLE:
            return True
        if self.duration(now) > SUSPICIOUS_LIFETIME:
            return True
        agent = self.user_agent.lower()
        return any(keyword in agent for keyword in AUTOMATION_KEYWORDS)

    def matches_device(self, source_address: str, user_agent: str) -> bool:
        """Case-insensitive comparison of address and user agent.

        Used to recognize returning devices. Never used for authorization.
        """
        return (
            self.source_address.strip().lower() == source_address.strip().lower()
            and self.user_agent.strip().lower() == user_agent.strip().lower()
        )

    @property
    def device_summary(self) -> DeviceSummary:
        """Parsed OS/browser/device class (best-effort)."""
        return DeviceSummary.parse(self.user_agent)

    @property
    def is_mobile(self) -> bool:
        return self.device_summary.is_mobile

    def summary(self, now: datetime) -> str:
        """One-line description for logs and session listings."""
        status = "active" if self.is_active else "ended"
        minutes = int(self.duration(now).total_seconds() // 60)
        return (
            f"{self.device_summary} from {self.source_address} "
            f"({status}, {minutes} min)"
        )

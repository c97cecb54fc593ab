"""User aggregate root for authentication.

Pure business logic, no framework dependencies.

The User owns its credential, role, lockout state, refresh token and the
collection of its Sessions. Every mutation of any of those goes through a
method on this class, which enforces the invariants and records a domain
event. The application layer persists the aggregate, then pulls the events
with ``pull_events()`` and publishes them.

Time is never read from the wall clock here: every mutating method receives
``now`` from the injected Clock.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from uuid_extensions import uuid7

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import DomainError, NotFoundError, ValidationError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.session import Session
from school_auth.domain.enums.user_role import UserRole
from school_auth.domain.events import (
    AccountLocked,
    AccountUnlocked,
    AllSessionsInvalidated,
    DomainEvent,
    EmailConfirmed,
    LoginFailed,
    PasswordChanged,
    RoleChanged,
    UserActivated,
    UserDeactivated,
    UserInfoUpdated,
    UserLoggedIn,
    UserRegistered,
)
from school_auth.domain.policies.auth_policy import (
    DORMANT_ACCOUNT_DAYS,
    LOCKOUT_MINUTES,
    LOCKOUT_THRESHOLD,
    PASSWORD_EXPIRY_DAYS,
)
from school_auth.domain.value_objects.credential import Credential
from school_auth.domain.value_objects.email import EmailAddress

if TYPE_CHECKING:
    from school_auth.domain.protocols.credential_hasher import CredentialHasher


@dataclass
class User:
    """User aggregate with authentication business rules.

    Business Rules:
        - failed_login_count resets to 0 on successful login or explicit unlock
        - Reaching the lockout threshold (5) locks the account for 30 minutes
        - Changing credential or role ends every active session and clears
          the refresh token
        - Only one refresh token is valid at a time
        - Only the top-privilege role may access any school; every other role
          is confined to its own school_id
        - Users are never deleted, only deactivated

    Attributes:
        id: Unique user identifier (UUIDv7).
        first_name: Given name (non-empty, trimmed).
        last_name: Family name (non-empty, trimmed).
        email: Validated email address (unique).
        credential: Hashed password and change timestamp.
        role: Role code with authority level.
        school_id: School the user belongs to (None = no school).
        is_active: Soft-deactivation flag.
        email_confirmed: Whether the email address was confirmed.
        failed_login_count: Consecutive failed logins (>= 0).
        locked_until: Lock expiry (None if never locked).
        refresh_token: Current opaque refresh token.
        refresh_token_expires_at: Refresh token expiry.
        last_login_at: Last successful login.
        created_at: Creation timestamp.
        updated_at: Last mutation timestamp.
        version: Optimistic concurrency token (managed by the repository).
        sessions: Owned sessions. Mutate only through User methods.

    Example:
        >>> user = User.register(
        ...     first_name="Ana",
        ...     last_name="Silva",
        ...     email=EmailAddress("ana@school.edu"),
        ...     credential=Credential(password_hash=hashed, changed_at=now),
        ...     role=UserRole.TEACHER,
        ...     school_id=school_id,
        ...     now=now,
        ... )
        >>> user.can_access_school(school_id)
        True
    """

    id: UUID
    first_name: str
    last_name: str
    email: EmailAddress
    credential: Credential
    role: UserRole
    created_at: datetime
    updated_at: datetime
    school_id: UUID | None = None
    is_active: bool = True
    email_confirmed: bool = False
    failed_login_count: int = 0
    locked_until: datetime | None = None
    refresh_token: str | None = None
    refresh_token_expires_at: datetime | None = None
    last_login_at: datetime | None = None
    version: int = 0
    sessions: list[Session] = field(default_factory=list)
    _events: list[DomainEvent] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @classmethod
    def register(
        cls,
        *,
        first_name: str,
        last_name: str,
        email: EmailAddress,
        credential: Credential,
        role: UserRole,
        now: datetime,
        school_id: UUID | None = None,
    ) -> "User":
        """Create a new user and record ``UserRegistered``.

        Raises:
            ValueError: If first or last name is blank.
        """
        if not first_name or not first_name.strip():
            raise ValueError("First name is required")
        if not last_name or not last_name.strip():
            raise ValueError("Last name is required")

        user = cls(
            id=uuid7(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            credential=credential,
            role=role,
            school_id=school_id,
            created_at=now,
            updated_at=now,
        )
        user._record(
            UserRegistered(
                user_id=user.id,
                email=str(email),
                role=role.value,
                occurred_at=now,
            )
        )
        return user

    # ------------------------------------------------------------------
    # Identity projections
    # ------------------------------------------------------------------

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()

    # ------------------------------------------------------------------
    # Credential and login
    # ------------------------------------------------------------------

    def verify_credential(self, plaintext: str, hasher: "CredentialHasher") -> bool:
        """Check a plaintext password against the stored hash.

        Delegates to the hasher (constant-time comparison is the hasher's
        job). Does not mutate state.
        """
        if not plaintext:
            return False
        return hasher.verify(plaintext, self.credential.password_hash)

    def record_successful_login(self, now: datetime) -> None:
        """Stamp last login and clear the failure counter and lock."""
        self.last_login_at = now
        self.failed_login_count = 0
        self.locked_until = None
        self._touch(now)
        self._record(
            UserLoggedIn(user_id=self.id, email=str(self.email), occurred_at=now)
        )

    def record_failed_login(
        self,
        now: datetime,
        threshold: int = LOCKOUT_THRESHOLD,
        lock_minutes: int = LOCKOUT_MINUTES,
    ) -> None:
        """Count a failed login; lock the account at the threshold.

        Always records ``LoginFailed``. Records ``AccountLocked`` when the
        counter reaches ``threshold``.
        """
        self.failed_login_count += 1
        self._touch(now)
        self._record(
            LoginFailed(
                user_id=self.id,
                email=str(self.email),
                failed_login_count=self.failed_login_count,
                occurred_at=now,
            )
        )
        if self.failed_login_count >= threshold:
            self.locked_until = now + timedelta(minutes=lock_minutes)
            self._record(
                AccountLocked(
                    user_id=self.id,
                    email=str(self.email),
                    locked_until=self.locked_until,
                    occurred_at=now,
                )
            )

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and self.locked_until > now

    def lock_remaining(self, now: datetime) -> timedelta:
        """Time until the lock expires (zero when not locked)."""
        if self.locked_until is None or self.locked_until <= now:
            return timedelta(0)
        return self.locked_until - now

    def unlock(self, now: datetime) -> None:
        """Clear the lock and failure counter (administrative action)."""
        self.failed_login_count = 0
        self.locked_until = None
        self._touch(now)
        self._record(AccountUnlocked(user_id=self.id, occurred_at=now))

    def change_credential(self, new_credential: Credential, now: datetime) -> None:
        """Replace the password.

        Ends every active session and clears the refresh token so every
        device must re-authenticate.
        """
        self.credential = Credential(
            password_hash=new_credential.password_hash, changed_at=now
        )
        self.clear_refresh_token()
        self.invalidate_all_sessions(now)
        self._touch(now)
        self._record(
            PasswordChanged(user_id=self.id, email=str(self.email), occurred_at=now)
        )

    def password_expired(
        self, now: datetime, max_age_days: int = PASSWORD_EXPIRY_DAYS
    ) -> bool:
        return self.credential.is_expired(now, max_age_days)

    def is_dormant(self, now: datetime, max_days: int = DORMANT_ACCOUNT_DAYS) -> bool:
        """No login (or, if never logged in, no creation) within ``max_days``."""
        reference = self.last_login_at or self.created_at
        return now - reference > timedelta(days=max_days)

    # ------------------------------------------------------------------
    # Refresh token
    # ------------------------------------------------------------------

    def issue_refresh_token(
        self, token: str, expires_at: datetime, now: datetime
    ) -> Result[None, ValidationError]:
        """Store a new refresh token, replacing any previous one.

        Returns:
            Failure(ValidationError) if the token is blank or the expiry is
            not strictly in the future.
        """
        if not token or not token.strip():
            return Failure(
                error=ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message="Refresh token cannot be empty",
                    field="refresh_token",
                )
            )
        if expires_at <= now:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_TOKEN_EXPIRY,
                    message="Refresh token expiry must be in the future",
                    field="refresh_token_expires_at",
                )
            )
        self.refresh_token = token
        self.refresh_token_expires_at = expires_at
        self._touch(now)
        return Success(value=None)

    def refresh_token_is_valid(self, candidate: str, now: datetime) -> bool:
        """Exact match with the stored token and not expired."""
        if not candidate or self.refresh_token is None:
            return False
        if self.refresh_token_expires_at is None:
            return False
        return candidate == self.refresh_token and self.refresh_token_expires_at > now

    def clear_refresh_token(self) -> None:
        self.refresh_token = None
        self.refresh_token_expires_at = None

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @property
    def active_sessions(self) -> tuple[Session, ...]:
        return tuple(session for session in self.sessions if session.is_active)

    def find_session(self, session_id: UUID) -> Session | None:
        return next((s for s in self.sessions if s.id == session_id), None)

    def find_device_session(
        self, source_address: str | None, user_agent: str | None
    ) -> Session | None:
        """Most recently active session opened from the same device, if any."""
        if not source_address or not user_agent:
            return None
        matching = [
            s
            for s in self.active_sessions
            if s.matches_device(source_address, user_agent)
        ]
        return max(matching, key=lambda s: s.last_activity_at, default=None)

    def open_session(
        self, source_address: str, user_agent: str, now: datetime
    ) -> Session:
        """Attach a new active session.

        Does not check the lock; the workflow gates on ``is_locked`` first.

        Raises:
            ValueError: If source address or user agent is blank.
        """
        session = Session.start(
            user_id=self.id,
            source_address=source_address,
            user_agent=user_agent,
            now=now,
        )
        self.sessions.append(session)
        self._touch(now)
        return session

    def end_session(self, session_id: UUID, now: datetime) -> bool:
        """End one owned session.

        Returns:
            True if an active session was ended. False when the session is
            unknown or already ended (both are no-ops).
        """
        session = self.find_session(session_id)
        if session is None:
            return False
        ended = session.end(now)
        if ended:
            self._touch(now)
        return ended

    def touch_session(self, session_id: UUID, now: datetime) -> Result[None, DomainError]:
        """Record activity on an owned session."""
        session = self.find_session(session_id)
        if session is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.SESSION_NOT_FOUND,
                    message="Session not found",
                    resource_type="Session",
                    resource_id=str(session_id),
                )
            )
        return session.touch(now)

    def invalidate_all_sessions(self, now: datetime) -> int:
        """End every active session.

        Returns:
            Number of sessions that were ended.
        """
        ended = sum(1 for session in self.sessions if session.end(now))
        self._touch(now)
        self._record(
            AllSessionsInvalidated(
                user_id=self.id, session_count=ended, occurred_at=now
            )
        )
        return ended

    # ------------------------------------------------------------------
    # Authorization scope and role
    # ------------------------------------------------------------------

    def can_access_school(self, school_id: UUID | None) -> bool:
        """Top-privilege role accesses any school; others only their own."""
        if self.role.is_top_privilege:
            return True
        return self.school_id is not None and self.school_id == school_id

    def change_role(self, new_role: UserRole, now: datetime) -> bool:
        """Assign a new role and force re-authentication everywhere.

        Returns:
            False if ``new_role`` equals the current role (no-op).
        """
        if new_role == self.role:
            return False
        previous = self.role
        self.role = new_role
        self.clear_refresh_token()
        self.invalidate_all_sessions(now)
        self._touch(now)
        self._record(
            RoleChanged(
                user_id=self.id,
                previous_role=previous.value,
                new_role=new_role.value,
                occurred_at=now,
            )
        )
        return True

    # ------------------------------------------------------------------
    # Account status
    # ------------------------------------------------------------------

    def deactivate(self, now: datetime) -> None:
        """Soft-deactivate. Idempotent."""
        if not self.is_active:
            return
        self.is_active = False
        self.clear_refresh_token()
        self.invalidate_all_sessions(now)
        self._touch(now)
        self._record(UserDeactivated(user_id=self.id, occurred_at=now))

    def activate(self, now: datetime) -> None:
        """Re-enable a deactivated user. Idempotent."""
        if self.is_active:
            return
        self.is_active = True
        self._touch(now)
        self._record(UserActivated(user_id=self.id, occurred_at=now))

    def confirm_email(self, now: datetime) -> None:
        """Mark the email as confirmed. Idempotent."""
        if self.email_confirmed:
            return
        self.email_confirmed = True
        self._touch(now)
        self._record(
            EmailConfirmed(user_id=self.id, email=str(self.email), occurred_at=now)
        )

    def update_name(
        self, first_name: str, last_name: str, now: datetime
    ) -> Result[None, ValidationError]:
        """Change first and last name."""
        for field_name, value in (("first_name", first_name), ("last_name", last_name)):
            if not value or not value.strip():
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.INVALID_NAME,
                        message="Name cannot be empty",
                        field=field_name,
                    )
                )
        self.first_name = first_name.strip()
        self.last_name = last_name.strip()
        self._touch(now)
        self._record(UserInfoUpdated(user_id=self.id, occurred_at=now))
        return Success(value=None)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def pull_events(self) -> list[DomainEvent]:
        """Return and clear the recorded events (oldest first)."""
        events = list(self._events)
        self._events.clear()
        return events

    def _record(self, event: DomainEvent) -> None:
        self._events.append(event)

    def _touch(self, now: datetime) -> None:
        if now > self.updated_at:
            self.updated_at = now

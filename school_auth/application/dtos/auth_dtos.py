"""Authentication DTOs (Data Transfer Objects).

Response dataclasses returned by handlers. Handlers never hand out the User
aggregate itself.

DTOs:
    - AuthTokens: access/refresh token pair
    - UserInfo: read projection of a user
    - LoginResult: result of a successful login
    - SessionInfo: read projection of a session
    - PasswordStrengthReport: result of the password strength query
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from school_auth.domain.entities.session import Session
from school_auth.domain.entities.user import User
from school_auth.domain.enums.password_strength import PasswordStrength


class LoginAttemptState(str, Enum):
    """Terminal states of one login attempt (all start in EVALUATING)."""

    EVALUATING = "evaluating"
    LOCKED = "locked"
    RATE_LIMITED = "rate_limited"
    INVALID_CREDENTIAL = "invalid_credential"
    SUCCESS = "success"


@dataclass(frozen=True, kw_only=True)
class AuthTokens:
    """Authentication tokens returned to the client.

    Attributes:
        access_token: Signed access token (short-lived).
        refresh_token: Opaque refresh token (rotated on every use).
        token_type: Token type (always "bearer").
        expires_in: Access token lifetime in seconds.
        refresh_expires_at: Refresh token expiry.
    """

    access_token: str
    refresh_token: str
    refresh_expires_at: datetime
    token_type: str = "bearer"
    expires_in: int = 900

    def __repr__(self) -> str:
        return f"AuthTokens(token_type={self.token_type!r}, expires_in={self.expires_in})"


@dataclass(frozen=True, kw_only=True)
class UserInfo:
    """User projection for login responses and "current user" queries."""

    user_id: UUID
    first_name: str
    last_name: str
    full_name: str
    initials: str
    email: str
    role_code: str
    role_name: str
    role_level: int
    school_id: UUID | None
    is_active: bool
    email_confirmed: bool
    last_login_at: datetime | None
    permissions: tuple[str, ...]

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            initials=user.initials,
            email=str(user.email),
            role_code=user.role.value,
            role_name=user.role.display_name,
            role_level=user.role.level,
            school_id=user.school_id,
            is_active=user.is_active,
            email_confirmed=user.email_confirmed,
            last_login_at=user.last_login_at,
            permissions=user.role.permissions,
        )


@dataclass(frozen=True, kw_only=True)
class LoginResult:
    """Successful login.

    Attributes:
        tokens: New token pair.
        user: User projection.
        session_id: Session opened by this login.
        requires_password_change: Password older than the expiry policy.
        requires_email_confirmation: Email not yet confirmed.
        suspicious_address: Advisory flag from the rate limiter.
    """

    tokens: AuthTokens
    user: UserInfo
    session_id: UUID
    requires_password_change: bool = False
    requires_email_confirmation: bool = False
    suspicious_address: bool = False
    state: LoginAttemptState = LoginAttemptState.SUCCESS


@dataclass(frozen=True, kw_only=True)
class SessionInfo:
    """Session projection for session listings."""

    session_id: UUID
    source_address: str
    device: str
    is_mobile: bool
    location: str | None
    started_at: datetime
    last_activity_at: datetime
    ended_at: datetime | None
    is_active: bool
    is_suspicious: bool
    is_expired: bool
    is_long_running: bool

    @classmethod
    def from_session(
        cls,
        session: Session,
        *,
        now: datetime,
        max_idle_minutes: int,
        max_hours: int,
    ) -> "SessionInfo":
        summary = session.device_summary
        return cls(
            session_id=session.id,
            source_address=session.source_address,
            device=str(summary),
            is_mobile=summary.is_mobile,
            location=session.location,
            started_at=session.started_at,
            last_activity_at=session.last_activity_at,
            ended_at=session.ended_at,
            is_active=session.is_active,
            is_suspicious=session.is_suspicious(now),
            is_expired=session.is_expired(max_idle_minutes, now),
            is_long_running=session.is_long_running(max_hours, now),
        )


@dataclass(frozen=True, kw_only=True)
class PasswordStrengthReport:
    """Score, class and rule check for a candidate password.

    ``is_valid`` reflects hard rules only. A password may be valid and weak,
    or strong and invalid.
    """

    score: int
    strength: PasswordStrength
    is_valid: bool
    violations: tuple[str, ...]
    suggestions: tuple[str, ...]
    is_compromised: bool

"""Authentication commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments
(kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic and return Result types
- Plaintext passwords live only in commands, never in logs or DTOs
"""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class Login:
    """Authenticate with email and password and open a session.

    Attributes:
        email: Email address as typed by the user.
        password: Plaintext password.
        source_address: Client IP address.
        user_agent: Client User-Agent header.
        remember_me: Issue a long-lived refresh token.
        location: Geographic label resolved by the caller (e.g. from a
            GeoIP lookup at the edge), stored on the new session.

    Example:
        >>> command = Login(
        ...     email="teacher@school.edu",
        ...     password="Str0ngPassw0rd",
        ...     source_address="203.0.113.7",
        ...     user_agent="Mozilla/5.0 ...",
        ... )
        >>> result = await handler.handle(command)
    """

    email: str
    password: str = field(repr=False)
    source_address: str
    user_agent: str
    remember_me: bool = False
    location: str | None = None


@dataclass(frozen=True, kw_only=True)
class Logout:
    """End one session, every session, or the session behind a refresh token.

    The caller identifies the user either by ``user_id`` (authenticated
    request) or by ``refresh_token`` (a client that only holds its refresh
    token). With a refresh token the stored token is cleared and the session
    of the calling device, matched by address and user agent, is ended.

    Attributes:
        user_id: Owner of the session(s).
        refresh_token: Refresh token held by the client.
        session_id: Session to end. Ignored when ``everywhere`` is True.
        everywhere: End all sessions and clear the refresh token.
        source_address: Calling device address, used with ``refresh_token``.
        user_agent: Calling device user agent, used with ``refresh_token``.
    """

    user_id: UUID | None = None
    refresh_token: str | None = field(default=None, repr=False)
    session_id: UUID | None = None
    everywhere: bool = False
    source_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class RefreshTokens:
    """Exchange a refresh token for a new access/refresh token pair.

    ``source_address`` and ``user_agent`` identify the calling device; the
    matching active session is touched and named in the new access token.
    """

    refresh_token: str = field(repr=False)
    source_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class ChangePassword:
    """Change the password of an authenticated user.

    Attributes:
        user_id: User changing their password.
        current_password: Password in use now.
        new_password: Replacement password.
        confirm_password: Must equal ``new_password``.
    """

    user_id: UUID
    current_password: str = field(repr=False)
    new_password: str = field(repr=False)
    confirm_password: str = field(repr=False)


@dataclass(frozen=True, kw_only=True)
class ForgotPassword:
    """Request a password-reset token (always answers success)."""

    email: str
    source_address: str | None = None


@dataclass(frozen=True, kw_only=True)
class ResetPassword:
    """Set a new password using a reset token."""

    email: str
    token: str = field(repr=False)
    new_password: str = field(repr=False)
    confirm_password: str = field(repr=False)


@dataclass(frozen=True, kw_only=True)
class ConfirmEmail:
    """Confirm email ownership using a confirmation token."""

    email: str
    token: str = field(repr=False)


@dataclass(frozen=True, kw_only=True)
class ResendEmailConfirmation:
    """Issue a fresh confirmation token (always answers success)."""

    email: str


@dataclass(frozen=True, kw_only=True)
class RegisterUser:
    """Create a new user account.

    Attributes:
        first_name: Given name.
        last_name: Family name.
        email: Email address.
        password: Initial plaintext password.
        role_code: Role code (see UserRole).
        school_id: School the user belongs to.
    """

    first_name: str
    last_name: str
    email: str
    password: str = field(repr=False)
    role_code: str
    school_id: UUID | None = None

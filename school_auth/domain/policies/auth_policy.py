"""Named security thresholds used by the User aggregate and the workflow.

Defaults mirror the production policy. The application layer builds an
AuthPolicy from Settings so every threshold is tunable through configuration
and replaceable in tests.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from school_auth.core.config import Settings


LOCKOUT_THRESHOLD = 5
LOCKOUT_MINUTES = 30
PASSWORD_EXPIRY_DAYS = 90
DORMANT_ACCOUNT_DAYS = 180
SESSION_MAX_IDLE_MINUTES = 30
SESSION_LONG_RUNNING_HOURS = 8
ACCESS_TOKEN_MINUTES = 15
REFRESH_TOKEN_DAYS = 7
REMEMBER_ME_REFRESH_TOKEN_DAYS = 30
RATE_LIMIT_WINDOW_MINUTES = 15
COLLABORATOR_TIMEOUT_SECONDS = 2.0


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthPolicy:
    """Security thresholds passed into handlers.

    Attributes:
        lockout_threshold: Consecutive failures that lock the account.
        lockout_minutes: Lock duration.
        password_expiry_days: Age after which a password must change.
        dormant_account_days: Days without login before an account is dormant.
        session_max_idle_minutes: Idle limit for the expired predicate.
        session_long_running_hours: Ceiling for the long-running predicate.
        access_token_minutes: Access token lifetime.
        refresh_token_days: Refresh token lifetime.
        remember_me_refresh_token_days: Refresh token lifetime with remember-me.
        rate_limit_window_minutes: Sliding window for address rate limiting.
        collaborator_timeout_seconds: Bound on breach and rate-limit lookups.
        blocked_email_domains: Disposable domains refused at registration.
    """

    lockout_threshold: int = LOCKOUT_THRESHOLD
    lockout_minutes: int = LOCKOUT_MINUTES
    password_expiry_days: int = PASSWORD_EXPIRY_DAYS
    dormant_account_days: int = DORMANT_ACCOUNT_DAYS
    session_max_idle_minutes: int = SESSION_MAX_IDLE_MINUTES
    session_long_running_hours: int = SESSION_LONG_RUNNING_HOURS
    access_token_minutes: int = ACCESS_TOKEN_MINUTES
    refresh_token_days: int = REFRESH_TOKEN_DAYS
    remember_me_refresh_token_days: int = REMEMBER_ME_REFRESH_TOKEN_DAYS
    rate_limit_window_minutes: int = RATE_LIMIT_WINDOW_MINUTES
    collaborator_timeout_seconds: float = COLLABORATOR_TIMEOUT_SECONDS
    blocked_email_domains: frozenset[str] = frozenset(
        {"tempmail.com", "10minutemail.com", "guerrillamail.com"}
    )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AuthPolicy":
        """Build the policy from application settings."""
        return cls(
            lockout_threshold=settings.lockout_threshold,
            lockout_minutes=settings.lockout_minutes,
            password_expiry_days=settings.password_expiry_days,
            dormant_account_days=settings.dormant_account_days,
            session_max_idle_minutes=settings.session_max_idle_minutes,
            session_long_running_hours=settings.session_long_running_hours,
            access_token_minutes=settings.access_token_expire_minutes,
            refresh_token_days=settings.refresh_token_expire_days,
            remember_me_refresh_token_days=settings.remember_me_refresh_token_days,
            rate_limit_window_minutes=settings.rate_limit_window_minutes,
            collaborator_timeout_seconds=settings.collaborator_timeout_seconds,
            blocked_email_domains=settings.blocked_email_domain_list,
        )

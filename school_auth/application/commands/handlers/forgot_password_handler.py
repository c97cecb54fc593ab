"""Forgot password handler.

Always returns Success so the response never reveals whether an account
exists. A reset token is issued only when:
    - the email is well-formed and belongs to an active, unlocked user
    - the requesting address is not rate limited

The signed token (1 hour) is handed to the PasswordResetNotifier; delivery
failures are logged and swallowed for the same reason.
"""

from datetime import timedelta

from school_auth.application.commands.auth_commands import ForgotPassword
from school_auth.application.services.guarded_rate_limiter import GuardedRateLimiter
from school_auth.core.errors import DomainError
from school_auth.core.result import Result, Success
from school_auth.domain.policies.auth_policy import AuthPolicy
from school_auth.domain.protocols import (
    Clock,
    LoggerProtocol,
    LoginRateLimiter,
    PasswordResetNotifier,
    TokenIssuer,
    UserRepository,
)
from school_auth.domain.value_objects.email import EmailAddress


class ForgotPasswordHandler:
    """Handler for the ForgotPassword command."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_issuer: TokenIssuer,
        rate_limiter: LoginRateLimiter,
        notifier: PasswordResetNotifier,
        clock: Clock,
        logger: LoggerProtocol,
        policy: AuthPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._token_issuer = token_issuer
        self._notifier = notifier
        self._clock = clock
        self._logger = logger
        self._policy = policy or AuthPolicy()
        self._rate_limiter = GuardedRateLimiter(
            rate_limiter, logger, self._policy.collaborator_timeout_seconds
        )

    async def handle(self, cmd: ForgotPassword) -> Result[None, DomainError]:
        try:
            email = EmailAddress(cmd.email)
        except ValueError:
            self._logger.info("password_reset_skipped", reason="invalid_email")
            return Success(value=None)

        if cmd.source_address:
            window = timedelta(minutes=self._policy.rate_limit_window_minutes)
            if await self._rate_limiter.too_many_attempts(cmd.source_address, window):
                self._logger.warning(
                    "password_reset_rate_limited", source_address=cmd.source_address
                )
                return Success(value=None)
            await self._rate_limiter.record_attempt(cmd.source_address)

        try:
            user = await self._user_repo.find_by_email(str(email))
        except Exception as e:
            self._logger.error("password_reset_lookup_failed", error=e)
            return Success(value=None)

        now = self._clock.now()
        if user is None or not user.is_active or user.is_locked(now):
            self._logger.info("password_reset_skipped", reason="not_eligible")
            return Success(value=None)

        token = self._token_issuer.issue_password_reset_token(
            user_id=user.id, email=str(user.email), issued_at=now
        )
        try:
            await self._notifier.send_password_reset(
                user_id=user.id,
                email=str(user.email),
                full_name=user.full_name,
                token=token,
            )
        except Exception as e:
            self._logger.error(
                "password_reset_notification_failed", error=e, user_id=str(user.id)
            )
            return Success(value=None)

        self._logger.info("password_reset_requested", user_id=str(user.id))
        return Success(value=None)

"""Resend email confirmation handler.

Always returns Success. A fresh confirmation token is issued only for an
existing, active user whose email is not yet confirmed.
"""

from school_auth.application.commands.auth_commands import ResendEmailConfirmation
from school_auth.core.errors import DomainError
from school_auth.core.result import Result, Success
from school_auth.domain.protocols import (
    Clock,
    EmailConfirmationNotifier,
    LoggerProtocol,
    TokenIssuer,
    UserRepository,
)
from school_auth.domain.value_objects.email import EmailAddress


class ResendEmailConfirmationHandler:
    """Handler for the ResendEmailConfirmation command."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_issuer: TokenIssuer,
        notifier: EmailConfirmationNotifier,
        clock: Clock,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._token_issuer = token_issuer
        self._notifier = notifier
        self._clock = clock
        self._logger = logger

    async def handle(self, cmd: ResendEmailConfirmation) -> Result[None, DomainError]:
        try:
            email = EmailAddress(cmd.email)
        except ValueError:
            return Success(value=None)

        try:
            user = await self._user_repo.find_by_email(str(email))
        except Exception as e:
            self._logger.error("email_confirmation_lookup_failed", error=e)
            return Success(value=None)

        if user is None or not user.is_active or user.email_confirmed:
            self._logger.info("email_confirmation_skipped")
            return Success(value=None)

        token = self._token_issuer.issue_email_confirmation_token(
            user_id=user.id, email=str(user.email), issued_at=self._clock.now()
        )
        try:
            await self._notifier.send_email_confirmation(
                user_id=user.id,
                email=str(user.email),
                full_name=user.full_name,
                token=token,
            )
        except Exception as e:
            self._logger.error(
                "email_confirmation_notification_failed",
                error=e,
                user_id=str(user.id),
            )
            return Success(value=None)

        self._logger.info("email_confirmation_resent", user_id=str(user.id))
        return Success(value=None)

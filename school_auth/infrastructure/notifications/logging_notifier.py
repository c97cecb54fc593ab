"""Notifier that records hand-offs in the log instead of sending email.

Implements PasswordResetNotifier and EmailConfirmationNotifier for
deployments where delivery happens elsewhere (an outbox reader, a
development console). Token values are never logged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from school_auth.domain.protocols.logger_protocol import LoggerProtocol


class LoggingNotifier:
    """Logs that a token was handed off for delivery."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    async def send_password_reset(
        self, *, user_id: UUID, email: str, full_name: str, token: str
    ) -> None:
        self._logger.info(
            "password_reset_token_handed_off",
            user_id=str(user_id),
            token_length=len(token),
        )

    async def send_email_confirmation(
        self, *, user_id: UUID, email: str, full_name: str, token: str
    ) -> None:
        self._logger.info(
            "email_confirmation_token_handed_off",
            user_id=str(user_id),
            token_length=len(token),
        )

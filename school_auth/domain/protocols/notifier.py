"""Notification hand-off ports.

Email delivery is outside this package. These ports receive the one-time
tokens so an outer layer can deliver them.
"""

from typing import Protocol
from uuid import UUID


class PasswordResetNotifier(Protocol):
    """Receives password-reset tokens for delivery."""

    async def send_password_reset(
        self, *, user_id: UUID, email: str, full_name: str, token: str
    ) -> None:
        ...


class EmailConfirmationNotifier(Protocol):
    """Receives email-confirmation tokens for delivery."""

    async def send_email_confirmation(
        self, *, user_id: UUID, email: str, full_name: str, token: str
    ) -> None:
        ...

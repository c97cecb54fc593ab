"""TokenIssuer protocol for access, refresh and one-time tokens.

Tokens are opaque strings to the domain. Construction and verification live in
the infrastructure adapter (JWT).
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from school_auth.core.errors import AuthenticationError
from school_auth.core.result import Result


class TokenIssuer(Protocol):
    """Token issuing protocol (port).

    Purposes:
        - Access token: short-lived signed token carrying identity and role
        - Refresh token: opaque random string stored on the User
        - Password reset / email confirmation: signed one-time tokens bound to
          a user id, email and purpose
    """

    def issue_access_token(
        self,
        *,
        user_id: UUID,
        email: str,
        role: str,
        school_id: UUID | None,
        session_id: UUID | None,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str:
        """Create a signed access token."""
        ...

    def issue_refresh_token(self) -> str:
        """Create a new opaque refresh token (high entropy)."""
        ...

    def issue_password_reset_token(
        self, *, user_id: UUID, email: str, issued_at: datetime
    ) -> str:
        """Create a signed password-reset token."""
        ...

    def issue_email_confirmation_token(
        self, *, user_id: UUID, email: str, issued_at: datetime
    ) -> str:
        """Create a signed email-confirmation token."""
        ...

    def verify_password_reset_token(
        self, token: str, *, user_id: UUID, email: str, now: datetime
    ) -> Result[None, AuthenticationError]:
        """Check a reset token belongs to this user, email and purpose."""
        ...

    def verify_email_confirmation_token(
        self, token: str, *, user_id: UUID, email: str, now: datetime
    ) -> Result[None, AuthenticationError]:
        """Check a confirmation token belongs to this user, email and purpose."""
        ...

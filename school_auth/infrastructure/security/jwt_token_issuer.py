"""JWT token issuer (adapter).

Implements the TokenIssuer protocol with PyJWT (HMAC-SHA256).

Token kinds:
    - Access token: signed JWT (sub, email, role, school_id, session_id,
      iat, exp, jti), short-lived
    - Refresh token: opaque ``secrets.token_urlsafe(32)`` string, stored on
      the User and rotated on every use
    - Password reset / email confirmation: signed JWT with a ``token_type``
      claim bound to user id and email

Expiry is checked against the injected ``now`` rather than the wall clock so
token validation follows the same Clock as the rest of the workflow.
"""

import secrets
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError
from uuid_extensions import uuid7

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import AuthenticationError
from school_auth.core.result import Failure, Result, Success


PASSWORD_RESET = "password_reset"
EMAIL_CONFIRMATION = "email_confirmation"
ACCESS = "access"


class JWTTokenIssuer:
    """JWT token generation and validation.

    Usage:
        issuer = JWTTokenIssuer(secret_key=settings.secret_key)
        token = issuer.issue_access_token(
            user_id=user.id,
            email=str(user.email),
            role=user.role.value,
            school_id=user.school_id,
            session_id=session.id,
            issued_at=now,
            expires_at=now + timedelta(minutes=15),
        )
        result = issuer.decode_access_token(token, now=now)
    """

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        issuer: str = "school-auth",
        password_reset_minutes: int = 60,
        email_confirmation_days: int = 7,
    ) -> None:
        """Initialize JWT issuer.

        Args:
            secret_key: HMAC signing key, at least 32 characters.
            algorithm: JWT signing algorithm.
            issuer: Value of the ``iss`` claim.
            password_reset_minutes: Reset token lifetime.
            email_confirmation_days: Confirmation token lifetime.

        Raises:
            ValueError: If secret_key is shorter than 32 characters.
        """
        if len(secret_key) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._algorithm = algorithm
        self._issuer = issuer
        self._reset_lifetime = timedelta(minutes=password_reset_minutes)
        self._confirmation_lifetime = timedelta(days=email_confirmation_days)

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
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "token_type": ACCESS,
            "iss": self._issuer,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": str(uuid7()),
        }
        if school_id is not None:
            payload["school_id"] = str(school_id)
        if session_id is not None:
            payload["session_id"] = str(session_id)
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_access_token(
        self, token: str, *, now: datetime
    ) -> Result[dict[str, Any], AuthenticationError]:
        """Validate an access token and return its claims."""
        return self._decode(token, expected_type=ACCESS, now=now)

    def issue_refresh_token(self) -> str:
        """Create a 32-byte urlsafe random refresh token."""
        return secrets.token_urlsafe(32)

    def issue_password_reset_token(
        self, *, user_id: UUID, email: str, issued_at: datetime
    ) -> str:
        return self._issue_purpose_token(
            user_id=user_id,
            email=email,
            token_type=PASSWORD_RESET,
            issued_at=issued_at,
            lifetime=self._reset_lifetime,
        )

    def issue_email_confirmation_token(
        self, *, user_id: UUID, email: str, issued_at: datetime
    ) -> str:
        return self._issue_purpose_token(
            user_id=user_id,
            email=email,
            token_type=EMAIL_CONFIRMATION,
            issued_at=issued_at,
            lifetime=self._confirmation_lifetime,
        )

    def verify_password_reset_token(
        self, token: str, *, user_id: UUID, email: str, now: datetime
    ) -> Result[None, AuthenticationError]:
        return self._verify_purpose_token(
            token, user_id=user_id, email=email, token_type=PASSWORD_RESET, now=now
        )

    def verify_email_confirmation_token(
        self, token: str, *, user_id: UUID, email: str, now: datetime
    ) -> Result[None, AuthenticationError]:
        return self._verify_purpose_token(
            token,
            user_id=user_id,
            email=email,
            token_type=EMAIL_CONFIRMATION,
            now=now,
        )

    def _issue_purpose_token(
        self,
        *,
        user_id: UUID,
        email: str,
        token_type: str,
        issued_at: datetime,
        lifetime: timedelta,
    ) -> str:
        payload = {
            "sub": str(user_id),
            "email": email.lower(),
            "token_type": token_type,
            "iss": self._issuer,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + lifetime).timestamp()),
            "jti": str(uuid7()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def _verify_purpose_token(
        self,
        token: str,
        *,
        user_id: UUID,
        email: str,
        token_type: str,
        now: datetime,
    ) -> Result[None, AuthenticationError]:
        match self._decode(token, expected_type=token_type, now=now):
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=claims):
                if claims.get("sub") != str(user_id) or claims.get(
                    "email"
                ) != email.lower():
                    return Failure(error=_invalid("Token does not belong to this user"))
                return Success(value=None)

    def _decode(
        self, token: str, *, expected_type: str, now: datetime
    ) -> Result[dict[str, Any], AuthenticationError]:
        if not token:
            return Failure(error=_invalid("Token is missing"))
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["exp", "sub"],
                },
            )
        except InvalidTokenError:
            return Failure(error=_invalid("Token is invalid"))

        if claims.get("token_type") != expected_type:
            return Failure(error=_invalid("Token has the wrong purpose"))
        if int(claims["exp"]) <= int(now.timestamp()):
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.TOKEN_EXPIRED,
                    message="Token has expired",
                )
            )
        return Success(value=claims)


def _invalid(message: str) -> AuthenticationError:
    return AuthenticationError(code=ErrorCode.TOKEN_INVALID, message=message)

"""Refresh tokens handler.

Flow:
1. Find user by refresh token (no match -> TOKEN_INVALID)
2. Token expired -> clear stored token, save -> TOKEN_EXPIRED
3. User inactive -> clear stored token, save -> ACCOUNT_INACTIVE
4. User locked -> ACCOUNT_LOCKED, token kept but not rotated
5. Rotate: new refresh token (the old one stops working immediately),
   touch the calling device's session (matched by address and user agent),
   issue a new access token naming that session
6. Save and publish events

Rotation keeps the original horizon: a remember-me token is never shortened
by rotating it, and a short token is never extended past its policy.
"""

from datetime import timedelta

from school_auth.application.commands.auth_commands import RefreshTokens
from school_auth.application.dtos.auth_dtos import AuthTokens
from school_auth.application.errors import account_locked, invalid_token
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import AuthenticationError, DomainError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.policies.auth_policy import AuthPolicy
from school_auth.domain.protocols import (
    Clock,
    EventBusProtocol,
    LoggerProtocol,
    TokenIssuer,
    UserRepository,
)


class RefreshTokensHandler:
    """Handler for the RefreshTokens command."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_issuer: TokenIssuer,
        clock: Clock,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        policy: AuthPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._token_issuer = token_issuer
        self._clock = clock
        self._logger = logger
        self._policy = policy or AuthPolicy()
        self._unit_of_work = UserUnitOfWork(user_repo, event_bus, logger)

    async def handle(self, cmd: RefreshTokens) -> Result[AuthTokens, DomainError]:
        if not cmd.refresh_token or not cmd.refresh_token.strip():
            return Failure(error=invalid_token())

        async def mutate(user: User | None) -> Mutation[AuthTokens]:
            if user is None:
                self._logger.warning("refresh_token_unknown")
                return Mutation(result=Failure(error=invalid_token()), persist=False)

            now = self._clock.now()
            if not user.refresh_token_is_valid(cmd.refresh_token, now):
                user.clear_refresh_token()
                self._logger.warning("refresh_token_expired", user_id=str(user.id))
                return Mutation(
                    result=Failure(
                        error=AuthenticationError(
                            code=ErrorCode.TOKEN_EXPIRED,
                            message="Refresh token has expired",
                        )
                    )
                )

            if not user.is_active:
                user.clear_refresh_token()
                self._logger.warning("refresh_user_inactive", user_id=str(user.id))
                return Mutation(
                    result=Failure(
                        error=AuthenticationError(
                            code=ErrorCode.ACCOUNT_INACTIVE,
                            message="Account is inactive",
                        )
                    )
                )

            if user.is_locked(now):
                self._logger.warning("refresh_user_locked", user_id=str(user.id))
                return Mutation(
                    result=Failure(error=account_locked(user.lock_remaining(now))),
                    persist=False,
                )

            policy_expiry = now + timedelta(days=self._policy.refresh_token_days)
            current_expiry = user.refresh_token_expires_at or policy_expiry
            refresh_expires_at = max(policy_expiry, current_expiry)
            refresh_token = self._token_issuer.issue_refresh_token()
            issued = user.issue_refresh_token(refresh_token, refresh_expires_at, now)
            if isinstance(issued, Failure):
                return Mutation(result=Failure(error=issued.error), persist=False)

            session = user.find_device_session(cmd.source_address, cmd.user_agent)
            if session is not None:
                user.touch_session(session.id, now)

            access_lifetime = timedelta(minutes=self._policy.access_token_minutes)
            access_token = self._token_issuer.issue_access_token(
                user_id=user.id,
                email=str(user.email),
                role=user.role.value,
                school_id=user.school_id,
                session_id=session.id if session is not None else None,
                issued_at=now,
                expires_at=now + access_lifetime,
            )
            self._logger.info("refresh_token_rotated", user_id=str(user.id))
            return Mutation(
                result=Success(
                    value=AuthTokens(
                        access_token=access_token,
                        refresh_token=refresh_token,
                        refresh_expires_at=refresh_expires_at,
                        expires_in=int(access_lifetime.total_seconds()),
                    )
                )
            )

        return await self._unit_of_work.run(
            lambda: self._user_repo.find_by_refresh_token(cmd.refresh_token),
            mutate,
            operation="refresh_tokens",
        )

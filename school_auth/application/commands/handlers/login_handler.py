"""Login handler.

One login attempt is a small state machine:
    EVALUATING -> LOCKED | RATE_LIMITED | INVALID_CREDENTIAL | SUCCESS

Flow:
1. Reject a missing source address or user agent (caller error)
2. Find user by email. Malformed email, unknown email or inactive account
   -> INVALID_CREDENTIAL with the generic message (no enumeration). Unknown
   email also counts against the source address.
3. Account locked -> LOCKED (failure counter untouched)
4. Source address over the rate threshold -> RATE_LIMITED
5. Wrong password -> record_failed_login (may lock), save,
   count against the address -> INVALID_CREDENTIAL
6. Correct password -> record_successful_login, open session, issue access
   token and rotated refresh token, save, publish events -> SUCCESS

Architecture:
- Application layer ONLY imports from domain and core
- Collaborators (repository, hasher, issuer, limiter, clock) are injected
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from school_auth.application.commands.auth_commands import Login
from school_auth.application.dtos.auth_dtos import (
    AuthTokens,
    LoginAttemptState,
    LoginResult,
    UserInfo,
)
from school_auth.application.errors import (
    account_locked,
    invalid_credentials,
    rate_limited,
)
from school_auth.application.services.guarded_rate_limiter import GuardedRateLimiter
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import DomainError, ValidationError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.policies.auth_policy import AuthPolicy
from school_auth.domain.protocols import (
    Clock,
    CredentialHasher,
    EventBusProtocol,
    LoggerProtocol,
    LoginRateLimiter,
    TokenIssuer,
    UserRepository,
)
from school_auth.domain.value_objects.email import EmailAddress


@dataclass
class _Attempt:
    """Mutable record of where one attempt ended up."""

    now: datetime
    state: LoginAttemptState = LoginAttemptState.EVALUATING
    count_against_address: bool = False


class LoginHandler:
    """Handler for the Login command.

    Args:
        user_repo: User persistence port.
        password_hasher: Verifies the submitted password.
        token_issuer: Issues access and refresh tokens.
        rate_limiter: Per-address attempt counter.
        clock: Source of "now".
        event_bus: Receives the aggregate's events after save.
        logger: Structured logger.
        policy: Lockout, token lifetime and rate-limit thresholds.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        password_hasher: CredentialHasher,
        token_issuer: TokenIssuer,
        rate_limiter: LoginRateLimiter,
        clock: Clock,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        policy: AuthPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._password_hasher = password_hasher
        self._token_issuer = token_issuer
        self._clock = clock
        self._logger = logger
        self._policy = policy or AuthPolicy()
        self._rate_limiter = GuardedRateLimiter(
            rate_limiter, logger, self._policy.collaborator_timeout_seconds
        )
        self._unit_of_work = UserUnitOfWork(user_repo, event_bus, logger)

    async def handle(self, cmd: Login) -> Result[LoginResult, DomainError]:
        """Run one login attempt.

        Returns:
            Success(LoginResult) with tokens, user projection and flags.
            Failure(AuthenticationError) for any credential problem (generic).
            Failure(PolicyViolation) when locked or rate limited.
            Failure(ValidationError) when address or user agent is missing.
            Failure(TransientInfrastructureError) when a collaborator failed.
        """
        for field_name, value in (
            ("source_address", cmd.source_address),
            ("user_agent", cmd.user_agent),
        ):
            if not value or not value.strip():
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.VALIDATION_FAILED,
                        message=f"{field_name} is required",
                        field=field_name,
                    )
                )

        attempt = _Attempt(now=self._clock.now())

        try:
            email = EmailAddress(cmd.email)
        except ValueError:
            await self._rate_limiter.record_attempt(cmd.source_address)
            self._logger.warning(
                "login_invalid_credential",
                source_address=cmd.source_address,
                code=ErrorCode.INVALID_CREDENTIALS.value,
            )
            return Failure(error=invalid_credentials())

        async def mutate(user: User | None) -> Mutation[LoginResult]:
            attempt.now = self._clock.now()
            return await self._evaluate(user, cmd, attempt)

        result = await self._unit_of_work.run(
            lambda: self._user_repo.find_by_email(str(email)),
            mutate,
            operation="login",
        )

        if attempt.count_against_address:
            await self._rate_limiter.record_attempt(cmd.source_address)

        self._log_outcome(attempt, cmd, result)
        return result

    async def _evaluate(
        self, user: User | None, cmd: Login, attempt: _Attempt
    ) -> Mutation[LoginResult]:
        now = attempt.now
        attempt.count_against_address = False

        if user is None or not user.is_active:
            attempt.state = LoginAttemptState.INVALID_CREDENTIAL
            attempt.count_against_address = user is None
            return Mutation(result=Failure(error=invalid_credentials()), persist=False)

        if user.is_locked(now):
            attempt.state = LoginAttemptState.LOCKED
            return Mutation(
                result=Failure(error=account_locked(user.lock_remaining(now))),
                persist=False,
            )

        window = timedelta(minutes=self._policy.rate_limit_window_minutes)
        if await self._rate_limiter.too_many_attempts(cmd.source_address, window):
            attempt.state = LoginAttemptState.RATE_LIMITED
            return Mutation(result=Failure(error=rate_limited(window)), persist=False)

        if not user.verify_credential(cmd.password, self._password_hasher):
            attempt.state = LoginAttemptState.INVALID_CREDENTIAL
            attempt.count_against_address = True
            user.record_failed_login(
                now,
                threshold=self._policy.lockout_threshold,
                lock_minutes=self._policy.lockout_minutes,
            )
            return Mutation(result=Failure(error=invalid_credentials()))

        user.record_successful_login(now)
        session = user.open_session(cmd.source_address, cmd.user_agent, now)
        if cmd.location:
            session.set_location(cmd.location)

        refresh_days = (
            self._policy.remember_me_refresh_token_days
            if cmd.remember_me
            else self._policy.refresh_token_days
        )
        refresh_token = self._token_issuer.issue_refresh_token()
        refresh_expires_at = now + timedelta(days=refresh_days)
        issued = user.issue_refresh_token(refresh_token, refresh_expires_at, now)
        if isinstance(issued, Failure):
            return Mutation(result=Failure(error=issued.error), persist=False)

        access_lifetime = timedelta(minutes=self._policy.access_token_minutes)
        access_token = self._token_issuer.issue_access_token(
            user_id=user.id,
            email=str(user.email),
            role=user.role.value,
            school_id=user.school_id,
            session_id=session.id,
            issued_at=now,
            expires_at=now + access_lifetime,
        )

        attempt.state = LoginAttemptState.SUCCESS
        login_result = LoginResult(
            tokens=AuthTokens(
                access_token=access_token,
                refresh_token=refresh_token,
                refresh_expires_at=refresh_expires_at,
                expires_in=int(access_lifetime.total_seconds()),
            ),
            user=UserInfo.from_user(user),
            session_id=session.id,
            requires_password_change=user.password_expired(
                now, self._policy.password_expiry_days
            ),
            requires_email_confirmation=not user.email_confirmed,
            suspicious_address=await self._rate_limiter.is_suspicious_address(
                cmd.source_address
            ),
        )
        return Mutation(result=Success(value=login_result))

    def _log_outcome(
        self,
        attempt: _Attempt,
        cmd: Login,
        result: Result[LoginResult, DomainError],
    ) -> None:
        match result:
            case Success(value=login_result):
                self._logger.info(
                    "login_succeeded",
                    user_id=str(login_result.user.user_id),
                    session_id=str(login_result.session_id),
                    source_address=cmd.source_address,
                    suspicious_address=login_result.suspicious_address,
                )
            case Failure(error=error):
                event = {
                    LoginAttemptState.LOCKED: "login_locked",
                    LoginAttemptState.RATE_LIMITED: "login_rate_limited",
                    LoginAttemptState.INVALID_CREDENTIAL: "login_invalid_credential",
                }.get(attempt.state, "login_failed")
                self._logger.warning(
                    event,
                    source_address=cmd.source_address,
                    code=error.code.value,
                )

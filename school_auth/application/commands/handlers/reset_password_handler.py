"""Reset password handler.

Flow:
1. new_password must equal confirm_password
2. New password must pass the hard rules and the breach lookup
3. Load user by email (malformed or unknown -> TOKEN_INVALID)
4. Token must be a password-reset token for this user and email; a bad
   token counts as a failed login
5. New password equal to the current one -> PASSWORD_REUSED
6. change_credential (ends sessions), reactivate and unlock
7. Save and publish events
"""

from school_auth.application.commands.auth_commands import ResetPassword
from school_auth.application.errors import (
    invalid_token,
    password_mismatch,
    password_reused,
)
from school_auth.application.services.new_password import check_new_password
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)
from school_auth.core.errors import DomainError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.policies.auth_policy import AuthPolicy
from school_auth.domain.policies.credential_policy import CredentialPolicy
from school_auth.domain.protocols import (
    Clock,
    CredentialHasher,
    EventBusProtocol,
    LoggerProtocol,
    TokenIssuer,
    UserRepository,
)
from school_auth.domain.value_objects.credential import Credential
from school_auth.domain.value_objects.email import EmailAddress


class ResetPasswordHandler:
    """Handler for the ResetPassword command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_hasher: CredentialHasher,
        token_issuer: TokenIssuer,
        credential_policy: CredentialPolicy,
        clock: Clock,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        policy: AuthPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._password_hasher = password_hasher
        self._token_issuer = token_issuer
        self._credential_policy = credential_policy
        self._clock = clock
        self._logger = logger
        self._policy = policy or AuthPolicy()
        self._unit_of_work = UserUnitOfWork(user_repo, event_bus, logger)

    async def handle(self, cmd: ResetPassword) -> Result[None, DomainError]:
        if cmd.new_password != cmd.confirm_password:
            return Failure(error=password_mismatch())

        accepted = await check_new_password(self._credential_policy, cmd.new_password)
        if isinstance(accepted, Failure):
            return accepted

        try:
            email = EmailAddress(cmd.email)
        except ValueError:
            return Failure(error=invalid_token())

        async def mutate(user: User | None) -> Mutation[None]:
            if user is None:
                return Mutation(result=Failure(error=invalid_token()), persist=False)

            now = self._clock.now()
            verified = self._token_issuer.verify_password_reset_token(
                cmd.token, user_id=user.id, email=str(user.email), now=now
            )
            if isinstance(verified, Failure):
                user.record_failed_login(
                    now,
                    threshold=self._policy.lockout_threshold,
                    lock_minutes=self._policy.lockout_minutes,
                )
                self._logger.warning(
                    "password_reset_token_rejected",
                    user_id=str(user.id),
                    code=verified.error.code.value,
                )
                return Mutation(result=Failure(error=verified.error))

            if user.verify_credential(cmd.new_password, self._password_hasher):
                return Mutation(result=Failure(error=password_reused()), persist=False)

            user.change_credential(
                Credential(
                    password_hash=self._password_hasher.hash(cmd.new_password),
                    changed_at=now,
                ),
                now,
            )
            user.activate(now)
            if user.failed_login_count or user.locked_until is not None:
                user.unlock(now)
            self._logger.info("password_reset_completed", user_id=str(user.id))
            return Mutation(result=Success(value=None))

        return await self._unit_of_work.run(
            lambda: self._user_repo.find_by_email(str(email)),
            mutate,
            operation="reset_password",
        )

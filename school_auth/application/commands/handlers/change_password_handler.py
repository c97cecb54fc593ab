"""Change password handler.

Flow:
1. new_password must equal confirm_password
2. New password must pass the hard rules and the breach lookup
3. Load user (missing -> USER_NOT_FOUND, inactive -> ACCOUNT_INACTIVE,
   locked -> ACCOUNT_LOCKED)
4. Wrong current password counts as a failed login (may lock) -> generic
   INVALID_CREDENTIALS
5. New password equal to the current one -> PASSWORD_REUSED
6. change_credential: ends every session and clears the refresh token
7. Save and publish events
"""

from school_auth.application.commands.auth_commands import ChangePassword
from school_auth.application.errors import (
    account_locked,
    invalid_credentials,
    password_mismatch,
    password_reused,
    user_not_found,
)
from school_auth.application.services.new_password import check_new_password
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import AuthenticationError, DomainError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.policies.auth_policy import AuthPolicy
from school_auth.domain.policies.credential_policy import CredentialPolicy
from school_auth.domain.protocols import (
    Clock,
    CredentialHasher,
    EventBusProtocol,
    LoggerProtocol,
    UserRepository,
)
from school_auth.domain.value_objects.credential import Credential


class ChangePasswordHandler:
    """Handler for the ChangePassword command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_hasher: CredentialHasher,
        credential_policy: CredentialPolicy,
        clock: Clock,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        policy: AuthPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._password_hasher = password_hasher
        self._credential_policy = credential_policy
        self._clock = clock
        self._logger = logger
        self._policy = policy or AuthPolicy()
        self._unit_of_work = UserUnitOfWork(user_repo, event_bus, logger)

    async def handle(self, cmd: ChangePassword) -> Result[None, DomainError]:
        if cmd.new_password != cmd.confirm_password:
            return Failure(error=password_mismatch())

        accepted = await check_new_password(self._credential_policy, cmd.new_password)
        if isinstance(accepted, Failure):
            return accepted

        async def mutate(user: User | None) -> Mutation[None]:
            return self._apply(user, cmd)

        result = await self._unit_of_work.run(
            lambda: self._user_repo.find_by_id(cmd.user_id),
            mutate,
            operation="change_password",
        )
        if isinstance(result, Success):
            self._logger.info("password_changed", user_id=str(cmd.user_id))
        else:
            self._logger.warning(
                "password_change_rejected",
                user_id=str(cmd.user_id),
                code=result.error.code.value,
            )
        return result

    def _apply(self, user: User | None, cmd: ChangePassword) -> Mutation[None]:
        if user is None:
            return Mutation(
                result=Failure(error=user_not_found(cmd.user_id)), persist=False
            )

        now = self._clock.now()
        if not user.is_active:
            return Mutation(
                result=Failure(
                    error=AuthenticationError(
                        code=ErrorCode.ACCOUNT_INACTIVE, message="Account is inactive"
                    )
                ),
                persist=False,
            )
        if user.is_locked(now):
            return Mutation(
                result=Failure(error=account_locked(user.lock_remaining(now))),
                persist=False,
            )

        if not user.verify_credential(cmd.current_password, self._password_hasher):
            user.record_failed_login(
                now,
                threshold=self._policy.lockout_threshold,
                lock_minutes=self._policy.lockout_minutes,
            )
            return Mutation(result=Failure(error=invalid_credentials()))

        if user.verify_credential(cmd.new_password, self._password_hasher):
            return Mutation(result=Failure(error=password_reused()), persist=False)

        user.change_credential(
            Credential(
                password_hash=self._password_hasher.hash(cmd.new_password),
                changed_at=now,
            ),
            now,
        )
        return Mutation(result=Success(value=None))

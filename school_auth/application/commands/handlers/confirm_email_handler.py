"""Confirm email handler.

Flow:
1. Load user by email (malformed or unknown -> TOKEN_INVALID)
2. Already confirmed -> Success (idempotent, token not checked)
3. Token must be an email-confirmation token for this user and email; a bad
   token counts as a failed login
4. confirm_email and activate
5. Save and publish events
"""

from school_auth.application.commands.auth_commands import ConfirmEmail
from school_auth.application.errors import invalid_token
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)
from school_auth.core.errors import DomainError
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
from school_auth.domain.value_objects.email import EmailAddress


class ConfirmEmailHandler:
    """Handler for the ConfirmEmail command."""

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

    async def handle(self, cmd: ConfirmEmail) -> Result[None, DomainError]:
        try:
            email = EmailAddress(cmd.email)
        except ValueError:
            return Failure(error=invalid_token())

        async def mutate(user: User | None) -> Mutation[None]:
            if user is None:
                return Mutation(result=Failure(error=invalid_token()), persist=False)
            if user.email_confirmed:
                return Mutation(result=Success(value=None), persist=False)

            now = self._clock.now()
            verified = self._token_issuer.verify_email_confirmation_token(
                cmd.token, user_id=user.id, email=str(user.email), now=now
            )
            if isinstance(verified, Failure):
                user.record_failed_login(
                    now,
                    threshold=self._policy.lockout_threshold,
                    lock_minutes=self._policy.lockout_minutes,
                )
                self._logger.warning(
                    "email_confirmation_rejected",
                    user_id=str(user.id),
                    code=verified.error.code.value,
                )
                return Mutation(result=Failure(error=verified.error))

            user.confirm_email(now)
            user.activate(now)
            self._logger.info("email_confirmed", user_id=str(user.id))
            return Mutation(result=Success(value=None))

        return await self._unit_of_work.run(
            lambda: self._user_repo.find_by_email(str(email)),
            mutate,
            operation="confirm_email",
        )

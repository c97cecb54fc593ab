"""Register user handler.

Flow:
1. Validate names, email format and role code
2. Refuse disposable email domains
3. Password must pass the hard rules and the breach lookup
4. Email must not be registered yet
5. Hash password, User.register, save, publish UserRegistered
6. Issue an email confirmation token and hand it to the notifier
7. Return the UserInfo projection

A notifier failure does not undo the registration; the user can ask for a
new confirmation token.
"""

from uuid import UUID

from school_auth.application.commands.auth_commands import RegisterUser
from school_auth.application.dtos.auth_dtos import UserInfo
from school_auth.application.services.new_password import check_new_password
from school_auth.application.services.user_unit_of_work import UserUnitOfWork
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import (
    ConflictError,
    DomainError,
    PolicyViolation,
    TransientInfrastructureError,
    ValidationError,
)
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.enums.user_role import UserRole
from school_auth.domain.policies.auth_policy import AuthPolicy
from school_auth.domain.policies.credential_policy import CredentialPolicy
from school_auth.domain.protocols import (
    Clock,
    CredentialHasher,
    EmailConfirmationNotifier,
    EventBusProtocol,
    LoggerProtocol,
    TokenIssuer,
    UserRepository,
)
from school_auth.domain.value_objects.credential import Credential
from school_auth.domain.value_objects.email import EmailAddress


class RegisterUserHandler:
    """Handler for the RegisterUser command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_hasher: CredentialHasher,
        credential_policy: CredentialPolicy,
        token_issuer: TokenIssuer,
        notifier: EmailConfirmationNotifier,
        clock: Clock,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        policy: AuthPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._password_hasher = password_hasher
        self._credential_policy = credential_policy
        self._token_issuer = token_issuer
        self._notifier = notifier
        self._clock = clock
        self._logger = logger
        self._policy = policy or AuthPolicy()
        self._unit_of_work = UserUnitOfWork(user_repo, event_bus, logger)

    async def handle(self, cmd: RegisterUser) -> Result[UserInfo, DomainError]:
        for field_name, value in (
            ("first_name", cmd.first_name),
            ("last_name", cmd.last_name),
        ):
            if not value or not value.strip():
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.INVALID_NAME,
                        message="Name cannot be empty",
                        field=field_name,
                    )
                )

        try:
            email = EmailAddress(cmd.email)
        except ValueError:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_EMAIL,
                    message="Invalid email format",
                    field="email",
                )
            )

        try:
            role = UserRole.from_code(cmd.role_code)
        except ValueError:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_ROLE,
                    message=f"Unknown role: {cmd.role_code}",
                    field="role_code",
                )
            )

        if email.domain in self._policy.blocked_email_domains:
            return Failure(
                error=PolicyViolation(
                    code=ErrorCode.EMAIL_DOMAIN_BLOCKED,
                    message="Disposable email addresses are not accepted",
                )
            )

        accepted = await check_new_password(self._credential_policy, cmd.password)
        if isinstance(accepted, Failure):
            return accepted

        try:
            exists = await self._user_repo.exists_by_email(str(email))
            password_hash = self._password_hasher.hash(cmd.password)
        except Exception as e:
            self._logger.error("registration_failed", error=e)
            return Failure(
                error=TransientInfrastructureError(
                    code=ErrorCode.SERVICE_UNAVAILABLE,
                    message="Authentication service temporarily unavailable",
                    component="user_repository",
                )
            )
        if exists:
            return Failure(error=_email_taken())

        now = self._clock.now()
        user = User.register(
            first_name=cmd.first_name,
            last_name=cmd.last_name,
            email=email,
            credential=Credential(password_hash=password_hash, changed_at=now),
            role=role,
            school_id=cmd.school_id,
            now=now,
        )

        saved = await self._unit_of_work.save_new(user, operation="register_user")
        if isinstance(saved, Failure):
            self._logger.warning(
                "registration_rejected", code=saved.error.code.value
            )
            return saved

        await self._send_confirmation(user.id, str(user.email), user.full_name)
        self._logger.info("user_registered", user_id=str(user.id), role=role.value)
        return Success(value=UserInfo.from_user(user))

    async def _send_confirmation(
        self, user_id: UUID, email: str, full_name: str
    ) -> None:
        token = self._token_issuer.issue_email_confirmation_token(
            user_id=user_id, email=email, issued_at=self._clock.now()
        )
        try:
            await self._notifier.send_email_confirmation(
                user_id=user_id, email=email, full_name=full_name, token=token
            )
        except Exception as e:
            self._logger.error(
                "email_confirmation_notification_failed",
                error=e,
                user_id=str(user_id),
            )


def _email_taken() -> ConflictError:
    return ConflictError(
        code=ErrorCode.EMAIL_ALREADY_EXISTS,
        message="Email address is already registered",
        resource_type="User",
        conflicting_field="email",
    )

"""Composition root: builds adapters and wires handlers.

Application-scoped singletons are cached with ``lru_cache``; tests call
``cache_clear()`` or pass their own collaborators to ``build_auth_handlers``.
Infrastructure imports stay inside the factories so the domain and
application layers never import adapters.

Usage:
    async with get_database().get_session() as session:
        handlers = build_auth_handlers(SQLAlchemyUserRepository(session))
        result = await handlers.login.handle(Login(...))
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from school_auth.core.config import get_settings

if TYPE_CHECKING:
    from school_auth.application.commands.handlers import (
        ChangePasswordHandler,
        ChangeUserRoleHandler,
        ConfirmEmailHandler,
        ForgotPasswordHandler,
        LoginHandler,
        LogoutHandler,
        RefreshTokensHandler,
        RegisterUserHandler,
        ResendEmailConfirmationHandler,
        ResetPasswordHandler,
        SetUserActiveHandler,
        UnlockUserHandler,
    )
    from school_auth.application.queries.handlers import (
        CheckEmailAvailableHandler,
        GetCurrentUserHandler,
        ListSessionsHandler,
        ValidatePasswordStrengthHandler,
    )
    from school_auth.domain.policies.auth_policy import AuthPolicy
    from school_auth.domain.policies.credential_policy import CredentialPolicy
    from school_auth.domain.protocols import (
        BreachListChecker,
        Clock,
        CredentialHasher,
        EventBusProtocol,
        LoggerProtocol,
        LoginRateLimiter,
        UserRepository,
    )
    from school_auth.infrastructure.notifications.logging_notifier import (
        LoggingNotifier,
    )
    from school_auth.infrastructure.persistence.database import Database
    from school_auth.infrastructure.security.jwt_token_issuer import JWTTokenIssuer


__all__ = [
    "AuthHandlers",
    "build_auth_handlers",
    "get_auth_policy",
    "get_breach_checker",
    "get_clock",
    "get_credential_hasher",
    "get_credential_policy",
    "get_database",
    "get_event_bus",
    "get_logger",
    "get_notifier",
    "get_rate_limiter",
    "get_settings",
    "get_token_issuer",
]


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Structured logger: JSON outside development, console renderer in it."""
    from school_auth.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=not settings.is_development, level=settings.log_level
    )


@lru_cache()
def get_clock() -> "Clock":
    from school_auth.infrastructure.clock.system_clock import SystemClock

    return SystemClock()


@lru_cache()
def get_credential_hasher() -> "CredentialHasher":
    from school_auth.infrastructure.security.bcrypt_credential_hasher import (
        BcryptCredentialHasher,
    )

    return BcryptCredentialHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache()
def get_token_issuer() -> "JWTTokenIssuer":
    from school_auth.infrastructure.security.jwt_token_issuer import JWTTokenIssuer

    settings = get_settings()
    return JWTTokenIssuer(
        settings.secret_key,
        algorithm=settings.algorithm,
        issuer=settings.token_issuer,
        password_reset_minutes=settings.password_reset_token_minutes,
        email_confirmation_days=settings.email_confirmation_token_days,
    )


@lru_cache()
def get_rate_limiter() -> "LoginRateLimiter":
    """In-process sliding-window limiter shared by every handler."""
    from school_auth.infrastructure.rate_limit.in_memory_login_rate_limiter import (
        InMemoryLoginRateLimiter,
    )

    settings = get_settings()
    return InMemoryLoginRateLimiter(
        clock=get_clock(),
        logger=get_logger(),
        max_attempts=settings.rate_limit_max_attempts,
        suspicious_threshold=settings.suspicious_address_threshold,
    )


@lru_cache()
def get_breach_checker() -> "BreachListChecker":
    """Pwned Passwords when an API URL is configured, the bundled list otherwise."""
    from school_auth.infrastructure.breach.pwned_passwords_checker import (
        PwnedPasswordsChecker,
    )
    from school_auth.infrastructure.breach.static_breach_list_checker import (
        StaticBreachListChecker,
    )

    settings = get_settings()
    if settings.breach_api_url:
        return PwnedPasswordsChecker(
            logger=get_logger(),
            base_url=settings.breach_api_url,
            timeout=settings.collaborator_timeout_seconds,
        )
    return StaticBreachListChecker()


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    from school_auth.infrastructure.events.in_memory_event_bus import InMemoryEventBus

    return InMemoryEventBus(logger=get_logger())


@lru_cache()
def get_notifier() -> "LoggingNotifier":
    from school_auth.infrastructure.notifications.logging_notifier import (
        LoggingNotifier,
    )

    return LoggingNotifier(get_logger())


@lru_cache()
def get_auth_policy() -> "AuthPolicy":
    from school_auth.domain.policies.auth_policy import AuthPolicy

    return AuthPolicy.from_settings(get_settings())


@lru_cache()
def get_credential_policy() -> "CredentialPolicy":
    from school_auth.domain.policies.credential_policy import CredentialPolicy

    return CredentialPolicy(
        breach_checker=get_breach_checker(),
        logger=get_logger(),
        timeout_seconds=get_settings().collaborator_timeout_seconds,
    )


@lru_cache()
def get_database() -> "Database":
    """Database singleton.

    Raises:
        RuntimeError: If AUTH_DATABASE_URL is not configured.
    """
    from school_auth.infrastructure.persistence.database import Database

    settings = get_settings()
    if not settings.database_url:
        raise RuntimeError("AUTH_DATABASE_URL is not configured")
    return Database(settings.database_url, echo=settings.db_echo)


# ============================================================================
# Request-Scoped Handlers
# ============================================================================


@dataclass(frozen=True, kw_only=True)
class AuthHandlers:
    """Every command and query handler, wired to one repository."""

    login: "LoginHandler"
    logout: "LogoutHandler"
    refresh_tokens: "RefreshTokensHandler"
    register_user: "RegisterUserHandler"
    change_password: "ChangePasswordHandler"
    forgot_password: "ForgotPasswordHandler"
    reset_password: "ResetPasswordHandler"
    confirm_email: "ConfirmEmailHandler"
    resend_email_confirmation: "ResendEmailConfirmationHandler"
    change_user_role: "ChangeUserRoleHandler"
    set_user_active: "SetUserActiveHandler"
    unlock_user: "UnlockUserHandler"
    get_current_user: "GetCurrentUserHandler"
    check_email_available: "CheckEmailAvailableHandler"
    validate_password_strength: "ValidatePasswordStrengthHandler"
    list_sessions: "ListSessionsHandler"


def build_auth_handlers(
    repository: "UserRepository",
    *,
    clock: "Clock | None" = None,
    rate_limiter: "LoginRateLimiter | None" = None,
    event_bus: "EventBusProtocol | None" = None,
) -> AuthHandlers:
    """Wire all handlers around ``repository``.

    Args:
        repository: Request-scoped UserRepository.
        clock: Overrides the system clock.
        rate_limiter: Overrides the shared in-memory limiter.
        event_bus: Overrides the shared event bus.
    """
    from school_auth.application.commands.handlers import (
        ChangePasswordHandler,
        ChangeUserRoleHandler,
        ConfirmEmailHandler,
        ForgotPasswordHandler,
        LoginHandler,
        LogoutHandler,
        RefreshTokensHandler,
        RegisterUserHandler,
        ResendEmailConfirmationHandler,
        ResetPasswordHandler,
        SetUserActiveHandler,
        UnlockUserHandler,
    )
    from school_auth.application.queries.handlers import (
        CheckEmailAvailableHandler,
        GetCurrentUserHandler,
        ListSessionsHandler,
        ValidatePasswordStrengthHandler,
    )

    clock = clock or get_clock()
    rate_limiter = rate_limiter or get_rate_limiter()
    event_bus = event_bus or get_event_bus()
    logger = get_logger()
    hasher = get_credential_hasher()
    token_issuer = get_token_issuer()
    notifier = get_notifier()
    policy = get_auth_policy()
    credential_policy = get_credential_policy()

    return AuthHandlers(
        login=LoginHandler(
            repository,
            hasher,
            token_issuer,
            rate_limiter,
            clock,
            event_bus,
            logger,
            policy,
        ),
        logout=LogoutHandler(repository, clock, event_bus, logger),
        refresh_tokens=RefreshTokensHandler(
            repository, token_issuer, clock, event_bus, logger, policy
        ),
        register_user=RegisterUserHandler(
            repository,
            hasher,
            credential_policy,
            token_issuer,
            notifier,
            clock,
            event_bus,
            logger,
            policy,
        ),
        change_password=ChangePasswordHandler(
            repository, hasher, credential_policy, clock, event_bus, logger, policy
        ),
        forgot_password=ForgotPasswordHandler(
            repository, token_issuer, rate_limiter, notifier, clock, logger, policy
        ),
        reset_password=ResetPasswordHandler(
            repository,
            hasher,
            token_issuer,
            credential_policy,
            clock,
            event_bus,
            logger,
            policy,
        ),
        confirm_email=ConfirmEmailHandler(
            repository, token_issuer, clock, event_bus, logger, policy
        ),
        resend_email_confirmation=ResendEmailConfirmationHandler(
            repository, token_issuer, notifier, clock, logger
        ),
        change_user_role=ChangeUserRoleHandler(repository, clock, event_bus, logger),
        set_user_active=SetUserActiveHandler(repository, clock, event_bus, logger),
        unlock_user=UnlockUserHandler(repository, clock, event_bus, logger),
        get_current_user=GetCurrentUserHandler(repository, logger),
        check_email_available=CheckEmailAvailableHandler(repository, logger, policy),
        validate_password_strength=ValidatePasswordStrengthHandler(credential_policy),
        list_sessions=ListSessionsHandler(repository, clock, logger, policy),
    )

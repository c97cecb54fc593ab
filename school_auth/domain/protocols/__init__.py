"""Domain ports (Protocols) implemented by infrastructure adapters."""

from school_auth.domain.protocols.breach_list_checker import BreachListChecker
from school_auth.domain.protocols.clock import Clock
from school_auth.domain.protocols.credential_hasher import CredentialHasher
from school_auth.domain.protocols.event_bus_protocol import (
    EventBusProtocol,
    EventHandler,
)
from school_auth.domain.protocols.logger_protocol import LoggerProtocol
from school_auth.domain.protocols.login_rate_limiter import LoginRateLimiter
from school_auth.domain.protocols.notifier import (
    EmailConfirmationNotifier,
    PasswordResetNotifier,
)
from school_auth.domain.protocols.token_issuer import TokenIssuer
from school_auth.domain.protocols.user_repository import UserRepository

__all__ = [
    "BreachListChecker",
    "Clock",
    "CredentialHasher",
    "EmailConfirmationNotifier",
    "EventBusProtocol",
    "EventHandler",
    "LoggerProtocol",
    "LoginRateLimiter",
    "PasswordResetNotifier",
    "TokenIssuer",
    "UserRepository",
]

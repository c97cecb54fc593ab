"""Breach-list checker adapters."""

from school_auth.infrastructure.breach.pwned_passwords_checker import (
    PwnedPasswordsChecker,
)
from school_auth.infrastructure.breach.static_breach_list_checker import (
    StaticBreachListChecker,
)

__all__ = ["PwnedPasswordsChecker", "StaticBreachListChecker"]

"""Base of every expected failure carried in a Failure result.

Handlers return these as data. Only programmer errors (an unknown role code,
an invalid address passed to EmailAddress) raise ValueError.
"""

from dataclasses import dataclass

from school_auth.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Not an Exception subclass.

    Attributes:
        code: Stable machine-readable code callers branch on.
        message: Text safe to show the end user.
        details: Extra string context for logs and API payloads.
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

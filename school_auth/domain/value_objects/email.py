"""Email address value object with validation.

Immutable value object that validates email format.
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email


@dataclass(frozen=True)
class EmailAddress:
    """Email value object with format validation.

    Uses email-validator library for RFC-compliant validation and stores the
    normalized address with a lowercased domain, so equality is
    case-insensitive on the domain part.

    Attributes:
        value: The email address string (validated, normalized).

    Raises:
        ValueError: If email format is invalid.

    Example:
        >>> email = EmailAddress("user@Example.com")
        >>> str(email)
        'user@example.com'
    """

    value: str

    def __post_init__(self) -> None:
        """Validate email format after initialization.

        Raises:
            ValueError: If email format is invalid.
        """
        try:
            validated = validate_email(self.value.strip(), check_deliverability=False)
            object.__setattr__(self, "value", validated.normalized.lower())
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email: {e}") from e

    @property
    def domain(self) -> str:
        """Domain part of the address (after the @)."""
        return self.value.rsplit("@", 1)[1]

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"EmailAddress('{self.value}')"

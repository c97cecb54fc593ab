"""Static breach-list checker backed by a bundled list of common passwords."""

from collections.abc import Iterable


COMMON_PASSWORDS: frozenset[str] = frozenset(
    {
        "password", "123456", "123456789", "12345678", "12345", "1234567",
        "password123", "admin", "qwerty", "abc123", "password1", "welcome",
        "monkey", "1234567890", "dragon", "princess", "letmein", "654321",
        "superman", "qwerty123", "freedom", "696969", "batman", "master",
        "hello", "charlie", "aa123456", "donald", "qwertyuiop", "123123",
        "football", "secret", "admin123", "welcome123", "login", "temp",
        "guest", "123qwe", "zxcvbnm", "trustno1", "1234qwer", "qwer1234",
        "passw0rd", "iloveyou", "sunshine", "starwars", "whatever",
    }
)  # fmt: skip


class StaticBreachListChecker:
    """Case-insensitive lookup in an in-memory set of known-bad passwords.

    Implements BreachListChecker. Never raises.

    Args:
        passwords: Replacement list; defaults to the bundled common passwords.
    """

    def __init__(self, passwords: Iterable[str] | None = None) -> None:
        source = COMMON_PASSWORDS if passwords is None else passwords
        self._passwords = frozenset(p.lower() for p in source)

    async def is_compromised(self, plaintext: str) -> bool:
        return bool(plaintext) and plaintext.lower() in self._passwords

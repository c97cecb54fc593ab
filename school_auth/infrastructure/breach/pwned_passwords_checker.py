"""Pwned Passwords range API checker (k-anonymity).

Only the first five hex characters of the password's SHA-1 digest leave the
process. The API returns every known suffix for that prefix with a breach
count, and the match happens locally.

API:
    GET {base_url}/range/{prefix}
    Response body lines: "<35 hex suffix>:<count>"

Fail-Open:
    Timeouts, connection errors and non-200 responses are logged and
    reported as "not compromised".
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

import httpx

from school_auth.infrastructure.breach.static_breach_list_checker import (
    StaticBreachListChecker,
)

if TYPE_CHECKING:
    from school_auth.domain.protocols.logger_protocol import LoggerProtocol


DEFAULT_BASE_URL = "https://api.pwnedpasswords.com"


class PwnedPasswordsChecker:
    """BreachListChecker backed by the Pwned Passwords range API.

    The bundled static list is consulted first so the most common passwords
    are rejected without a network call.

    Args:
        logger: Structured logger.
        base_url: API base URL.
        timeout: HTTP timeout in seconds.
        min_breach_count: Minimum reported count to treat as compromised.
    """

    def __init__(
        self,
        *,
        logger: LoggerProtocol,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 2.0,
        min_breach_count: int = 1,
    ) -> None:
        self._logger = logger
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._min_breach_count = min_breach_count
        self._local = StaticBreachListChecker()

    async def is_compromised(self, plaintext: str) -> bool:
        if not plaintext:
            return False
        if await self._local.is_compromised(plaintext):
            return True

        digest = hashlib.sha1(plaintext.encode("utf-8")).hexdigest().upper()  # noqa: S324
        prefix, suffix = digest[:5], digest[5:]

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    f"{self._base_url}/range/{prefix}",
                    headers={"Add-Padding": "true"},
                )
        except httpx.TimeoutException as e:
            self._logger.warning("breach_api_timeout", error=str(e))
            return False
        except httpx.RequestError as e:
            self._logger.warning("breach_api_connection_error", error=str(e))
            return False

        if response.status_code != 200:
            self._logger.warning(
                "breach_api_unexpected_status", status_code=response.status_code
            )
            return False

        return self._suffix_count(response.text, suffix) >= self._min_breach_count

    @staticmethod
    def _suffix_count(body: str, suffix: str) -> int:
        for line in body.splitlines():
            candidate, _, count = line.strip().partition(":")
            if candidate.upper() == suffix:
                try:
                    return int(count)
                except ValueError:
                    return 0
        return 0

"""Device summary value object parsed from a user agent string.

Parsing uses the user-agents library and is best-effort: unknown or garbled
input yields an "Unknown" summary and never raises.
"""

import logging
from dataclasses import dataclass

from user_agents import parse as parse_user_agent  # type: ignore[import-untyped]
from user_agents.parsers import UserAgent  # type: ignore[import-untyped]


logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


@dataclass(frozen=True, slots=True, kw_only=True)
class DeviceSummary:
    """Parsed OS, browser and device class of a session's client.

    Attributes:
        operating_system: OS family ("Windows", "Mac OS X", "Android", ...).
        browser: Browser family ("Chrome", "Firefox", ...).
        device_class: "Mobile", "Tablet", "Desktop" or "Unknown".
        is_bot: True when the parser recognizes a crawler.
    """

    operating_system: str = UNKNOWN
    browser: str = UNKNOWN
    device_class: str = UNKNOWN
    is_bot: bool = False

    @classmethod
    def parse(cls, user_agent: str | None) -> "DeviceSummary":
        """Parse a raw user agent string.

        Args:
            user_agent: Raw User-Agent header value.

        Returns:
            DeviceSummary with whatever could be recognized. Fields default
            to "Unknown" on empty input or parse failure.
        """
        if not user_agent or not user_agent.strip():
            return cls()

        try:
            ua: UserAgent = parse_user_agent(user_agent)
            return cls(
                operating_system=ua.os.family or UNKNOWN,
                browser=ua.browser.family or UNKNOWN,
                device_class=cls._device_class(ua),
                is_bot=bool(ua.is_bot),
            )
        except Exception as e:
            logger.warning(
                "Failed to parse user agent",
                extra={"user_agent": user_agent[:100], "error": str(e)},
            )
            return cls()

    @staticmethod
    def _device_class(ua: UserAgent) -> str:
        if ua.is_mobile:
            return "Mobile"
        if ua.is_tablet:
            return "Tablet"
        if ua.is_pc:
            return "Desktop"
        return UNKNOWN

    @property
    def is_mobile(self) -> bool:
        """True for phones and tablets."""
        return self.device_class in ("Mobile", "Tablet")

    def __str__(self) -> str:
        """Human-readable form, e.g. "Chrome on Mac OS X (Desktop)"."""
        return f"{self.browser} on {self.operating_system} ({self.device_class})"

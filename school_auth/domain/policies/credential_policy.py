"""Credential policy: password strength scoring, hard rules, breach lookup.

Scoring and hard-rule validation are independent. A password can score
"Good" and still violate a hard rule (no digit), or pass every hard rule and
still score "Weak". Callers surface both.

Scoring (0..100, clamped):
    - Length: +10 each at 8, 12 and 16 characters
    - Character classes: +15 each for upper, lower, digit, special
    - Entropy estimate (length * log2(pool size)): +10 at 60 bits, +5 at 40
    - Common sequence (123, abc, qwe, asd, zxc, ...): -20
    - Same character three times in a row: -15

Usage:
    policy = CredentialPolicy(breach_checker=checker, logger=logger)
    score = policy.score("Str0ng!Passw0rd#2024")   # 100
    policy.classify(score)                          # PasswordStrength.VERY_STRONG
    validation = policy.validate("short")
    validation.violations                           # ("Password must ...", ...)
"""

import asyncio
import math
import re
from dataclasses import dataclass

from school_auth.domain.enums.password_strength import PasswordStrength
from school_auth.domain.policies.auth_policy import COLLABORATOR_TIMEOUT_SECONDS
from school_auth.domain.protocols.breach_list_checker import BreachListChecker
from school_auth.domain.protocols.logger_protocol import LoggerProtocol


MIN_LENGTH = 8
MAX_LENGTH = 128

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[^A-Za-z0-9]")
_TRIPLE = re.compile(r"(.)\1\1")

COMMON_SEQUENCES: tuple[str, ...] = (
    "123", "234", "345", "456", "567", "678", "789", "890",
    "abc", "bcd", "cde", "def", "efg", "fgh", "ghi", "hij",
    "qwe", "wer", "ert", "rty", "tyu", "yui", "uio", "iop",
    "asd", "sdf", "dfg", "ghj", "hjk", "jkl",
    "zxc", "xcv", "cvb", "vbn", "bnm",
)  # fmt: skip

# (exclusive upper bound, class)
_BREAKPOINTS: tuple[tuple[int, PasswordStrength], ...] = (
    (20, PasswordStrength.VERY_WEAK),
    (40, PasswordStrength.WEAK),
    (60, PasswordStrength.FAIR),
    (80, PasswordStrength.GOOD),
    (95, PasswordStrength.STRONG),
)


@dataclass(frozen=True, slots=True, kw_only=True)
class PasswordValidation:
    """Outcome of the hard-rule check.

    Attributes:
        is_valid: True when no rule is violated.
        violations: Human-readable rule failures, in rule order.
    """

    is_valid: bool
    violations: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class PasswordAssessment:
    """Everything known about a candidate password."""

    score: int
    strength: PasswordStrength
    is_valid: bool
    violations: tuple[str, ...]
    suggestions: tuple[str, ...]
    is_compromised: bool


class CredentialPolicy:
    """Stateless password rules plus an injected breach-list lookup.

    Args:
        breach_checker: Compromised-password lookup.
        logger: Logger for degraded breach lookups.
        timeout_seconds: Upper bound on the breach lookup.
    """

    def __init__(
        self,
        breach_checker: BreachListChecker,
        logger: LoggerProtocol,
        timeout_seconds: float = COLLABORATOR_TIMEOUT_SECONDS,
    ) -> None:
        self._breach_checker = breach_checker
        self._logger = logger
        self._timeout_seconds = timeout_seconds

    def score(self, plaintext: str) -> int:
        """Strength score between 0 and 100."""
        if not plaintext:
            return 0

        length = len(plaintext)
        score = sum(10 for tier in (8, 12, 16) if length >= tier)

        classes = self._character_classes(plaintext)
        score += 15 * len(classes)

        bits = self.entropy_bits(plaintext)
        if bits >= 60:
            score += 10
        elif bits >= 40:
            score += 5

        if self.contains_common_sequence(plaintext):
            score -= 20
        if self.contains_repetition(plaintext):
            score -= 15

        return max(0, min(100, score))

    @staticmethod
    def classify(score: int) -> PasswordStrength:
        """Map a score to a strength class (breakpoints 20/40/60/80/95)."""
        for upper_bound, strength in _BREAKPOINTS:
            if score < upper_bound:
                return strength
        return PasswordStrength.VERY_STRONG

    def validate(self, plaintext: str) -> PasswordValidation:
        """Check the hard rules: length 8..128, upper, lower and digit."""
        if not plaintext:
            return PasswordValidation(is_valid=False, violations=("Password is required",))

        violations: list[str] = []
        if len(plaintext) < MIN_LENGTH:
            violations.append(f"Password must be at least {MIN_LENGTH} characters")
        if len(plaintext) > MAX_LENGTH:
            violations.append(f"Password must be at most {MAX_LENGTH} characters")
        if not _UPPER.search(plaintext):
            violations.append("Password must contain an uppercase letter")
        if not _LOWER.search(plaintext):
            violations.append("Password must contain a lowercase letter")
        if not _DIGIT.search(plaintext):
            violations.append("Password must contain a digit")

        return PasswordValidation(is_valid=not violations, violations=tuple(violations))

    def suggestions(self, plaintext: str) -> tuple[str, ...]:
        """Advice for raising the score. Empty for very strong passwords."""
        plaintext = plaintext or ""
        tips: list[str] = []
        if len(plaintext) < 12:
            tips.append("Use at least 12 characters")
        if not _SPECIAL.search(plaintext):
            tips.append("Add a special character (!@#$%...)")
        if self.contains_common_sequence(plaintext):
            tips.append("Avoid obvious sequences such as 123, abc or qwerty")
        if self.contains_repetition(plaintext):
            tips.append("Avoid repeating the same character three times in a row")
        return tuple(tips)

    async def is_compromised(self, plaintext: str) -> bool:
        """Breach-list lookup bounded by a timeout.

        Timeouts and collaborator errors are logged and reported as
        "not compromised" so validation never crashes on them.
        """
        if not plaintext:
            return False
        try:
            return await asyncio.wait_for(
                self._breach_checker.is_compromised(plaintext),
                timeout=self._timeout_seconds,
            )
        except TimeoutError:
            self._logger.warning(
                "breach_check_timeout", timeout_seconds=self._timeout_seconds
            )
            return False
        except Exception as e:
            self._logger.warning(
                "breach_check_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    async def assess(self, plaintext: str) -> PasswordAssessment:
        """Score, classify, validate and look up a password in one call."""
        score = self.score(plaintext)
        validation = self.validate(plaintext)
        return PasswordAssessment(
            score=score,
            strength=self.classify(score),
            is_valid=validation.is_valid,
            violations=validation.violations,
            suggestions=self.suggestions(plaintext),
            is_compromised=await self.is_compromised(plaintext),
        )

    @staticmethod
    def entropy_bits(plaintext: str) -> float:
        """Naive entropy estimate: length * log2(size of used character pools)."""
        pool = 0
        if _LOWER.search(plaintext):
            pool += 26
        if _UPPER.search(plaintext):
            pool += 26
        if _DIGIT.search(plaintext):
            pool += 10
        if _SPECIAL.search(plaintext):
            pool += 33
        if pool == 0:
            return 0.0
        return len(plaintext) * math.log2(pool)

    @staticmethod
    def contains_common_sequence(plaintext: str) -> bool:
        lowered = plaintext.lower()
        return any(sequence in lowered for sequence in COMMON_SEQUENCES)

    @staticmethod
    def contains_repetition(plaintext: str) -> bool:
        return _TRIPLE.search(plaintext) is not None

    @staticmethod
    def _character_classes(plaintext: str) -> set[str]:
        classes: set[str] = set()
        if _UPPER.search(plaintext):
            classes.add("upper")
        if _LOWER.search(plaintext):
            classes.add("lower")
        if _DIGIT.search(plaintext):
            classes.add("digit")
        if _SPECIAL.search(plaintext):
            classes.add("special")
        return classes

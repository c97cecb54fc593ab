"""Password strength classification buckets."""

from enum import Enum


class PasswordStrength(str, Enum):
    """Strength class derived from a 0-100 score.

    Breakpoints: <20 VERY_WEAK, <40 WEAK, <60 FAIR, <80 GOOD, <95 STRONG,
    otherwise VERY_STRONG.
    """

    VERY_WEAK = "very_weak"
    WEAK = "weak"
    FAIR = "fair"
    GOOD = "good"
    STRONG = "strong"
    VERY_STRONG = "very_strong"

"""Domain enums."""

from school_auth.domain.enums.password_strength import PasswordStrength
from school_auth.domain.enums.user_role import UserRole

__all__ = ["PasswordStrength", "UserRole"]

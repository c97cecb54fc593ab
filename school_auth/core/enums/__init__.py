"""Core enums package.

Usage:
    from school_auth.core.enums import ErrorCode, Environment
"""

from school_auth.core.enums.environment import Environment
from school_auth.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]

"""Application environment types.

Used by Settings and the container to pick environment-specific behavior
(for example JSON log output under testing and CI).
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"

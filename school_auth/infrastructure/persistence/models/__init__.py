"""SQLAlchemy models."""

from school_auth.infrastructure.persistence.models.session import SessionModel
from school_auth.infrastructure.persistence.models.user import UserModel

__all__ = ["SessionModel", "UserModel"]

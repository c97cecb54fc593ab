"""Domain entities."""

from school_auth.domain.entities.session import Session
from school_auth.domain.entities.user import User

__all__ = ["Session", "User"]

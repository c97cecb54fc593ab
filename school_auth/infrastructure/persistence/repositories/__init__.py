"""UserRepository adapters."""

from school_auth.infrastructure.persistence.repositories.in_memory_user_repository import (
    InMemoryUserRepository,
)
from school_auth.infrastructure.persistence.repositories.user_repository import (
    SQLAlchemyUserRepository,
)

__all__ = ["InMemoryUserRepository", "SQLAlchemyUserRepository"]

"""Pytest configuration and shared fixtures.

Fixtures build real in-process collaborators (in-memory repository, fixed
clock, low-cost bcrypt, JWT issuer) so handler tests exercise the actual
domain rules. Loggers and event buses are mocks so tests can assert on what
was logged or published.
"""

import inspect
from collections.abc import Callable
from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock
from uuid import UUID

import pytest

from school_auth.domain.entities.user import User
from school_auth.domain.enums.user_role import UserRole
from school_auth.domain.policies.credential_policy import CredentialPolicy
from school_auth.domain.value_objects.credential import Credential
from school_auth.domain.value_objects.email import EmailAddress
from school_auth.infrastructure.breach.static_breach_list_checker import (
    StaticBreachListChecker,
)
from school_auth.infrastructure.clock.system_clock import FixedClock
from school_auth.infrastructure.persistence.repositories.in_memory_user_repository import (
    InMemoryUserRepository,
)
from school_auth.infrastructure.rate_limit.in_memory_login_rate_limiter import (
    InMemoryLoginRateLimiter,
)
from school_auth.infrastructure.security.bcrypt_credential_hasher import (
    BcryptCredentialHasher,
)
from school_auth.infrastructure.security.jwt_token_issuer import JWTTokenIssuer

TEST_SECRET_KEY = "test-secret-key-with-at-least-32-characters!!"
TEST_PASSWORD = "Corr3ct-Horse-Battery"
FIXED_NOW = datetime(2025, 1, 15, 9, 0, tzinfo=UTC)


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real database"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if inspect.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(FIXED_NOW)


@pytest.fixture
def logger() -> Mock:
    return Mock()


@pytest.fixture
def event_bus() -> AsyncMock:
    return AsyncMock()


@pytest.fixture(scope="session")
def hasher() -> BcryptCredentialHasher:
    """Minimum cost factor keeps hashing fast in tests."""
    return BcryptCredentialHasher(rounds=4)


@pytest.fixture(scope="session")
def password_hash(hasher: BcryptCredentialHasher) -> str:
    return hasher.hash(TEST_PASSWORD)


@pytest.fixture
def token_issuer() -> JWTTokenIssuer:
    return JWTTokenIssuer(TEST_SECRET_KEY)


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def rate_limiter(clock: FixedClock) -> InMemoryLoginRateLimiter:
    return InMemoryLoginRateLimiter(clock=clock, logger=Mock())


@pytest.fixture
def credential_policy() -> CredentialPolicy:
    """Bundled breach list only, so no test touches the network."""
    return CredentialPolicy(breach_checker=StaticBreachListChecker(), logger=Mock())


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def user_factory(password_hash: str) -> Callable[..., User]:
    """Build a User without recording events.

    Usage:
        user = user_factory(email="ana@school.edu", role=UserRole.ADMIN)
    """

    def _create(
        *,
        email: str = "teacher@school.edu",
        role: UserRole = UserRole.TEACHER,
        school_id: UUID | None = None,
        created_at: datetime = FIXED_NOW,
        **overrides,
    ) -> User:
        user = User.register(
            first_name=overrides.pop("first_name", "Ana"),
            last_name=overrides.pop("last_name", "Silva"),
            email=EmailAddress(email),
            credential=Credential(password_hash=password_hash, changed_at=created_at),
            role=role,
            school_id=school_id,
            now=created_at,
        )
        user.pull_events()
        for name, value in overrides.items():
            setattr(user, name, value)
        return user

    return _create

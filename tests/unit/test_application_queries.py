"""Unit tests for the query handlers."""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from school_auth.application.queries.auth_queries import (
    CheckEmailAvailable,
    GetCurrentUser,
    ListSessions,
    ValidatePasswordStrength,
)
from school_auth.application.queries.handlers import (
    CheckEmailAvailableHandler,
    GetCurrentUserHandler,
    ListSessionsHandler,
    ValidatePasswordStrengthHandler,
)
from school_auth.core.enums import ErrorCode
from school_auth.core.result import Success
from school_auth.domain.enums.password_strength import PasswordStrength
from school_auth.domain.enums.user_role import UserRole

FIREFOX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)


@pytest.mark.unit
class TestGetCurrentUser:
    async def test_returns_projection(self, repository, user_factory, logger):
        user = user_factory(role=UserRole.COORDINATOR)
        await repository.save(user)

        result = await GetCurrentUserHandler(repository, logger).handle(
            GetCurrentUser(user_id=user.id)
        )

        assert isinstance(result, Success)
        assert result.value.full_name == "Ana Silva"
        assert result.value.initials == "AS"
        assert result.value.role_name == "Coordinator"
        assert result.value.role_level == UserRole.COORDINATOR.level

    async def test_unknown_user(self, repository, logger):
        result = await GetCurrentUserHandler(repository, logger).handle(
            GetCurrentUser(user_id=uuid4())
        )

        assert result.error.code == ErrorCode.USER_NOT_FOUND

    async def test_repository_outage(self, logger):
        repository = AsyncMock()
        repository.find_by_id.side_effect = ConnectionError("db down")

        result = await GetCurrentUserHandler(repository, logger).handle(
            GetCurrentUser(user_id=uuid4())
        )

        assert result.error.code == ErrorCode.SERVICE_UNAVAILABLE
        assert logger.error.call_args.args[0] == "get_current_user_failed"


@pytest.mark.unit
class TestCheckEmailAvailable:
    @pytest.mark.parametrize(
        "email, available",
        [
            ("free@school.edu", True),
            ("TEACHER@school.edu", False),
            ("someone@tempmail.com", False),
            ("not-an-email", False),
        ],
    )
    async def test_availability(self, repository, user_factory, logger, email, available):
        await repository.save(user_factory())

        result = await CheckEmailAvailableHandler(repository, logger).handle(
            CheckEmailAvailable(email=email)
        )

        assert result == Success(value=available)


@pytest.mark.unit
class TestValidatePasswordStrength:
    async def test_reports_score_and_rules(self, credential_policy):
        handler = ValidatePasswordStrengthHandler(credential_policy)

        result = await handler.handle(ValidatePasswordStrength(password="Str0ng!Passw0rd#2024"))

        report = result.value
        assert report.score == 100
        assert report.strength is PasswordStrength.VERY_STRONG
        assert report.is_valid
        assert not report.is_compromised

    async def test_empty_password_never_fails(self, credential_policy):
        handler = ValidatePasswordStrengthHandler(credential_policy)

        result = await handler.handle(ValidatePasswordStrength(password=""))

        assert isinstance(result, Success)
        assert result.value.score == 0
        assert result.value.violations == ("Password is required",)

    async def test_common_password_is_compromised(self, credential_policy):
        handler = ValidatePasswordStrengthHandler(credential_policy)

        result = await handler.handle(ValidatePasswordStrength(password="password"))

        assert result.value.is_compromised
        assert not result.value.is_valid


@pytest.mark.unit
class TestListSessions:
    async def test_most_recent_first(self, repository, user_factory, clock):
        user = user_factory()
        older = user.open_session("10.0.0.1", FIREFOX, clock.now())
        clock.advance(minutes=5)
        newer = user.open_session("10.0.0.2", IPHONE, clock.now())
        await repository.save(user)

        result = await ListSessionsHandler(repository, clock, Mock()).handle(
            ListSessions(user_id=user.id)
        )

        sessions = result.value
        assert [s.session_id for s in sessions] == [newer.id, older.id]
        assert sessions[0].is_mobile
        assert sessions[1].device.startswith("Firefox on ")

    async def test_active_only_filter(self, repository, user_factory, clock):
        user = user_factory()
        ended = user.open_session("10.0.0.1", FIREFOX, clock.now())
        user.open_session("10.0.0.2", FIREFOX, clock.now())
        user.end_session(ended.id, clock.now())
        await repository.save(user)
        handler = ListSessionsHandler(repository, clock, Mock())

        active = await handler.handle(ListSessions(user_id=user.id))
        everything = await handler.handle(ListSessions(user_id=user.id, active_only=False))

        assert len(active.value) == 1
        assert len(everything.value) == 2

    async def test_idle_session_is_flagged_expired(self, repository, user_factory, clock):
        user = user_factory()
        user.open_session("10.0.0.1", FIREFOX, clock.now())
        await repository.save(user)
        clock.advance(minutes=31)

        result = await ListSessionsHandler(repository, clock, Mock()).handle(
            ListSessions(user_id=user.id)
        )

        assert result.value[0].is_expired

    async def test_long_running_session_is_flagged(self, repository, user_factory, clock):
        user = user_factory()
        session = user.open_session("10.0.0.1", FIREFOX, clock.now())
        clock.advance(hours=9)
        user.touch_session(session.id, clock.now())
        await repository.save(user)

        result = await ListSessionsHandler(repository, clock, Mock()).handle(
            ListSessions(user_id=user.id)
        )

        info = result.value[0]
        assert info.is_long_running
        assert not info.is_expired

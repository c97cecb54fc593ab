"""Unit tests for the password handlers.

Tests cover:
- ChangePasswordHandler: success, mismatch, weak, compromised, wrong current
  password, reuse, unknown user
- ForgotPasswordHandler: silent success in every case, token hand-off
- ResetPasswordHandler: token checks, reactivation and unlock
"""

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from school_auth.application.commands.auth_commands import (
    ChangePassword,
    ForgotPassword,
    ResetPassword,
)
from school_auth.application.commands.handlers import (
    ChangePasswordHandler,
    ForgotPasswordHandler,
    ResetPasswordHandler,
)
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import PolicyViolation
from school_auth.core.result import Failure, Success
from school_auth.domain.events import PasswordChanged
from school_auth.infrastructure.rate_limit.in_memory_login_rate_limiter import (
    InMemoryLoginRateLimiter,
)
from tests.conftest import TEST_PASSWORD

NEW_PASSWORD = "Blue-Staple-Lantern-42"
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"


def change(user_id, current=TEST_PASSWORD, new=NEW_PASSWORD, confirm=None):
    return ChangePassword(
        user_id=user_id,
        current_password=current,
        new_password=new,
        confirm_password=new if confirm is None else confirm,
    )


@pytest.fixture
def change_handler(repository, hasher, credential_policy, clock, event_bus, logger):
    return ChangePasswordHandler(
        repository, hasher, credential_policy, clock, event_bus, logger
    )


@pytest.fixture
def forgot_handler(repository, token_issuer, rate_limiter, notifier, clock, logger):
    return ForgotPasswordHandler(
        repository, token_issuer, rate_limiter, notifier, clock, logger
    )


@pytest.fixture
def reset_handler(
    repository, hasher, token_issuer, credential_policy, clock, event_bus, logger
):
    return ResetPasswordHandler(
        repository, hasher, token_issuer, credential_policy, clock, event_bus, logger
    )


@pytest.mark.unit
class TestChangePassword:
    async def test_success_ends_sessions(
        self, change_handler, repository, user_factory, hasher, now, event_bus
    ):
        # Arrange
        user = user_factory()
        user.open_session("10.0.0.1", USER_AGENT, now)
        user.issue_refresh_token("refresh-token-1", now + timedelta(days=7), now)
        user.pull_events()
        await repository.save(user)

        # Act
        result = await change_handler.handle(change(user.id))

        # Assert
        assert isinstance(result, Success)
        stored = await repository.find_by_id(user.id)
        assert hasher.verify(NEW_PASSWORD, stored.credential.password_hash)
        assert stored.active_sessions == ()
        assert stored.refresh_token is None
        published = [call.args[0] for call in event_bus.publish.await_args_list]
        assert any(isinstance(e, PasswordChanged) for e in published)

    async def test_confirmation_mismatch(self, change_handler, repository, user_factory):
        user = user_factory()
        await repository.save(user)

        result = await change_handler.handle(change(user.id, confirm="Something-Else-1"))

        assert result.error.code == ErrorCode.PASSWORD_MISMATCH
        assert result.error.field == "confirm_password"

    async def test_weak_password_lists_violations(
        self, change_handler, repository, user_factory
    ):
        user = user_factory()
        await repository.save(user)

        result = await change_handler.handle(change(user.id, new="short"))

        assert isinstance(result.error, PolicyViolation)
        assert result.error.code == ErrorCode.PASSWORD_TOO_WEAK
        assert len(result.error.violations) == 3

    async def test_compromised_password(self, change_handler, repository, user_factory):
        user = user_factory()
        await repository.save(user)

        result = await change_handler.handle(change(user.id, new="Password123"))

        assert result.error.code == ErrorCode.PASSWORD_COMPROMISED

    async def test_wrong_current_password_counts_as_failed_login(
        self, change_handler, repository, user_factory
    ):
        user = user_factory()
        await repository.save(user)

        result = await change_handler.handle(change(user.id, current="Not-My-Pass-9"))

        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        assert (await repository.find_by_id(user.id)).failed_login_count == 1

    async def test_same_password_is_reused(self, change_handler, repository, user_factory):
        user = user_factory()
        await repository.save(user)

        result = await change_handler.handle(change(user.id, new=TEST_PASSWORD))

        assert result.error.code == ErrorCode.PASSWORD_REUSED

    async def test_locked_user(self, change_handler, repository, user_factory, now):
        user = user_factory(locked_until=now + timedelta(minutes=5))
        await repository.save(user)

        result = await change_handler.handle(change(user.id))

        assert result.error.code == ErrorCode.ACCOUNT_LOCKED

    async def test_unknown_user(self, change_handler, logger):
        result = await change_handler.handle(change(uuid4()))

        assert result.error.code == ErrorCode.USER_NOT_FOUND
        assert logger.warning.call_args.args[0] == "password_change_rejected"


@pytest.mark.unit
class TestForgotPassword:
    async def test_hands_token_to_notifier(
        self, forgot_handler, repository, user_factory, notifier, token_issuer, now
    ):
        user = user_factory()
        await repository.save(user)

        result = await forgot_handler.handle(ForgotPassword(email="teacher@school.edu"))

        assert isinstance(result, Success)
        kwargs = notifier.send_password_reset.await_args.kwargs
        assert kwargs["user_id"] == user.id
        assert kwargs["full_name"] == "Ana Silva"
        verified = token_issuer.verify_password_reset_token(
            kwargs["token"], user_id=user.id, email="teacher@school.edu", now=now
        )
        assert isinstance(verified, Success)

    @pytest.mark.parametrize("email", ["nobody@school.edu", "not-an-email"])
    async def test_unknown_or_malformed_email_is_silent(
        self, forgot_handler, notifier, email
    ):
        result = await forgot_handler.handle(ForgotPassword(email=email))

        assert isinstance(result, Success)
        notifier.send_password_reset.assert_not_awaited()

    async def test_locked_user_gets_no_token(
        self, forgot_handler, repository, user_factory, notifier, now
    ):
        await repository.save(user_factory(locked_until=now + timedelta(minutes=5)))

        await forgot_handler.handle(ForgotPassword(email="teacher@school.edu"))

        notifier.send_password_reset.assert_not_awaited()

    async def test_rate_limited_address_is_silent(
        self, repository, user_factory, token_issuer, notifier, clock, logger
    ):
        limiter = InMemoryLoginRateLimiter(clock=clock, logger=logger, max_attempts=1)
        handler = ForgotPasswordHandler(
            repository, token_issuer, limiter, notifier, clock, logger
        )
        await repository.save(user_factory())
        command = ForgotPassword(email="teacher@school.edu", source_address="10.0.0.9")
        await handler.handle(command)

        result = await handler.handle(command)

        assert isinstance(result, Success)
        assert notifier.send_password_reset.await_count == 1

    async def test_notifier_failure_is_swallowed(
        self, forgot_handler, repository, user_factory, notifier, logger
    ):
        await repository.save(user_factory())
        notifier.send_password_reset.side_effect = ConnectionError("smtp down")

        result = await forgot_handler.handle(ForgotPassword(email="teacher@school.edu"))

        assert isinstance(result, Success)
        assert logger.error.call_args.args[0] == "password_reset_notification_failed"


@pytest.mark.unit
class TestResetPassword:
    def reset(self, token, new=NEW_PASSWORD):
        return ResetPassword(
            email="teacher@school.edu",
            token=token,
            new_password=new,
            confirm_password=new,
        )

    async def test_resets_and_unlocks(
        self, reset_handler, repository, user_factory, token_issuer, hasher, now
    ):
        user = user_factory(
            is_active=False, failed_login_count=5, locked_until=now + timedelta(minutes=20)
        )
        await repository.save(user)
        token = token_issuer.issue_password_reset_token(
            user_id=user.id, email="teacher@school.edu", issued_at=now
        )

        result = await reset_handler.handle(self.reset(token))

        assert isinstance(result, Success)
        stored = await repository.find_by_id(user.id)
        assert hasher.verify(NEW_PASSWORD, stored.credential.password_hash)
        assert stored.is_active
        assert stored.failed_login_count == 0
        assert stored.locked_until is None

    async def test_bad_token_counts_as_failed_login(
        self, reset_handler, repository, user_factory
    ):
        user = user_factory()
        await repository.save(user)

        result = await reset_handler.handle(self.reset("forged-token"))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID
        assert (await repository.find_by_id(user.id)).failed_login_count == 1

    async def test_expired_token(
        self, reset_handler, repository, user_factory, token_issuer, clock
    ):
        user = user_factory()
        await repository.save(user)
        token = token_issuer.issue_password_reset_token(
            user_id=user.id, email="teacher@school.edu", issued_at=clock.now()
        )
        clock.advance(hours=2)

        result = await reset_handler.handle(self.reset(token))

        assert result.error.code == ErrorCode.TOKEN_EXPIRED

    async def test_unknown_email(self, reset_handler):
        result = await reset_handler.handle(self.reset("any-token"))

        assert result.error.code == ErrorCode.TOKEN_INVALID

    async def test_reused_password(
        self, reset_handler, repository, user_factory, token_issuer, now
    ):
        user = user_factory()
        await repository.save(user)
        token = token_issuer.issue_password_reset_token(
            user_id=user.id, email="teacher@school.edu", issued_at=now
        )

        result = await reset_handler.handle(self.reset(token, new=TEST_PASSWORD))

        assert result.error.code == ErrorCode.PASSWORD_REUSED

    async def test_weak_password_checked_before_token(self, reset_handler):
        handler_result = await reset_handler.handle(self.reset("any-token", new="weak"))

        assert handler_result.error.code == ErrorCode.PASSWORD_TOO_WEAK


@pytest.mark.unit
class TestRepositoryOutage:
    async def test_change_password_reports_transient_error(
        self, hasher, credential_policy, clock, event_bus, logger
    ):
        repository = AsyncMock()
        repository.find_by_id.side_effect = ConnectionError("db down")
        handler = ChangePasswordHandler(
            repository, hasher, credential_policy, clock, event_bus, logger
        )

        result = await handler.handle(change(uuid4()))

        assert result.error.code == ErrorCode.SERVICE_UNAVAILABLE

"""Unit tests for registration and email confirmation.

Covers RegisterUserHandler, ConfirmEmailHandler and
ResendEmailConfirmationHandler.
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from school_auth.application.commands.auth_commands import (
    ConfirmEmail,
    RegisterUser,
    ResendEmailConfirmation,
)
from school_auth.application.commands.handlers import (
    ConfirmEmailHandler,
    RegisterUserHandler,
    ResendEmailConfirmationHandler,
)
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import ConflictError, PolicyViolation, ValidationError
from school_auth.core.result import Failure, Success
from school_auth.domain.enums.user_role import UserRole
from school_auth.domain.events import EmailConfirmed, UserRegistered
from tests.conftest import TEST_PASSWORD


def register(**overrides) -> RegisterUser:
    fields = {
        "first_name": "Ana",
        "last_name": "Silva",
        "email": "Ana.Silva@School.edu",
        "password": TEST_PASSWORD,
        "role_code": "teacher",
        "school_id": None,
    }
    fields.update(overrides)
    return RegisterUser(**fields)


@pytest.fixture
def register_handler(
    repository,
    hasher,
    credential_policy,
    token_issuer,
    notifier,
    clock,
    event_bus,
    logger,
):
    return RegisterUserHandler(
        repository,
        hasher,
        credential_policy,
        token_issuer,
        notifier,
        clock,
        event_bus,
        logger,
    )


@pytest.fixture
def confirm_handler(repository, token_issuer, clock, event_bus, logger):
    return ConfirmEmailHandler(repository, token_issuer, clock, event_bus, logger)


@pytest.fixture
def resend_handler(repository, token_issuer, notifier, clock, logger):
    return ResendEmailConfirmationHandler(
        repository, token_issuer, notifier, clock, logger
    )


@pytest.mark.unit
class TestRegisterUser:
    async def test_creates_user_and_sends_confirmation(
        self, register_handler, repository, notifier, event_bus, hasher
    ):
        # Arrange
        school_id = uuid4()

        # Act
        result = await register_handler.handle(register(school_id=school_id))

        # Assert
        assert isinstance(result, Success)
        info = result.value
        assert info.email == "ana.silva@school.edu"
        assert info.role_code == "teacher"
        assert info.school_id == school_id
        assert not info.email_confirmed

        stored = await repository.find_by_id(info.user_id)
        assert stored.role is UserRole.TEACHER
        assert hasher.verify(TEST_PASSWORD, stored.credential.password_hash)

        event = event_bus.publish.await_args.args[0]
        assert isinstance(event, UserRegistered)
        assert notifier.send_email_confirmation.await_args.kwargs["user_id"] == info.user_id

    async def test_duplicate_email(self, register_handler):
        await register_handler.handle(register())

        result = await register_handler.handle(register(email="ana.silva@school.edu"))

        assert isinstance(result.error, ConflictError)
        assert result.error.code == ErrorCode.EMAIL_ALREADY_EXISTS

    @pytest.mark.parametrize(
        "overrides, code",
        [
            ({"first_name": " "}, ErrorCode.INVALID_NAME),
            ({"email": "not-an-email"}, ErrorCode.INVALID_EMAIL),
            ({"role_code": "janitor"}, ErrorCode.INVALID_ROLE),
        ],
    )
    async def test_invalid_input(self, register_handler, repository, overrides, code):
        result = await register_handler.handle(register(**overrides))

        assert isinstance(result.error, ValidationError)
        assert result.error.code == code
        assert not await repository.exists_by_email("ana.silva@school.edu")

    async def test_disposable_domain(self, register_handler):
        result = await register_handler.handle(register(email="ana@tempmail.com"))

        assert isinstance(result.error, PolicyViolation)
        assert result.error.code == ErrorCode.EMAIL_DOMAIN_BLOCKED

    async def test_weak_password(self, register_handler):
        result = await register_handler.handle(register(password="alllowercase"))

        assert result.error.code == ErrorCode.PASSWORD_TOO_WEAK

    async def test_notifier_failure_keeps_registration(
        self, register_handler, repository, notifier, logger
    ):
        notifier.send_email_confirmation.side_effect = ConnectionError("smtp down")

        result = await register_handler.handle(register())

        assert isinstance(result, Success)
        assert await repository.exists_by_email("ana.silva@school.edu")
        assert logger.error.call_args.args[0] == "email_confirmation_notification_failed"

    async def test_repository_outage(
        self, hasher, credential_policy, token_issuer, notifier, clock, event_bus, logger
    ):
        repository = AsyncMock()
        repository.exists_by_email.side_effect = ConnectionError("db down")
        handler = RegisterUserHandler(
            repository,
            hasher,
            credential_policy,
            token_issuer,
            notifier,
            clock,
            event_bus,
            logger,
        )

        result = await handler.handle(register())

        assert result.error.code == ErrorCode.SERVICE_UNAVAILABLE


@pytest.mark.unit
class TestConfirmEmail:
    async def test_confirms_and_activates(
        self, confirm_handler, repository, user_factory, token_issuer, now, event_bus
    ):
        user = user_factory(is_active=False)
        await repository.save(user)
        token = token_issuer.issue_email_confirmation_token(
            user_id=user.id, email="teacher@school.edu", issued_at=now
        )

        result = await confirm_handler.handle(
            ConfirmEmail(email="teacher@school.edu", token=token)
        )

        assert isinstance(result, Success)
        stored = await repository.find_by_id(user.id)
        assert stored.email_confirmed
        assert stored.is_active
        published = [call.args[0] for call in event_bus.publish.await_args_list]
        assert isinstance(published[0], EmailConfirmed)

    async def test_already_confirmed_is_idempotent(
        self, confirm_handler, repository, user_factory, event_bus
    ):
        await repository.save(user_factory(email_confirmed=True))

        result = await confirm_handler.handle(
            ConfirmEmail(email="teacher@school.edu", token="ignored")
        )

        assert isinstance(result, Success)
        event_bus.publish.assert_not_awaited()

    async def test_wrong_purpose_token(
        self, confirm_handler, repository, user_factory, token_issuer, now
    ):
        user = user_factory()
        await repository.save(user)
        reset_token = token_issuer.issue_password_reset_token(
            user_id=user.id, email="teacher@school.edu", issued_at=now
        )

        result = await confirm_handler.handle(
            ConfirmEmail(email="teacher@school.edu", token=reset_token)
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID
        assert (await repository.find_by_id(user.id)).failed_login_count == 1

    async def test_unknown_email(self, confirm_handler):
        result = await confirm_handler.handle(
            ConfirmEmail(email="nobody@school.edu", token="token")
        )

        assert result.error.code == ErrorCode.TOKEN_INVALID


@pytest.mark.unit
class TestResendEmailConfirmation:
    async def test_sends_new_token(self, resend_handler, repository, user_factory, notifier):
        user = user_factory()
        await repository.save(user)

        result = await resend_handler.handle(
            ResendEmailConfirmation(email="teacher@school.edu")
        )

        assert isinstance(result, Success)
        assert notifier.send_email_confirmation.await_args.kwargs["user_id"] == user.id

    @pytest.mark.parametrize(
        "overrides", [{"email_confirmed": True}, {"is_active": False}]
    )
    async def test_skips_ineligible_users(
        self, resend_handler, repository, user_factory, notifier, overrides
    ):
        await repository.save(user_factory(**overrides))

        result = await resend_handler.handle(
            ResendEmailConfirmation(email="teacher@school.edu")
        )

        assert isinstance(result, Success)
        notifier.send_email_confirmation.assert_not_awaited()

    async def test_unknown_email_is_silent(self, resend_handler, notifier):
        result = await resend_handler.handle(
            ResendEmailConfirmation(email="nobody@school.edu")
        )

        assert isinstance(result, Success)
        notifier.send_email_confirmation.assert_not_awaited()

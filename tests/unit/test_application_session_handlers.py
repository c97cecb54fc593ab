"""Unit tests for LogoutHandler and RefreshTokensHandler."""

from datetime import timedelta
from uuid import uuid4

import pytest

from school_auth.application.commands.auth_commands import Logout, RefreshTokens
from school_auth.application.commands.handlers.logout_handler import LogoutHandler
from school_auth.application.commands.handlers.refresh_tokens_handler import (
    RefreshTokensHandler,
)
from school_auth.core.enums import ErrorCode
from school_auth.core.result import Failure, Success

USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"


async def signed_in_user(repository, user_factory, now, *, sessions=1, days=7, **kw):
    """Store a user holding ``sessions`` active sessions and a refresh token."""
    user = user_factory(**kw)
    for i in range(sessions):
        user.open_session(f"10.0.0.{i + 1}", USER_AGENT, now)
    user.issue_refresh_token("refresh-token-1", now + timedelta(days=days), now)
    user.pull_events()
    await repository.save(user)
    return user


@pytest.fixture
def logout_handler(repository, clock, event_bus, logger):
    return LogoutHandler(repository, clock, event_bus, logger)


@pytest.fixture
def refresh_handler(repository, token_issuer, clock, event_bus, logger):
    return RefreshTokensHandler(repository, token_issuer, clock, event_bus, logger)


@pytest.mark.unit
class TestLogout:
    async def test_last_session_clears_refresh_token(
        self, logout_handler, repository, user_factory, now
    ):
        user = await signed_in_user(repository, user_factory, now)
        session_id = user.sessions[0].id

        result = await logout_handler.handle(
            Logout(user_id=user.id, session_id=session_id)
        )

        assert isinstance(result, Success)
        stored = await repository.find_by_id(user.id)
        assert stored.active_sessions == ()
        assert stored.refresh_token is None

    async def test_other_sessions_keep_refresh_token(
        self, logout_handler, repository, user_factory, now
    ):
        user = await signed_in_user(repository, user_factory, now, sessions=2)

        await logout_handler.handle(
            Logout(user_id=user.id, session_id=user.sessions[0].id)
        )

        stored = await repository.find_by_id(user.id)
        assert len(stored.active_sessions) == 1
        assert stored.refresh_token == "refresh-token-1"

    async def test_repeated_logout_keeps_first_end_time(
        self, logout_handler, repository, user_factory, clock
    ):
        user = await signed_in_user(repository, user_factory, clock.now())
        session_id = user.sessions[0].id
        first_end = clock.now()
        await logout_handler.handle(Logout(user_id=user.id, session_id=session_id))

        clock.advance(minutes=5)
        result = await logout_handler.handle(
            Logout(user_id=user.id, session_id=session_id)
        )

        assert isinstance(result, Success)
        stored = await repository.find_by_id(user.id)
        assert stored.find_session(session_id).ended_at == first_end

    async def test_everywhere_ends_all_sessions(
        self, logout_handler, repository, user_factory, now, event_bus
    ):
        user = await signed_in_user(repository, user_factory, now, sessions=3)

        await logout_handler.handle(Logout(user_id=user.id, everywhere=True))

        stored = await repository.find_by_id(user.id)
        assert stored.active_sessions == ()
        assert stored.refresh_token is None
        event = event_bus.publish.await_args.args[0]
        assert event.session_count == 3

    async def test_unknown_user_and_session_are_no_ops(
        self, logout_handler, repository, user_factory, now
    ):
        user = await signed_in_user(repository, user_factory, now)

        assert isinstance(await logout_handler.handle(Logout(user_id=uuid4())), Success)
        assert isinstance(
            await logout_handler.handle(Logout(user_id=user.id, session_id=uuid4())),
            Success,
        )
        assert len((await repository.find_by_id(user.id)).active_sessions) == 1

    async def test_refresh_token_ends_calling_devices_session(
        self, logout_handler, repository, user_factory, now
    ):
        user = await signed_in_user(repository, user_factory, now, sessions=2)
        first, second = user.sessions

        result = await logout_handler.handle(
            Logout(
                refresh_token="refresh-token-1",
                source_address="10.0.0.2",
                user_agent=USER_AGENT,
            )
        )

        assert isinstance(result, Success)
        stored = await repository.find_by_id(user.id)
        assert stored.refresh_token is None
        assert [s.id for s in stored.active_sessions] == [first.id]
        assert stored.find_session(second.id).ended_at == now

    async def test_refresh_token_with_session_id(
        self, logout_handler, repository, user_factory, now
    ):
        user = await signed_in_user(repository, user_factory, now)

        await logout_handler.handle(
            Logout(refresh_token="refresh-token-1", session_id=user.sessions[0].id)
        )

        stored = await repository.find_by_id(user.id)
        assert stored.active_sessions == ()
        assert stored.refresh_token is None

    @pytest.mark.parametrize("token", ["unknown-token", "refresh-token-1"])
    async def test_unknown_or_cleared_refresh_token_succeeds(
        self, logout_handler, repository, user_factory, now, token
    ):
        user = await signed_in_user(repository, user_factory, now)
        await logout_handler.handle(Logout(refresh_token="refresh-token-1"))

        result = await logout_handler.handle(Logout(refresh_token=token))

        assert isinstance(result, Success)
        assert (await repository.find_by_id(user.id)).refresh_token is None


@pytest.mark.unit
class TestRefreshTokens:
    async def test_rotates_token(self, refresh_handler, repository, user_factory, now):
        user = await signed_in_user(repository, user_factory, now)

        result = await refresh_handler.handle(RefreshTokens(refresh_token="refresh-token-1"))

        assert isinstance(result, Success)
        assert result.value.refresh_token != "refresh-token-1"
        stored = await repository.find_by_id(user.id)
        assert stored.refresh_token == result.value.refresh_token

    async def test_old_token_is_rejected_after_rotation(
        self, refresh_handler, repository, user_factory, now
    ):
        await signed_in_user(repository, user_factory, now)
        await refresh_handler.handle(RefreshTokens(refresh_token="refresh-token-1"))

        replay = await refresh_handler.handle(RefreshTokens(refresh_token="refresh-token-1"))

        assert isinstance(replay, Failure)
        assert replay.error.code == ErrorCode.TOKEN_INVALID

    async def test_expired_token_is_cleared(
        self, refresh_handler, repository, user_factory, clock
    ):
        user = await signed_in_user(repository, user_factory, clock.now())
        clock.advance(days=8)

        result = await refresh_handler.handle(RefreshTokens(refresh_token="refresh-token-1"))

        assert result.error.code == ErrorCode.TOKEN_EXPIRED
        assert (await repository.find_by_id(user.id)).refresh_token is None

    async def test_inactive_user_is_refused(
        self, refresh_handler, repository, user_factory, now
    ):
        user = await signed_in_user(repository, user_factory, now, is_active=False)

        result = await refresh_handler.handle(RefreshTokens(refresh_token="refresh-token-1"))

        assert result.error.code == ErrorCode.ACCOUNT_INACTIVE
        assert (await repository.find_by_id(user.id)).refresh_token is None

    async def test_locked_user_is_refused_without_rotation(
        self, refresh_handler, repository, user_factory, now
    ):
        user = await signed_in_user(
            repository, user_factory, now, locked_until=now + timedelta(minutes=30)
        )

        result = await refresh_handler.handle(RefreshTokens(refresh_token="refresh-token-1"))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.ACCOUNT_LOCKED
        assert result.error.retry_after_seconds == 1800
        assert (await repository.find_by_id(user.id)).refresh_token == "refresh-token-1"

    async def test_refresh_works_again_once_lock_expires(
        self, refresh_handler, repository, user_factory, clock
    ):
        now = clock.now()
        user = user_factory()
        for _ in range(5):
            user.record_failed_login(now)
        user.issue_refresh_token("refresh-token-1", now + timedelta(days=7), now)
        await repository.save(user)

        locked = await refresh_handler.handle(RefreshTokens(refresh_token="refresh-token-1"))
        clock.advance(minutes=31)
        unlocked = await refresh_handler.handle(
            RefreshTokens(refresh_token="refresh-token-1")
        )

        assert locked.error.code == ErrorCode.ACCOUNT_LOCKED
        assert isinstance(unlocked, Success)

    async def test_remember_me_horizon_is_kept(
        self, refresh_handler, repository, user_factory, now
    ):
        await signed_in_user(repository, user_factory, now, days=30)

        result = await refresh_handler.handle(RefreshTokens(refresh_token="refresh-token-1"))

        assert result.value.refresh_expires_at == now + timedelta(days=30)

    async def test_touches_the_calling_devices_session(
        self, refresh_handler, repository, user_factory, clock, token_issuer
    ):
        start = clock.now()
        user = user_factory()
        first = user.open_session("10.0.0.1", USER_AGENT, start)
        second = user.open_session("10.0.0.2", USER_AGENT, start + timedelta(minutes=5))
        user.issue_refresh_token("refresh-token-1", start + timedelta(days=7), start)
        await repository.save(user)
        clock.advance(minutes=10)

        result = await refresh_handler.handle(
            RefreshTokens(
                refresh_token="refresh-token-1",
                source_address="10.0.0.1",
                user_agent=USER_AGENT,
            )
        )

        stored = await repository.find_by_id(user.id)
        assert stored.find_session(first.id).last_activity_at == clock.now()
        assert stored.find_session(second.id).last_activity_at == start + timedelta(
            minutes=5
        )
        claims = token_issuer.decode_access_token(
            result.value.access_token, now=clock.now()
        ).value
        assert claims["session_id"] == str(first.id)

    async def test_unrecognized_device_touches_no_session(
        self, refresh_handler, repository, user_factory, clock
    ):
        user = await signed_in_user(repository, user_factory, clock.now())
        started = clock.now()
        clock.advance(minutes=10)

        result = await refresh_handler.handle(
            RefreshTokens(
                refresh_token="refresh-token-1",
                source_address="192.0.2.50",
                user_agent=USER_AGENT,
            )
        )

        assert isinstance(result, Success)
        stored = await repository.find_by_id(user.id)
        assert stored.sessions[0].last_activity_at == started

    @pytest.mark.parametrize("token", ["", "   "])
    async def test_blank_token(self, refresh_handler, token):
        result = await refresh_handler.handle(RefreshTokens(refresh_token=token))

        assert result.error.code == ErrorCode.TOKEN_INVALID

"""Unit tests for administrative handlers and the authority check.

Tests cover:
- check_authority: self-administration, school confinement, role ceiling
- ChangeUserRoleHandler: change, no-op, refused escalation
- SetUserActiveHandler: deactivation ends sessions, idempotent activation
- UnlockUserHandler: clears the lock, no-op when not locked
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from school_auth.application.commands.handlers import (
    ChangeUserRoleHandler,
    SetUserActiveHandler,
    UnlockUserHandler,
)
from school_auth.application.commands.user_admin_commands import (
    ChangeUserRole,
    SetUserActive,
    UnlockUser,
)
from school_auth.application.services.admin_authority import check_authority
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import AuthorizationError
from school_auth.core.result import Success
from school_auth.domain.enums.user_role import UserRole
from school_auth.domain.events import RoleChanged

SCHOOL_ID = uuid4()
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"


@pytest.fixture
async def director(repository, user_factory):
    user = user_factory(
        email="director@school.edu", role=UserRole.DIRECTOR, school_id=SCHOOL_ID
    )
    await repository.save(user)
    return user


@pytest.fixture
async def teacher(repository, user_factory, now):
    user = user_factory(
        email="teacher@school.edu", role=UserRole.TEACHER, school_id=SCHOOL_ID
    )
    user.open_session("10.0.0.1", USER_AGENT, now)
    user.issue_refresh_token("refresh-token-1", now + timedelta(days=7), now)
    user.pull_events()
    await repository.save(user)
    return user


@pytest.mark.unit
class TestCheckAuthority:
    def test_director_manages_teacher_in_same_school(self, user_factory):
        actor = user_factory(role=UserRole.DIRECTOR, school_id=SCHOOL_ID)
        target = user_factory(role=UserRole.TEACHER, school_id=SCHOOL_ID)

        assert check_authority(actor, target, UserRole.COORDINATOR) is None

    def test_other_school_is_refused(self, user_factory):
        actor = user_factory(role=UserRole.DIRECTOR, school_id=uuid4())
        target = user_factory(role=UserRole.TEACHER, school_id=SCHOOL_ID)

        denied = check_authority(actor, target)

        assert isinstance(denied, AuthorizationError)
        assert denied.required_permission == "schools.access"

    def test_super_admin_crosses_schools(self, user_factory):
        actor = user_factory(role=UserRole.SUPER_ADMIN)
        target = user_factory(role=UserRole.ADMIN, school_id=SCHOOL_ID)

        assert check_authority(actor, target) is None

    def test_self_administration_is_refused(self, user_factory):
        actor = user_factory(role=UserRole.SUPER_ADMIN)

        assert check_authority(actor, actor) is not None

    def test_inactive_or_missing_actor_is_refused(self, user_factory):
        target = user_factory(school_id=SCHOOL_ID)
        inactive = user_factory(
            role=UserRole.DIRECTOR, school_id=SCHOOL_ID, is_active=False
        )

        assert check_authority(None, target) is not None
        assert check_authority(inactive, target) is not None

    def test_new_role_above_ceiling_is_refused(self, user_factory):
        actor = user_factory(role=UserRole.DIRECTOR, school_id=SCHOOL_ID)
        target = user_factory(role=UserRole.TEACHER, school_id=SCHOOL_ID)

        denied = check_authority(actor, target, UserRole.ADMIN)

        assert denied.code == ErrorCode.PERMISSION_DENIED


@pytest.mark.unit
class TestChangeUserRole:
    @pytest.fixture
    def handler(self, repository, clock, event_bus, logger):
        return ChangeUserRoleHandler(repository, clock, event_bus, logger)

    async def test_changes_role_and_ends_sessions(
        self, handler, repository, director, teacher, event_bus
    ):
        result = await handler.handle(
            ChangeUserRole(
                actor_id=director.id, user_id=teacher.id, role_code="coordinator"
            )
        )

        assert result == Success(value=True)
        stored = await repository.find_by_id(teacher.id)
        assert stored.role is UserRole.COORDINATOR
        assert stored.active_sessions == ()
        assert stored.refresh_token is None
        published = [call.args[0] for call in event_bus.publish.await_args_list]
        assert any(isinstance(e, RoleChanged) for e in published)

    async def test_same_role_is_no_op(self, handler, director, teacher, event_bus):
        result = await handler.handle(
            ChangeUserRole(actor_id=director.id, user_id=teacher.id, role_code="teacher")
        )

        assert result == Success(value=False)
        event_bus.publish.assert_not_awaited()

    async def test_escalation_is_refused(self, handler, repository, director, teacher):
        result = await handler.handle(
            ChangeUserRole(actor_id=director.id, user_id=teacher.id, role_code="admin")
        )

        assert result.error.code == ErrorCode.PERMISSION_DENIED
        assert (await repository.find_by_id(teacher.id)).role is UserRole.TEACHER

    async def test_unknown_role(self, handler, director, teacher):
        result = await handler.handle(
            ChangeUserRole(actor_id=director.id, user_id=teacher.id, role_code="janitor")
        )

        assert result.error.code == ErrorCode.INVALID_ROLE

    async def test_unknown_target(self, handler, director):
        result = await handler.handle(
            ChangeUserRole(actor_id=director.id, user_id=uuid4(), role_code="teacher")
        )

        assert result.error.code == ErrorCode.USER_NOT_FOUND


@pytest.mark.unit
class TestSetUserActive:
    @pytest.fixture
    def handler(self, repository, clock, event_bus, logger):
        return SetUserActiveHandler(repository, clock, event_bus, logger)

    async def test_deactivate_ends_sessions(self, handler, repository, director, teacher):
        result = await handler.handle(
            SetUserActive(actor_id=director.id, user_id=teacher.id, active=False)
        )

        assert isinstance(result, Success)
        stored = await repository.find_by_id(teacher.id)
        assert not stored.is_active
        assert stored.active_sessions == ()
        assert stored.refresh_token is None

    async def test_activating_active_user_is_no_op(
        self, handler, director, teacher, event_bus
    ):
        result = await handler.handle(
            SetUserActive(actor_id=director.id, user_id=teacher.id, active=True)
        )

        assert isinstance(result, Success)
        event_bus.publish.assert_not_awaited()

    async def test_peer_cannot_deactivate(
        self, handler, repository, user_factory, teacher
    ):
        peer = user_factory(
            email="peer@school.edu", role=UserRole.TEACHER, school_id=SCHOOL_ID
        )
        await repository.save(peer)

        result = await handler.handle(
            SetUserActive(actor_id=peer.id, user_id=teacher.id, active=False)
        )

        assert result.error.code == ErrorCode.PERMISSION_DENIED
        assert (await repository.find_by_id(teacher.id)).is_active


@pytest.mark.unit
class TestUnlockUser:
    @pytest.fixture
    def handler(self, repository, clock, event_bus, logger):
        return UnlockUserHandler(repository, clock, event_bus, logger)

    async def test_clears_lock(self, handler, repository, user_factory, director, now):
        locked = user_factory(
            email="locked@school.edu",
            school_id=SCHOOL_ID,
            failed_login_count=5,
            locked_until=now + timedelta(minutes=30),
        )
        await repository.save(locked)

        result = await handler.handle(UnlockUser(actor_id=director.id, user_id=locked.id))

        assert isinstance(result, Success)
        stored = await repository.find_by_id(locked.id)
        assert stored.failed_login_count == 0
        assert stored.locked_until is None

    async def test_not_locked_is_no_op(self, handler, director, teacher, event_bus):
        result = await handler.handle(UnlockUser(actor_id=director.id, user_id=teacher.id))

        assert isinstance(result, Success)
        event_bus.publish.assert_not_awaited()

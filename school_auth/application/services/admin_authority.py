"""Authority check for administrative commands."""

from school_auth.application.errors import permission_denied
from school_auth.core.errors import AuthorizationError
from school_auth.domain.entities.user import User
from school_auth.domain.enums.user_role import UserRole


def check_authority(
    actor: User | None, target: User, *roles: UserRole
) -> AuthorizationError | None:
    """Return an error unless ``actor`` may administer ``target``.

    The actor must be active, must not be the target, must be able to
    access the target's school, and its role must be able to manage the
    target's current role plus every role in ``roles``.
    """
    if actor is None or not actor.is_active or actor.id == target.id:
        return permission_denied("users.manage")
    if not actor.can_access_school(target.school_id):
        return permission_denied("schools.access")
    if not all(actor.role.can_manage(role) for role in (target.role, *roles)):
        return permission_denied("users.manage")
    return None

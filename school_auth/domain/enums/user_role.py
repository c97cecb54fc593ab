"""School user roles and their authority hierarchy.

Every role carries a numeric level. Higher levels have authority over lower
ones. SUPER_ADMIN is the single top-privilege role: it is the only role not
confined to one school.

Role Hierarchy (level):
    SUPER_ADMIN (1000) > ADMIN (900) > DIRECTOR (800) > COORDINATOR (700)
    > SECRETARY (600) > FINANCIAL_MANAGER (500) > TEACHER (400)
    > PARENT (300) > STUDENT (200) > GUEST (100)

Usage:
    from school_auth.domain.enums import UserRole

    role = UserRole.from_code("teacher")
    if actor.role.can_manage(role):
        ...
"""

from enum import Enum


_LEVELS: dict[str, int] = {
    "super_admin": 1000,
    "admin": 900,
    "director": 800,
    "coordinator": 700,
    "secretary": 600,
    "financial_manager": 500,
    "teacher": 400,
    "parent": 300,
    "student": 200,
    "guest": 100,
}

_DISPLAY_NAMES: dict[str, str] = {
    "super_admin": "Super Administrator",
    "admin": "Administrator",
    "director": "Director",
    "coordinator": "Coordinator",
    "secretary": "Secretary",
    "financial_manager": "Financial Manager",
    "teacher": "Teacher",
    "parent": "Parent",
    "student": "Student",
    "guest": "Guest",
}

# Static projection for login responses. Not evaluated by this package.
_PERMISSIONS: dict[str, tuple[str, ...]] = {
    "super_admin": ("users.manage", "schools.manage", "system.admin"),
    "admin": ("users.manage", "schools.read"),
    "director": ("users.read", "academic.manage", "reports.view"),
    "teacher": ("students.read", "grades.manage", "attendance.manage"),
    "parent": ("children.read", "grades.read", "attendance.read"),
}


class UserRole(str, Enum):
    """User role code (string enum for easy serialization)."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    DIRECTOR = "director"
    COORDINATOR = "coordinator"
    SECRETARY = "secretary"
    FINANCIAL_MANAGER = "financial_manager"
    TEACHER = "teacher"
    PARENT = "parent"
    STUDENT = "student"
    GUEST = "guest"

    @classmethod
    def from_code(cls, code: str) -> "UserRole":
        """Look up a role by code (case-insensitive).

        Raises:
            ValueError: If the code is unknown.
        """
        try:
            return cls(code.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown role code: {code!r}") from None

    @property
    def level(self) -> int:
        """Numeric authority level."""
        return _LEVELS[self.value]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self.value]

    @property
    def is_top_privilege(self) -> bool:
        """True for the role that may act on any school."""
        return self is UserRole.SUPER_ADMIN

    @property
    def permissions(self) -> tuple[str, ...]:
        """Permission names projected into login responses."""
        return _PERMISSIONS.get(self.value, ())

    def has_authority_over(self, other: "UserRole") -> bool:
        """Strictly higher level than ``other``."""
        return self.level > other.level

    def can_manage(self, target: "UserRole") -> bool:
        """Whether a user with this role may assign or administer ``target``.

        Rules:
            - SUPER_ADMIN manages every role.
            - ADMIN manages every role except SUPER_ADMIN.
            - DIRECTOR manages COORDINATOR and below.
            - COORDINATOR manages TEACHER and below.
            - SECRETARY manages PARENT and STUDENT only.
            - Everyone else manages nothing.
        """
        match self:
            case UserRole.SUPER_ADMIN:
                return True
            case UserRole.ADMIN:
                return target is not UserRole.SUPER_ADMIN
            case UserRole.DIRECTOR:
                return target.level <= UserRole.COORDINATOR.level
            case UserRole.COORDINATOR:
                return target.level <= UserRole.TEACHER.level
            case UserRole.SECRETARY:
                return target in (UserRole.PARENT, UserRole.STUDENT)
            case _:
                return False

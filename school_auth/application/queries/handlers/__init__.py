"""Query handlers."""

from school_auth.application.queries.handlers.check_email_available_handler import (
    CheckEmailAvailableHandler,
)
from school_auth.application.queries.handlers.get_current_user_handler import (
    GetCurrentUserHandler,
)
from school_auth.application.queries.handlers.list_sessions_handler import (
    ListSessionsHandler,
)
from school_auth.application.queries.handlers.validate_password_strength_handler import (
    ValidatePasswordStrengthHandler,
)

__all__ = [
    "CheckEmailAvailableHandler",
    "GetCurrentUserHandler",
    "ListSessionsHandler",
    "ValidatePasswordStrengthHandler",
]

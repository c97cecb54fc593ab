"""Command handlers."""

from school_auth.application.commands.handlers.change_password_handler import (
    ChangePasswordHandler,
)
from school_auth.application.commands.handlers.change_user_role_handler import (
    ChangeUserRoleHandler,
)
from school_auth.application.commands.handlers.confirm_email_handler import (
    ConfirmEmailHandler,
)
from school_auth.application.commands.handlers.forgot_password_handler import (
    ForgotPasswordHandler,
)
from school_auth.application.commands.handlers.login_handler import LoginHandler
from school_auth.application.commands.handlers.logout_handler import LogoutHandler
from school_auth.application.commands.handlers.refresh_tokens_handler import (
    RefreshTokensHandler,
)
from school_auth.application.commands.handlers.register_user_handler import (
    RegisterUserHandler,
)
from school_auth.application.commands.handlers.resend_email_confirmation_handler import (
    ResendEmailConfirmationHandler,
)
from school_auth.application.commands.handlers.reset_password_handler import (
    ResetPasswordHandler,
)
from school_auth.application.commands.handlers.set_user_active_handler import (
    SetUserActiveHandler,
)
from school_auth.application.commands.handlers.unlock_user_handler import (
    UnlockUserHandler,
)

__all__ = [
    "ChangePasswordHandler",
    "ChangeUserRoleHandler",
    "ConfirmEmailHandler",
    "ForgotPasswordHandler",
    "LoginHandler",
    "LogoutHandler",
    "RefreshTokensHandler",
    "RegisterUserHandler",
    "ResendEmailConfirmationHandler",
    "ResetPasswordHandler",
    "SetUserActiveHandler",
    "UnlockUserHandler",
]

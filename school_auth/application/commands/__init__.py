"""Commands (CQRS write side)."""

from school_auth.application.commands.auth_commands import (
    ChangePassword,
    ConfirmEmail,
    ForgotPassword,
    Login,
    Logout,
    RefreshTokens,
    RegisterUser,
    ResendEmailConfirmation,
    ResetPassword,
)
from school_auth.application.commands.user_admin_commands import (
    ChangeUserRole,
    SetUserActive,
    UnlockUser,
)

__all__ = [
    "ChangePassword",
    "ChangeUserRole",
    "ConfirmEmail",
    "ForgotPassword",
    "Login",
    "Logout",
    "RefreshTokens",
    "RegisterUser",
    "ResendEmailConfirmation",
    "ResetPassword",
    "SetUserActive",
    "UnlockUser",
]

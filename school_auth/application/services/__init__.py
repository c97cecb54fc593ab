"""Application services shared by command handlers."""

from school_auth.application.services.guarded_rate_limiter import GuardedRateLimiter
from school_auth.application.services.new_password import check_new_password
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)

__all__ = ["GuardedRateLimiter", "Mutation", "UserUnitOfWork", "check_new_password"]

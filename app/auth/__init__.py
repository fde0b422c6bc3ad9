# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Session-based authentication with a pluggable identity strategy.
#
# Usage:
#   from app.auth import initialise, get_current_user, AuthUser
#
#   strategy = initialise(database)
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, LoginRequest
from app.auth.strategy import IdentityStrategy, SupabasePasswordStrategy
from lib.database import Database


def initialise(database: Database) -> IdentityStrategy:
    """Build the default strategy for this deployment."""
    return SupabasePasswordStrategy(database)


__all__ = [
    "initialise",
    "get_current_user",
    "AuthUser",
    "LoginRequest",
    "IdentityStrategy",
    "SupabasePasswordStrategy",
]

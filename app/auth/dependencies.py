# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# The authentication stage has already resolved the session identity into
# request.state.user; these dependencies only read it.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from fastapi import Request

from app.auth.models import AuthUser
from app.auth.strategy import IdentityStrategy
from app.exceptions import UnauthorizedError


def get_current_user(request: Request) -> AuthUser:
    """
    Require a logged-in user.

    Raises:
        UnauthorizedError: 401 if the session carries no identity
    """
    user = getattr(request.state, "user", None)
    if user is None:
        raise UnauthorizedError()
    return user


def get_strategy(request: Request) -> IdentityStrategy:
    """Identity strategy from the application context."""
    return request.app.state.context.strategy

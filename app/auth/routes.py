# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Login binds the verified identity to the session, logout destroys the
# session. Mounted under /v1/auth behind the disable-cache stage.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Request

from app.auth.dependencies import get_current_user, get_strategy
from app.auth.models import AuthUser, LoginRequest, LogoutResponse
from app.auth.strategy import IdentityStrategy
from app.exceptions import InvalidCredentialsError
from app.middleware.session import SESSION_USER_KEY

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=AuthUser)
def login(
    credentials: LoginRequest,
    request: Request,
    strategy: IdentityStrategy = Depends(get_strategy),
) -> AuthUser:
    """
    Log in with e-mail and password.

    On success the session moves to a new id, the session cookie is issued
    and the user profile returned.

    Raises:
        401: If the credentials are wrong
    """
    user = strategy.verify_credentials(credentials.email, credentials.password)
    if user is None:
        raise InvalidCredentialsError()

    session = request.state.session
    session.regenerate()
    session[SESSION_USER_KEY] = strategy.serialize_identity(user)
    request.state.user = user
    logger.info(f"User logged in: {user.id}")
    return user


@router.post("/logout", response_model=LogoutResponse)
async def logout(request: Request) -> LogoutResponse:
    """
    Destroy the current session.

    Succeeds for anonymous requests too.
    """
    request.state.session.destroy()
    request.state.user = None
    return LogoutResponse()


@router.get("/me", response_model=AuthUser)
async def get_current_user_info(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    return user

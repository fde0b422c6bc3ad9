# =============================================================================
# app/middleware/authentication.py - Authentication Stage
# =============================================================================
# Resolves the identity reference stored in the session into
# request.state.user. If the lookup fails the request continues anonymously;
# a reference to a user that no longer exists is removed from the session.
# =============================================================================

import logging

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.auth.strategy import IdentityStrategy
from app.middleware.session import SESSION_USER_KEY

logger = logging.getLogger(__name__)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, strategy: IdentityStrategy):
        super().__init__(app)
        self.strategy = strategy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.user = None

        session = getattr(request.state, "session", None)
        reference = session.get(SESSION_USER_KEY) if session is not None else None

        if reference:
            try:
                user = await run_in_threadpool(self.strategy.deserialize_identity, reference)
            except Exception as e:
                logger.warning(f"Could not deserialize identity {reference}: {e}")
            else:
                if user is None:
                    logger.info(f"Identity {reference} no longer exists, dropping it from the session")
                    del session[SESSION_USER_KEY]
                request.state.user = user

        return await call_next(request)

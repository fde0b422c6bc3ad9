# =============================================================================
# app/middleware/ - Request Pipeline Stages
# =============================================================================
# One module per stage:
# - session.py: signed cookie -> server-side session
# - security.py: strip fingerprinting headers
# - access_log.py: combined-format access log, daily files
# - authentication.py: session identity -> request.state.user
# - cache.py: no-cache headers for selected prefixes
#
# The order they run in is defined in app/pipeline.py. The error stage lives
# with the rest of the error handling in app/exceptions.py.
# =============================================================================

from app.middleware.access_log import AccessLogMiddleware, build_access_logger
from app.middleware.authentication import AuthenticationMiddleware
from app.middleware.cache import NO_CACHE_HEADERS, DisableCacheMiddleware
from app.middleware.security import SecurityHeadersMiddleware
from app.middleware.session import SESSION_USER_KEY, Session, SessionMiddleware

__all__ = [
    "AccessLogMiddleware",
    "build_access_logger",
    "AuthenticationMiddleware",
    "NO_CACHE_HEADERS",
    "DisableCacheMiddleware",
    "SecurityHeadersMiddleware",
    "SESSION_USER_KEY",
    "Session",
    "SessionMiddleware",
]

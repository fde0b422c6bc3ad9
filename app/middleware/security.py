# =============================================================================
# app/middleware/security.py - Security Headers Stage
# =============================================================================
# Strips headers that fingerprint the server stack. Reverse-proxy trust is
# handled by uvicorn's ProxyHeadersMiddleware, installed right after this
# stage (see app/pipeline.py).
# =============================================================================

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

FINGERPRINT_HEADERS = ("server", "x-powered-by")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for header in FINGERPRINT_HEADERS:
            if header in response.headers:
                del response.headers[header]
        return response

# =============================================================================
# app/middleware/cache.py - Disable-Cache Stage
# =============================================================================
# Marks responses under the given URL prefixes as uncacheable. Runs outside
# the error stage, so error envelopes get the headers too.
# =============================================================================

from collections.abc import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

NO_CACHE_HEADERS = {
    "Cache-Control": "private, no-cache, no-store, must-revalidate",
    "Expires": "-1",
    "Pragma": "no-cache",
}


def disable_cache(response: Response) -> Response:
    """Set the no-cache headers on a response."""
    response.headers.update(NO_CACHE_HEADERS)
    return response


def matches_prefix(path: str, prefix: str) -> bool:
    """Prefix match on whole path segments: /v1/food matches /v1/food/1, not /v1/foodie."""
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


class DisableCacheMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, prefixes: Iterable[str]):
        super().__init__(app)
        self.prefixes = tuple(prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        if any(matches_prefix(request.url.path, prefix) for prefix in self.prefixes):
            disable_cache(response)
        return response

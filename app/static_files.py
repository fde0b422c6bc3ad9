# =============================================================================
# app/static_files.py - Static Catch-All
# =============================================================================
# Mounted at / as the last entry of the route table. A miss is the fallback
# 404 of the whole application, whatever the method.
# =============================================================================

from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from app.exceptions import ResourceNotFoundError


class StaticAssets(StaticFiles):
    """StaticFiles that reports every miss as ResourceNotFoundError."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        if scope["method"] not in ("GET", "HEAD"):
            raise ResourceNotFoundError()
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code == 404:
                raise ResourceNotFoundError() from exc
            raise

# =============================================================================
# app/exceptions.py - Error Envelope and Exception Handlers
# =============================================================================
# Centralized error formatting for the API. Every failure, whichever stage
# raised it, leaves the server as:
#
#   HTTP <status>
#   {"error": "<message>"}
#
# Stages and routers raise; only the handlers in this module build failure
# responses.
# =============================================================================

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)

DEFAULT_STATUS = 500
DEFAULT_MESSAGE = "Internal Server Error: Unhandled use case"
NOT_FOUND_MESSAGE = "Resource not found"


class AppError(Exception):
    """
    Base exception for the API.

    Carries an optional HTTP status and message. Missing values fall back to
    500 and the generic message when the error is rendered.
    """

    status_code: int | None = None
    message: str | None = None

    def __init__(self, message: str | None = None, status_code: int | None = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message or DEFAULT_MESSAGE)


# =============================================================================
# Client Errors
# =============================================================================

class ResourceNotFoundError(AppError):
    """Raised when no route or static file matches the request."""

    status_code = 404
    message = NOT_FOUND_MESSAGE


class DocumentNotFoundError(AppError):
    """Raised when a food or recipe document doesn't exist."""

    status_code = 404

    def __init__(self, kind: str, document_id: str):
        super().__init__(f"{kind} not found: {document_id}")


class UnauthorizedError(AppError):
    """Raised when a route needs a logged-in user."""

    status_code = 401
    message = "Authentication required"


class InvalidCredentialsError(AppError):
    status_code = 401
    message = "Invalid email or password"


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(AppError):
    """Raised when uploaded file type is not allowed."""

    status_code = 400

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            f"Invalid file type: {filename} (allowed: {', '.join(allowed)})"
        )


class FileTooLargeError(AppError):
    """Raised when uploaded file exceeds size limit."""

    status_code = 413

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)")


class EmptyFileError(AppError):
    status_code = 400

    def __init__(self, filename: str):
        super().__init__(f"File is empty: {filename}")


# =============================================================================
# Server Errors
# =============================================================================

class DatabaseError(AppError):
    """Raised when a Supabase operation fails."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(f"Database error: {message}")


# =============================================================================
# Rendering
# =============================================================================

def error_response(status_code: int | None = None, message: str | None = None) -> JSONResponse:
    """
    Build the error envelope.

    Args:
        status_code: HTTP status, defaults to 500
        message: Human-readable message, defaults to the generic message

    Returns:
        JSONResponse with body {"error": message}
    """
    return JSONResponse(
        status_code=status_code or DEFAULT_STATUS,
        content={"error": message or DEFAULT_MESSAGE},
    )


def render_error(exc: BaseException) -> JSONResponse:
    """Render any exception as the error envelope."""
    if isinstance(exc, AppError):
        return error_response(exc.status_code, exc.message)
    if isinstance(exc, StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else None
        if exc.status_code == 404 and detail in (None, HTTPStatus.NOT_FOUND.phrase):
            detail = NOT_FOUND_MESSAGE
        return error_response(exc.status_code, detail)
    return error_response()


# =============================================================================
# Exception Handlers
# =============================================================================

async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    if (exc.status_code or DEFAULT_STATUS) >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return render_error(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    response = render_error(exc)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Reports the first problem as "<location>: <message>".
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Validation error"
    return error_response(422, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error: {exc}")
    return error_response()


class ErrorStageMiddleware(BaseHTTPMiddleware):
    """
    Innermost pipeline stage.

    Anything the routers raise that is not an HTTP or application error lands
    here and becomes a 500 envelope, so the outer stages (disable-cache,
    access log, session) still see a regular response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_exception_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error envelope handlers to the application."""
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

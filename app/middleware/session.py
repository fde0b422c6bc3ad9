# =============================================================================
# app/middleware/session.py - Session Stage
# =============================================================================
# Resolves the session cookie into request.state.session and writes the
# session back after the response is produced.
#
# Cookie value: "s:<session id>.<HMAC-SHA256 signature>". A cookie with a bad
# signature, or pointing at an expired/missing record, starts a new session.
#
# Write rules:
# - new session, nothing stored      -> nothing saved, no cookie
# - session modified                 -> saved, cookie (re)issued
# - existing session, not modified   -> expiry pushed forward
# - session destroyed                -> record deleted, cookie cleared
# - session regenerated (login)      -> old record deleted, new id issued
#
# Store failures never escape this stage: a failed load starts an anonymous
# session, a failed touch is logged, and a failed save or delete replaces the
# response with the error envelope (keeping its caching headers).
# =============================================================================

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
from collections.abc import Iterator, MutableMapping
from datetime import datetime, timedelta
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.exceptions import AppError, render_error
from lib.session_store import SessionStore, utcnow

logger = logging.getLogger(__name__)

# Key under which the identity reference lives
SESSION_USER_KEY = "user"

SIGNATURE_PREFIX = "s:"


def generate_session_id() -> str:
    return secrets.token_urlsafe(24)


def sign_session_id(session_id: str, secret: bytes) -> str:
    digest = hmac.new(secret, session_id.encode(), hashlib.sha256).digest()
    signature = base64.urlsafe_b64encode(digest).rstrip(b"=").decode()
    return f"{SIGNATURE_PREFIX}{session_id}.{signature}"


def unsign_session_id(value: str | None, secret: bytes) -> str | None:
    """Return the session id if the signature checks out, None otherwise."""
    if not value or not value.startswith(SIGNATURE_PREFIX):
        return None
    session_id, _, signature = value[len(SIGNATURE_PREFIX):].rpartition(".")
    if not session_id or not signature:
        return None
    if hmac.compare_digest(sign_session_id(session_id, secret), value):
        return session_id
    return None


class Session(MutableMapping):
    """
    Dict-like session data with change tracking.

    Attributes:
        session_id: Id of the stored record, None for a new session
        previous_id: Id given up by regenerate(), deleted on commit
        modified: Set by any write
        destroyed: Set by destroy()
    """

    def __init__(self, session_id: str | None = None, data: dict[str, Any] | None = None):
        self.session_id = session_id
        self.previous_id: str | None = None
        self._data: dict[str, Any] = dict(data or {})
        self.modified = False
        self.destroyed = False

    @property
    def is_new(self) -> bool:
        return self.session_id is None

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.modified = True

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self.modified = True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def regenerate(self) -> None:
        """Keep the data but move it to a new session id."""
        if self.session_id:
            self.previous_id = self.session_id
        self.session_id = None
        self.modified = True

    def destroy(self) -> None:
        self._data.clear()
        self.destroyed = True


class SessionMiddleware(BaseHTTPMiddleware):
    """Server-side sessions referenced by a signed cookie."""

    def __init__(
        self,
        app: ASGIApp,
        store: SessionStore,
        secret: bytes,
        cookie_name: str = "sessionID",
        max_age: int = 7200,
        secure: bool = True,
    ):
        super().__init__(app)
        self.store = store
        self.secret = secret
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session = await self._load(request)
        request.state.session = session

        response = await call_next(request)

        try:
            await self._commit(session, response)
        except AppError as exc:
            logger.error(f"Could not save session: {exc}")
            return self._error_response(exc, response)
        return response

    async def _load(self, request: Request) -> Session:
        session_id = unsign_session_id(request.cookies.get(self.cookie_name), self.secret)
        if session_id is None:
            return Session()

        try:
            data = await run_in_threadpool(self.store.get, session_id)
        except AppError as exc:
            logger.error(f"Could not load session, continuing anonymously: {exc}")
            return Session()
        if data is None:
            return Session()
        return Session(session_id, data)

    async def _commit(self, session: Session, response: Response) -> None:
        if session.previous_id:
            await run_in_threadpool(self.store.destroy, session.previous_id)

        if session.destroyed:
            if session.session_id:
                await run_in_threadpool(self.store.destroy, session.session_id)
            response.delete_cookie(
                self.cookie_name, path="/", secure=self.secure, httponly=True
            )
            return

        if session.modified and (session.session_id or len(session)):
            session_id = session.session_id or generate_session_id()
            await run_in_threadpool(
                self.store.set, session_id, session.to_dict(), self._expires_at()
            )
            self._set_cookie(response, session_id)
        elif session.session_id:
            try:
                await run_in_threadpool(
                    self.store.touch, session.session_id, self._expires_at()
                )
            except AppError as exc:
                logger.warning(f"Could not refresh session expiry: {exc}")

    @staticmethod
    def _error_response(exc: AppError, replaced: Response) -> Response:
        response = render_error(exc)
        for header in ("cache-control", "expires", "pragma"):
            if header in replaced.headers:
                response.headers[header] = replaced.headers[header]
        return response

    def _expires_at(self) -> datetime:
        return utcnow() + timedelta(seconds=self.max_age)

    def _set_cookie(self, response: Response, session_id: str) -> None:
        response.set_cookie(
            self.cookie_name,
            sign_session_id(session_id, self.secret),
            max_age=self.max_age,
            path="/",
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )

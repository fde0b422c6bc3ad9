# =============================================================================
# lib/session_store.py - Server-Side Session Stores
# =============================================================================
# A session record is {sid, data, expires_at}. Stores are synchronous; the
# session middleware calls them through the threadpool.
#
# - SupabaseSessionStore: persistent, one row per session
# - MemorySessionStore: process-local dict, used under the test configuration
#
# Records nobody presents again are removed by purge_expired(), run
# periodically from the application lifespan.
# =============================================================================

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from app.exceptions import DatabaseError
from lib.database import Database

logger = logging.getLogger(__name__)

_TIMESTAMP = TypeAdapter(datetime)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a timestamptz value as returned by PostgREST.

    Accepts any fraction length ("2026-10-19T20:45:00.12345+00:00") and a
    trailing "Z". Naive values are taken as UTC.
    """
    parsed = _TIMESTAMP.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class SessionStore(ABC):
    """Storage backend for session records."""

    persistent: bool = False

    @abstractmethod
    def get(self, session_id: str) -> dict[str, Any] | None:
        """Return the session data, or None if missing or expired."""

    @abstractmethod
    def set(self, session_id: str, data: dict[str, Any], expires_at: datetime) -> None:
        """Create or replace a session record."""

    @abstractmethod
    def touch(self, session_id: str, expires_at: datetime) -> None:
        """Push the expiry of an existing record forward."""

    @abstractmethod
    def destroy(self, session_id: str) -> None:
        """Delete a session record. Missing records are ignored."""

    @abstractmethod
    def purge_expired(self) -> None:
        """Delete every record whose expiry has passed."""


class MemorySessionStore(SessionStore):
    """Non-persistent store. Sessions vanish with the process."""

    def __init__(self):
        self._records: dict[str, tuple[dict[str, Any], datetime]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                return None
            data, expires_at = record
            if expires_at <= utcnow():
                del self._records[session_id]
                return None
            return dict(data)

    def set(self, session_id: str, data: dict[str, Any], expires_at: datetime) -> None:
        with self._lock:
            self._records[session_id] = (dict(data), expires_at)

    def touch(self, session_id: str, expires_at: datetime) -> None:
        with self._lock:
            if session_id in self._records:
                data, _ = self._records[session_id]
                self._records[session_id] = (data, expires_at)

    def destroy(self, session_id: str) -> None:
        with self._lock:
            self._records.pop(session_id, None)

    def purge_expired(self) -> None:
        now = utcnow()
        with self._lock:
            expired = [sid for sid, (_, expires_at) in self._records.items() if expires_at <= now]
            for session_id in expired:
                del self._records[session_id]

    def __len__(self) -> int:
        return len(self._records)


class SupabaseSessionStore(SessionStore):
    """
    Sessions persisted in a Supabase table.

    Expected columns: sid (text, primary key), data (jsonb),
    expires_at (timestamptz).
    """

    persistent = True

    def __init__(self, database: Database, table: str = "user_sessions"):
        self.database = database
        self.table = table

    def get(self, session_id: str) -> dict[str, Any] | None:
        try:
            response = (
                self.database.table(self.table)
                .select("sid, data, expires_at")
                .eq("sid", session_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to load session: {e}") from e

        rows = response.data or []
        if not rows:
            return None

        row = rows[0]
        try:
            expires_at = parse_timestamp(row["expires_at"])
        except (KeyError, ValidationError) as e:
            logger.warning(f"Session {session_id[:8]}... has an unreadable expiry: {e}")
            return None
        if expires_at <= utcnow():
            logger.debug(f"Session {session_id[:8]}... expired")
            self.destroy(session_id)
            return None
        return row.get("data") or {}

    def set(self, session_id: str, data: dict[str, Any], expires_at: datetime) -> None:
        try:
            (
                self.database.table(self.table)
                .upsert({
                    "sid": session_id,
                    "data": data,
                    "expires_at": expires_at.isoformat(),
                })
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to save session: {e}") from e

    def touch(self, session_id: str, expires_at: datetime) -> None:
        try:
            (
                self.database.table(self.table)
                .update({"expires_at": expires_at.isoformat()})
                .eq("sid", session_id)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to refresh session: {e}") from e

    def destroy(self, session_id: str) -> None:
        try:
            self.database.table(self.table).delete().eq("sid", session_id).execute()
        except Exception as e:
            raise DatabaseError(f"Failed to destroy session: {e}") from e

    def purge_expired(self) -> None:
        try:
            (
                self.database.table(self.table)
                .delete()
                .lt("expires_at", utcnow().isoformat())
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to purge sessions: {e}") from e

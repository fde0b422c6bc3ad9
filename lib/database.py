# =============================================================================
# lib/database.py - Supabase Database Handle
# =============================================================================
# Wraps the Supabase client used by the session store, the identity strategy
# and the food/recipe services.
#
# One Database instance lives on the application context; the client is
# created lazily and reused for every request.
#
# Usage:
#   database = Database(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
#   database.connect()              # create client + ping, raises on failure
#   database.table("food").select("*").execute()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, create_client

from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class Database:
    """
    Lazily-connected Supabase client.

    Attributes:
        url: Supabase project URL
        connected: True once connect() has pinged the database successfully
    """

    def __init__(self, url: str, key: str, ping_table: str = "user_sessions"):
        self.url = url
        self._key = key
        self._ping_table = ping_table
        self._client: Client | None = None
        self.connected = False

    def get_client(self) -> Client:
        """
        Get or create the Supabase client.

        Uses the service_role key which bypasses Row Level Security (RLS).

        Raises:
            DatabaseError: If client creation fails
        """
        if self._client is None:
            try:
                self._client = create_client(self.url, self._key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise DatabaseError(f"Failed to create Supabase client: {e}") from e
        return self._client

    def table(self, name: str) -> Any:
        """Start a query on a table."""
        return self.get_client().table(name)

    def ping(self) -> None:
        """
        Run a trivial query to prove the database is reachable.

        Raises:
            DatabaseError: If the query fails
        """
        try:
            self.table(self._ping_table).select("*").limit(1).execute()
        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(f"Ping failed: {e}") from e

    def connect(self) -> None:
        """Create the client and verify connectivity."""
        self.ping()
        self.connected = True
        logger.info("Database connected")


def is_no_rows_error(error: Exception) -> bool:
    """Check whether a PostgREST error means 'no matching row'."""
    return NO_ROWS_CODE in str(error)

# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable building blocks:
# - database.py: lazily-connected Supabase handle
# - session_store.py: memory and Supabase session stores
# =============================================================================

from lib.database import Database, is_no_rows_error
from lib.session_store import MemorySessionStore, SessionStore, SupabaseSessionStore

__all__ = [
    "Database",
    "is_no_rows_error",
    "MemorySessionStore",
    "SessionStore",
    "SupabaseSessionStore",
]

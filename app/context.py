# =============================================================================
# app/context.py - Application Context
# =============================================================================
# Everything a running application shares between requests, built once in
# create_app() and stored on app.state.context.
# =============================================================================

import logging
import secrets
from dataclasses import dataclass, field
from typing import Optional

from app import auth
from app.auth.strategy import IdentityStrategy
from app.config import Settings
from lib.database import Database
from lib.session_store import MemorySessionStore, SessionStore, SupabaseSessionStore

logger = logging.getLogger(__name__)

SESSION_SECRET_BYTES = 32


@dataclass
class AppContext:
    """
    Shared application state.

    Attributes:
        settings: Validated configuration
        database: Supabase handle (connected in the background at startup)
        strategy: Identity strategy used by login and the authentication stage
        session_store: Memory store under test, Supabase store otherwise
        session_secret: Per-process key signing session cookies
    """
    settings: Settings
    database: Database
    strategy: IdentityStrategy
    session_store: SessionStore
    session_secret: bytes = field(default_factory=lambda: secrets.token_bytes(SESSION_SECRET_BYTES), repr=False)


def build_context(
    settings: Settings,
    database: Optional[Database] = None,
    strategy: Optional[IdentityStrategy] = None,
) -> AppContext:
    """
    Build the application context.

    Args:
        settings: Application settings
        database: Override the Supabase handle (tests)
        strategy: Override the identity strategy (tests)
    """
    if database is None:
        database = Database(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_KEY,
            ping_table=settings.SESSION_TABLE,
        )

    if strategy is None:
        strategy = auth.initialise(database)

    if settings.is_test:
        session_store: SessionStore = MemorySessionStore()
    else:
        session_store = SupabaseSessionStore(database, table=settings.SESSION_TABLE)

    logger.debug(
        f"Context built: store={type(session_store).__name__}, strategy={strategy.name}"
    )
    return AppContext(
        settings=settings,
        database=database,
        strategy=strategy,
        session_store=session_store,
    )

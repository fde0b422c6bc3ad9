# =============================================================================
# app/auth/strategy.py - Identity Strategies
# =============================================================================
# An identity strategy does three things:
# - verify_credentials: e-mail/password -> user (or None)
# - serialize_identity: user -> reference stored in the session
# - deserialize_identity: reference -> user (or None)
#
# The session and authentication stages only know this interface.
# =============================================================================

import logging
from abc import ABC, abstractmethod
from typing import Optional

from app.auth.models import AuthUser
from app.exceptions import DatabaseError
from lib.database import Database, is_no_rows_error

logger = logging.getLogger(__name__)


class IdentityStrategy(ABC):
    """Pluggable credential verification and session identity round-trip."""

    name: str = "identity"

    @abstractmethod
    def verify_credentials(self, email: str, password: str) -> Optional[AuthUser]:
        """Return the user for valid credentials, None otherwise."""

    def serialize_identity(self, user: AuthUser) -> str:
        """Reduce a user to the reference kept in the session."""
        return str(user.id)

    @abstractmethod
    def deserialize_identity(self, reference: str) -> Optional[AuthUser]:
        """Load the user behind a session reference, None if it is gone."""


class SupabasePasswordStrategy(IdentityStrategy):
    """
    E-mail/password login against Supabase Auth.

    Profiles are read from the public.users table. A user known to Supabase
    Auth but without a profile row still logs in with id and email only.
    """

    name = "supabase-password"

    def __init__(self, database: Database, users_table: str = "users"):
        self.database = database
        self.users_table = users_table

    def verify_credentials(self, email: str, password: str) -> Optional[AuthUser]:
        client = self.database.get_client()

        try:
            response = client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            # gotrue raises AuthApiError for wrong credentials
            logger.info(f"Login rejected for {email}: {e}")
            return None

        auth_user = getattr(response, "user", None)
        if auth_user is None:
            return None

        profile = self._fetch_profile(str(auth_user.id))
        if profile is not None:
            return profile
        return AuthUser(id=str(auth_user.id), email=auth_user.email)

    def deserialize_identity(self, reference: str) -> Optional[AuthUser]:
        return self._fetch_profile(reference)

    def _fetch_profile(self, user_id: str) -> Optional[AuthUser]:
        try:
            response = (
                self.database.table(self.users_table)
                .select("id, email, display_name, created_at")
                .eq("id", user_id)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise DatabaseError(f"Failed to fetch user profile: {e}") from e

        if not response.data:
            return None
        return AuthUser(**response.data)

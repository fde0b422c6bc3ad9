# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Identity attached to a request once the session has been resolved.

    This is the profile row from the public.users table, or the minimal
    id/email pair returned by Supabase Auth if the profile row is missing.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    """
    Credentials posted to /auth/login.

    Example:
        {"email": "cook@example.com", "password": "hunter22"}
    """
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=256)


class LogoutResponse(BaseModel):
    success: bool = True

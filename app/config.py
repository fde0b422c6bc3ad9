# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# ENVIRONMENT drives the pipeline:
# - development: session cookie is sent over plain http
# - test: in-memory session store, no access log
# - staging / production: secure cookies, persistent sessions, access log
# =============================================================================

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance, or passed
    explicitly to `create_app()`.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    DATABASE_FAIL_FAST: bool = Field(
        default=False,
        description="Abort startup when the database cannot be reached"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "test", "staging", "production"] = Field(
        default="production",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    API_VERSION_PREFIX: str = Field(
        default="/v1",
        pattern=r"^/[A-Za-z0-9_-]+$",
        description="URL prefix every versioned route is mounted under"
    )

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    SESSION_COOKIE_NAME: str = Field(
        default="sessionID",
        description="Session cookie name"
    )

    SESSION_MAX_AGE_MS: int = Field(
        default=1000 * 60 * 60 * 2,
        ge=1000,
        description="Session lifetime and inactivity window in milliseconds"
    )

    SESSION_TABLE: str = Field(
        default="user_sessions",
        description="Supabase table holding session records"
    )

    SESSION_PURGE_INTERVAL_S: int = Field(
        default=900,
        ge=1,
        description="Seconds between sweeps that delete expired session records"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    FORWARDED_ALLOW_IPS: str = Field(
        default="*",
        description="Reverse proxies trusted for X-Forwarded-* headers (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Filesystem
    # -------------------------------------------------------------------------

    STATIC_DIR: Path = Field(
        default=PROJECT_ROOT / "static",
        description="Directory served at / and used for uploads"
    )

    LOG_DIR: Path = Field(
        default=PROJECT_ROOT / "log",
        description="Directory for daily access log files"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum file upload size in MB"
    )

    ALLOWED_EXTENSIONS: str = Field(
        default=".png,.jpg,.jpeg,.gif,.webp",
        description="Allowed file extensions (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def allowed_extensions_list(self) -> list[str]:
        """
        Parse ALLOWED_EXTENSIONS string into a list.

        Example: ".png, .JPG" -> [".png", ".jpg"]
        """
        return [ext.strip().lower() for ext in self.ALLOWED_EXTENSIONS.split(",") if ext.strip()]

    @property
    def forwarded_allow_ips_list(self) -> list[str]:
        return [ip.strip() for ip in self.FORWARDED_ALLOW_IPS.split(",") if ip.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def session_max_age_seconds(self) -> int:
        return self.SESSION_MAX_AGE_MS // 1000

    @property
    def session_cookie_secure(self) -> bool:
        """Cookies go over plain http only in development."""
        return not self.is_development

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_test(self) -> bool:
        """Check if running under the test configuration."""
        return self.ENVIRONMENT == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()

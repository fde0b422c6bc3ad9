# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Fake database (MagicMock query chains) and fake identity strategy
# - TestClient on https://testserver so Secure session cookies round-trip
# =============================================================================

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STATIC_DIR", tempfile.mkdtemp(prefix="pantry-static-"))
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="pantry-log-"))

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from fastapi.testclient import TestClient

from app.auth.models import AuthUser
from app.auth.strategy import IdentityStrategy
from app.config import Settings
from app.main import create_app
from app.middleware.access_log import ACCESS_LOGGER_NAME
from lib.database import Database

QUERY_METHODS = (
    "select", "eq", "neq", "lt", "ilike", "order", "limit", "range", "single",
    "insert", "upsert", "update", "delete",
)

COOK = AuthUser(id="user-1", email="cook@example.com", display_name="Cook")
COOK_PASSWORD = "hunter22"


# =============================================================================
# Fakes
# =============================================================================

class FakeStrategy(IdentityStrategy):
    """In-memory identity strategy."""

    name = "fake"

    def __init__(self, users: dict[str, tuple[str, AuthUser]]):
        self.users = users
        self.fail_lookups = False

    def verify_credentials(self, email: str, password: str) -> Optional[AuthUser]:
        entry = self.users.get(email)
        if entry is None or entry[0] != password:
            return None
        return entry[1]

    def deserialize_identity(self, reference: str) -> Optional[AuthUser]:
        if self.fail_lookups:
            raise ConnectionError("users table unreachable")
        for _, user in self.users.values():
            if user.id == reference:
                return user
        return None


def make_query(data=None, error: Optional[Exception] = None) -> MagicMock:
    """
    Build a Supabase query builder mock.

    Every builder method returns the same mock, execute() returns an object
    whose .data is `data` (or raises `error`).
    """
    query = MagicMock()
    for method in QUERY_METHODS:
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data)
    return query


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def make_settings(tmp_path):
    """Factory for Settings rooted in tmp_path."""

    def _make(**overrides) -> Settings:
        values = {
            "SUPABASE_URL": "https://test-project.supabase.co",
            "SUPABASE_SERVICE_KEY": "test-service-key",
            "ENVIRONMENT": "test",
            "STATIC_DIR": tmp_path / "static",
            "LOG_DIR": tmp_path / "log",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def query() -> MagicMock:
    """Query builder returned by fake_database.table()."""
    return make_query(data=[])


@pytest.fixture
def fake_database(query) -> MagicMock:
    database = MagicMock(spec=Database)
    database.table.return_value = query
    return database


@pytest.fixture
def strategy() -> FakeStrategy:
    return FakeStrategy({COOK.email: (COOK_PASSWORD, COOK)})


@pytest.fixture
def app(settings, fake_database, strategy):
    return create_app(settings, database=fake_database, strategy=strategy)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, base_url="https://testserver")


@pytest.fixture
def logged_in_client(client) -> TestClient:
    response = client.post(
        "/v1/auth/login",
        json={"email": COOK.email, "password": COOK_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture(autouse=True)
def close_access_log_handlers():
    """Close access log files opened by production-mode apps."""
    yield
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    for handler in list(access_logger.handlers):
        access_logger.removeHandler(handler)
        handler.close()

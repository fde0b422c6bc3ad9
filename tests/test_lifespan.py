# =============================================================================
# tests/test_lifespan.py - Startup Behaviour Tests
# =============================================================================
# The database connection is attempted at startup. By default a failure is
# logged and the API keeps serving; with DATABASE_FAIL_FAST it aborts startup.
# Expired session records are swept by a background task.
# =============================================================================

import asyncio
import logging
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.exceptions import DatabaseError
from app.main import connect_database_in_background, create_app, purge_expired_sessions
from lib.session_store import MemorySessionStore, utcnow


class TestStartup:
    def test_degraded_startup_keeps_serving(self, make_settings, fake_database, strategy):
        fake_database.connect.side_effect = DatabaseError("Ping failed: connection refused")
        fake_database.ping.side_effect = DatabaseError("Ping failed: connection refused")
        app = create_app(make_settings(), database=fake_database, strategy=strategy)

        with TestClient(app, base_url="https://testserver") as client:
            assert client.get("/v1/health").status_code == 200
            ready = client.get("/v1/health/ready").json()

        assert ready["status"] == "degraded"
        assert app.state.database_task.done()

    def test_fail_fast_aborts_startup(self, make_settings, fake_database, strategy):
        fake_database.connect.side_effect = DatabaseError("Ping failed: connection refused")
        app = create_app(
            make_settings(DATABASE_FAIL_FAST=True), database=fake_database, strategy=strategy
        )

        with pytest.raises(DatabaseError):
            with TestClient(app):
                pass

    def test_fail_fast_connects_before_serving(self, make_settings, fake_database, strategy):
        app = create_app(
            make_settings(DATABASE_FAIL_FAST=True), database=fake_database, strategy=strategy
        )

        with TestClient(app, base_url="https://testserver") as client:
            fake_database.connect.assert_called_once()
            assert client.get("/v1/health").status_code == 200

        assert app.state.database_task is None


class TestBackgroundConnect:
    def test_failure_is_logged(self, fake_database, caplog):
        fake_database.connect.side_effect = DatabaseError("Ping failed: connection refused")

        with caplog.at_level(logging.ERROR, logger="app.main"):
            asyncio.run(connect_database_in_background(fake_database))

        assert "Database connection failed" in caplog.text
        fake_database.connect.assert_called_once()

    def test_success(self, fake_database):
        asyncio.run(connect_database_in_background(fake_database))

        fake_database.connect.assert_called_once()


class TestSessionPurge:
    def test_purge_removes_expired_records(self):
        store = MemorySessionStore()
        store.set("stale", {}, utcnow() - timedelta(minutes=1))

        asyncio.run(purge_expired_sessions(store))

        assert len(store) == 0

    def test_purge_failure_is_logged(self, caplog):
        store = MagicMock()
        store.purge_expired.side_effect = DatabaseError("Failed to purge sessions: refused")

        with caplog.at_level(logging.WARNING, logger="app.main"):
            asyncio.run(purge_expired_sessions(store))

        assert "Session purge failed" in caplog.text

    def test_sweep_runs_for_app_lifetime(self, app):
        with TestClient(app, base_url="https://testserver"):
            task = app.state.purge_task
            assert task is not None
            assert not task.done()

        assert task.done()

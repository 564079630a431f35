"""
Shared pytest fixtures for the auth service tests.

Every test starts in demo mode with an empty demo session store; tests that
need the MongoDB-backed path use the ``real_data`` fixture, which swaps the
collection accessors for mocks.
"""

import os
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Keep imports below from picking up a developer's .env
os.environ.pop("ENABLE_REAL_DATA", None)
os.environ["BCRYPT_ROUNDS"] = "4"

from app import app
from middleware import securityMiddleware
from services import sessionService


@pytest.fixture(autouse=True)
def demo_mode(monkeypatch):
    monkeypatch.delenv("ENABLE_REAL_DATA", raising=False)
    sessionService._demo_sessions.clear()
    securityMiddleware.rate_limit_store.clear()
    yield
    sessionService._demo_sessions.clear()
    securityMiddleware.rate_limit_store.clear()


@pytest.fixture
def make_client():
    """Return a factory for AsyncClients talking to the app in-process."""
    def _make():
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    return _make


@pytest.fixture
def real_data(monkeypatch):
    """Enable real-data mode with mocked users/sessions/audit collections."""
    monkeypatch.setenv("ENABLE_REAL_DATA", "true")
    collections = {
        "users": MagicMock(),
        "sessions": MagicMock(),
        "audit_logs": MagicMock(),
    }
    monkeypatch.setattr(sessionService, "get_users_collection", lambda: collections["users"])
    monkeypatch.setattr(sessionService, "get_sessions_collection", lambda: collections["sessions"])
    monkeypatch.setattr(sessionService, "get_audit_logs_collection", lambda: collections["audit_logs"])
    return collections


def cookie_header(token):
    return {"Cookie": f"auth-token={token}"}

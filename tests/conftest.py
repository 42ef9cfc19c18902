"""
tests/conftest.py -- Shared test fixtures for user management integration tests.

This module provides:
  - make_test_store(): isolated in-memory credential store
  - _patch_lifespan(): wires a test store and a fresh SessionRegistry into
    app.state, bypassing the real startup
  - api_client: TestClient plus a pre-created user and a valid bearer token

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares one
in-memory instance across all connections in the same process.

The DEBUG env var must be set before any auth/core import so get_settings()
auto-generates JWT_SECRET in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any auth/core import so get_settings() can
# auto-generate JWT_SECRET in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import User
from auth.sessions import SessionRegistry
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password

TEST_USERNAME = "johndoe"
TEST_PASSWORD = "correct"


def make_test_store(db_name: str) -> UserStore:
    """Create a named shared-memory SQLite store.

    Args:
        db_name: Unique name so different test modules don't share state.
    """
    return UserStore(f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore, sessions: SessionRegistry):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.sessions = sessions
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers against an isolated store and registry. The user
    johndoe / "correct" is created up front and a token is minted for it
    directly (not via /login, so the registry starts empty).
    """
    user_store = make_test_store(f"test_users_{request.module.__name__.rsplit('.', 1)[-1]}")
    sessions = SessionRegistry()

    user = User(
        username=TEST_USERNAME,
        hashed_password=hash_password(TEST_PASSWORD),
        firstname="John",
        fullname="John Doe",
        lastname="Doe",
    )
    user.id = user_store.create_user(user)
    token = create_access_token(user.identity())

    app.router.lifespan_context = _patch_lifespan(user_store, sessions)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, user.id

    user_store.close()

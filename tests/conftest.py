"""
tests/conftest.py -- Shared test fixtures for TaskReview.

This module provides:
  - make_settings(): a Settings instance with a throwaway secret
  - _make_test_stores(): isolated named shared-memory SQLite stores
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient over the strict (default) policy
  - legacy_client: TestClient with every compatibility switch turned off

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format shares one in-memory instance across all
connections in the same process.
"""

from __future__ import annotations

import secrets
from collections.abc import Generator
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient

from api.main import app, attach_services
from assignments.store import AssignmentStore
from auth.store import CredentialStore
from core.config import Settings


def make_settings(**overrides) -> Settings:
    """Build Settings with a random 64-char secret; keyword args override fields."""
    values = {"secret_key": secrets.token_hex(32), "debug": False}
    values.update(overrides)
    return Settings(**values)


def _make_test_stores(db_suffix: str) -> tuple[CredentialStore, AssignmentStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state (e.g. 'api', 'legacy').
    """
    db_url = f"sqlite:///file:test_taskreview_{db_suffix}?mode=memory&cache=shared&uri=true"
    return CredentialStore(db_url), AssignmentStore(db_url)


def _patch_lifespan(settings: Settings, credentials: CredentialStore, assignment_store: AssignmentStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        attach_services(app, settings, credentials, assignment_store)
        yield

    return test_lifespan


def _client(db_suffix: str, settings: Settings) -> Generator[TestClient, None, None]:
    credentials, assignment_store = _make_test_stores(db_suffix)
    app.router.lifespan_context = _patch_lifespan(settings, credentials, assignment_store)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client
    assignment_store.close()
    credentials.close()


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """TestClient over the real app with strict authorization policy."""
    yield from _client("api", make_settings())


@pytest.fixture(scope="module")
def legacy_client() -> Generator[TestClient, None, None]:
    """TestClient with role checks, admin scoping and transition guards disabled."""
    settings = make_settings(
        enforce_token_role=False,
        scope_assignments_to_admin=False,
        enforce_status_transitions=False,
    )
    yield from _client("legacy", settings)


# ---------------------------------------------------------------------------
# Unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def credentials() -> Generator[CredentialStore, None, None]:
    store = CredentialStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def assignment_store() -> Generator[AssignmentStore, None, None]:
    store = AssignmentStore("sqlite:///:memory:")
    yield store
    store.close()

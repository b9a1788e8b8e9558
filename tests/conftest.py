# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from timeplanner.db.models import Account, Category
from timeplanner.db.session import build_engine, init_db
from timeplanner.main import create_app
from timeplanner.services.accounts import create_account
from timeplanner.services.categories import create_category

from .helpers import PASSWORD


@pytest.fixture()
def engine():
    """
    Fresh in-memory database per test.

    The engine is built exactly like the production one (BEGIN IMMEDIATE,
    foreign keys on), only with a static pool so every session shares the
    single in-memory connection.
    """
    eng = build_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture()
def account(session) -> Account:
    acc, _token = create_account(session, "ada@example.com", PASSWORD)
    return acc


@pytest.fixture()
def work(session, account) -> Category:
    return create_category(session, account.id, "Work", "#336699")


@pytest.fixture()
def client(engine):
    """TestClient over an app bound to the test engine; lifespan runs on enter."""
    app = create_app(engine)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def auth(client):
    """Register a user through the API and return its Authorization headers."""

    def _auth(email: str = "grace@example.com", migration_data=None) -> dict:
        payload = {"email": email, "password": PASSWORD}
        if migration_data is not None:
            payload["migrationData"] = migration_data
        r = client.post("/api/v1/auth/register", json=payload)
        assert r.status_code == 201, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _auth

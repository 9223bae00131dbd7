"""
Pytest configuration and shared fixtures.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_DEFAULT_REFERRER_TYPES", "true")

import pytest
from fastapi.testclient import TestClient

from gac.api.main import app
from gac.auth.tokens import create_access_token
from gac.storage.db import Database, get_session
from gac.storage.repo import ReferrerTypeStore


@pytest.fixture
def database():
    """Fresh in-memory database with the default referrer types."""
    database = Database("sqlite://")
    database.create_tables()
    with database.session() as session:
        ReferrerTypeStore(session).ensure_defaults()
    yield database
    database.drop_tables()
    database.engine.dispose()


@pytest.fixture
def client(database):
    """Test client bound to the test database."""

    def override_session():
        with database.session() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _headers(role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(f'{role}-user', role)}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _headers("admin")


@pytest.fixture
def staff_headers() -> dict[str, str]:
    return _headers("staff")


@pytest.fixture
def user_headers() -> dict[str, str]:
    return _headers("user")

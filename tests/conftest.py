"""
Shared pytest fixtures for the platform shell test suite.
"""

import sqlite3

import pytest
from starlette.testclient import TestClient

from platform_shell.db.connection import ConnectionPool, ContactStore
from platform_shell.db.init_db import init_db, insert_contact


_INTEGRATION_ENV = (
    "SHELL_DB_PATH",
    "DATABASE_PATH",
    "SALES_ENGINE_API_BASE_URL",
    "NEXT_PUBLIC_SALES_ENGINE_API_BASE_URL",
    "BASIC_AUTH_USERNAME",
    "BASIC_AUTH_PASSWORD",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Every test starts with no data store, no backend, and no auth gate."""
    for name in _INTEGRATION_ENV:
        monkeypatch.delenv(name, raising=False)
    import platform_shell.db.connection as connection
    monkeypatch.setattr(connection, "_default_store", None)


@pytest.fixture
def contacts_db(tmp_path):
    """Fresh SQLite database with the campaign_contacts schema."""
    db_path = str(tmp_path / "contacts.db")
    init_db(db_path)
    return db_path


@pytest.fixture
def seed_contacts(contacts_db):
    """Insert campaign_contacts rows: seed_contacts([{...}, ...])."""
    def _seed(rows):
        conn = sqlite3.connect(contacts_db)
        for i, row in enumerate(rows):
            data = dict(row)
            data.setdefault("id", f"cc_{i}")
            insert_contact(conn, data)
        conn.commit()
        conn.close()
    return _seed


@pytest.fixture
def store(contacts_db):
    """ContactStore over the test database."""
    pool = ConnectionPool(contacts_db, max_size=2, connect_timeout=1)
    yield ContactStore(pool)
    pool.close()


@pytest.fixture
def broken_store(tmp_path):
    """ContactStore over a database with no campaign_contacts table."""
    db_path = str(tmp_path / "empty.db")
    sqlite3.connect(db_path).close()
    pool = ConnectionPool(db_path, max_size=1, connect_timeout=1)
    yield ContactStore(pool)
    pool.close()


@pytest.fixture
def app():
    from platform_shell.api.app import app as shell_app
    yield shell_app
    shell_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)

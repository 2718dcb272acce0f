import sqlite3
from uuid import uuid4

import pytest

from biolink.adapters.sqlite.migrator import SQLiteMigrator
from biolink.api.deps import PROJECT_ROOT

MIGRATIONS_DIR = str(PROJECT_ROOT / "migrations")


@pytest.fixture
def db_path(tmp_path):
    """A migrated SQLite database in a temp directory."""
    path = str(tmp_path / "biolink.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path


@pytest.fixture
def make_profile(db_path):
    """Insert a bare user + profile row and return the profile id."""

    def _make(username: str) -> int:
        user_id = str(uuid4())
        conn = sqlite3.connect(db_path)
        try:
            conn.execute(
                "INSERT INTO users (id, email, password_hash, created_at) "
                "VALUES (?, ?, 'hash', '2025-01-01T00:00:00+00:00')",
                (user_id, f"{username}@example.com"),
            )
            cursor = conn.execute(
                "INSERT INTO profiles (user_id, username) VALUES (?, ?)", (user_id, username)
            )
            conn.commit()
            assert cursor.lastrowid is not None
            return cursor.lastrowid
        finally:
            conn.close()

    return _make

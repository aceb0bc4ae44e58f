"""Shared fixtures: a scratch database laid out the way the external writer does it."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from sqlitefs.fs.filesystem import SQLiteFS

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS files (
    name TEXT NOT NULL,
    content BLOB,
    modified INTEGER,
    mode INTEGER,
    expired_at INTEGER
);
CREATE INDEX IF NOT EXISTS files_name ON files (name);
"""

NOW = 1_700_000_000


class EntryWriter:
    """Stands in for the process that populates the entries table."""

    def __init__(self, db_path: Path):
        self.db_path = db_path

    def put(
        self,
        name: str,
        content=b"",
        modified=None,
        mode=None,
        expired_at=None,
    ) -> None:
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(
                "INSERT INTO files (name, content, modified, mode, expired_at) VALUES (?, ?, ?, ?, ?)",
                (name, content, modified, mode, expired_at),
            )
            conn.commit()
        finally:
            conn.close()


def _create_schema(path: Path, table: str = "files") -> None:
    conn = sqlite3.connect(path)
    conn.executescript(SCHEMA_SQL.replace("files", table))
    conn.close()


@pytest.fixture
def now() -> int:
    """The instant every fixed-clock filesystem reports."""
    return NOW


@pytest.fixture
def create_schema():
    """Create the entries table in a database file (optionally renamed)."""
    return _create_schema


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Create a temporary database with the entries table."""
    path = tmp_path / "files.db"
    _create_schema(path)
    return path


@pytest.fixture
def writer(db_path) -> EntryWriter:
    return EntryWriter(db_path)


@pytest.fixture
def fs(db_path):
    """A provisioned filesystem with a fixed clock."""
    filesystem = SQLiteFS(str(db_path), clock=lambda: NOW)
    filesystem.provision()
    yield filesystem
    filesystem.cleanup()

"""Database connection management: one lazily opened, shared SQLite handle."""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


def _database_uri(db_path: str) -> str:
    """Build a read-write (never create) SQLite URI for the configured location."""
    if db_path.startswith("file:"):
        separator = "&" if "?" in db_path else "?"
        return f"{db_path}{separator}mode=rw"
    return f"{Path(db_path).absolute().as_uri()}?mode=rw"


class ConnectionManager:
    """Owns the database handle shared by every lookup.

    The manager is either Unopened (no handle) or Open. ``ensure_open`` moves
    it to Open when it can and silently stays Unopened when it can't;
    ``invalidate`` and ``cleanup`` move it back. Failures never escape
    ``ensure_open`` so the next caller simply retries.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            _database_uri(self.db_path),
            uri=True,
            check_same_thread=False,
        )
        try:
            conn.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def ensure_open(self) -> sqlite3.Connection | None:
        """Return the held handle, opening one first if needed.

        Returns None when no handle could be opened.
        """
        conn = self._conn
        if conn is not None:
            return conn

        if not self.db_path:
            logger.debug("No database path configured, lookups will report not found")
            return None

        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            logger.warning("Failed to open database %s: %s", self.db_path, exc)
            return None

        with self._lock:
            if self._conn is None:
                self._conn = conn
                logger.info("Opened database %s", self.db_path)
                return conn
            current = self._conn

        # Lost the race to a concurrent open; keep the winner
        conn.close()
        return current

    def invalidate(self, conn: sqlite3.Connection | None = None) -> None:
        """Drop the held handle so the next ``ensure_open`` reopens.

        When ``conn`` is given, only that handle is dropped; a newer handle
        opened concurrently is left alone.
        """
        with self._lock:
            stale = self._conn
            if stale is None or (conn is not None and conn is not stale):
                return
            self._conn = None

        logger.info("Invalidated database handle for %s", self.db_path)
        try:
            stale.close()
        except sqlite3.Error as exc:
            logger.debug("Error closing invalidated handle: %s", exc)

    def cleanup(self) -> None:
        """Close the held handle, if any. Close errors propagate."""
        with self._lock:
            conn = self._conn
            self._conn = None

        if conn is not None:
            conn.close()
            logger.info("Closed database %s", self.db_path)

"""SQLite-backed read-only filesystem.

Every lookup re-queries the entries table; there is no result cache. Any
reason a file can't be produced (not configured, database unavailable,
row missing or expired, row malformed) is reported as
``FileNotFoundError``. Query failures additionally drop the connection so
the next lookup reopens it.
"""

from __future__ import annotations

import errno
import logging
import os
import sqlite3
import time
from typing import Callable

from sqlitefs.config import DatabaseConfig
from sqlitefs.db.connection import ConnectionManager
from sqlitefs.db.models import EntryRepository, MalformedEntryError
from sqlitefs.fs.base import ReadOnlyFS
from sqlitefs.fs.file import FileInfo, SQLiteFile

logger = logging.getLogger(__name__)

MODULE_ID = "fs.sqlite"


def _not_exist(name: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)


class SQLiteFS(ReadOnlyFS):
    """Serves files out of rows of an SQLite table."""

    module_id = MODULE_ID

    def __init__(
        self,
        db_path: str = "",
        *,
        table: str = "files",
        clock: Callable[[], float] = time.time,
    ):
        self.db_path = db_path
        self.table = table
        self._clock = clock
        self.connections = ConnectionManager(db_path)

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> SQLiteFS:
        return cls(config.db_path, table=config.table)

    # -- Lifecycle -----------------------------------------------------------

    def provision(self) -> None:
        """Try to open the database once. Never fails; errors surface on lookup."""
        if self.connections.ensure_open() is not None:
            logger.info("Provisioned %s with %s", self.module_id, self.db_path)
        else:
            logger.warning(
                "Provisioned %s without a database (db_path=%r), retrying on first lookup",
                self.module_id,
                self.db_path,
            )

    def validate(self) -> None:
        """Configuration check. Problems are deferred to the first lookup."""
        return None

    def cleanup(self) -> None:
        self.connections.cleanup()

    def __enter__(self) -> SQLiteFS:
        self.provision()
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup()

    # -- Lookup --------------------------------------------------------------

    def open(self, name: str) -> SQLiteFile:
        conn = self.connections.ensure_open()
        if conn is None:
            raise _not_exist(name)

        now = int(self._clock())
        try:
            entry = EntryRepository(conn, self.table).get_visible(name, now)
        except UnicodeEncodeError:
            # Names SQLite can't bind can't match a row either
            logger.debug("Unencodable name %r", name)
            raise _not_exist(name) from None
        except (sqlite3.Error, MalformedEntryError) as exc:
            logger.warning("Lookup of %s failed, invalidating connection: %s", name, exc)
            self.connections.invalidate(conn)
            raise _not_exist(name) from exc

        if entry is None:
            logger.debug("No visible entry for %s", name)
            raise _not_exist(name)

        return SQLiteFile(entry.content, FileInfo.from_entry(entry))

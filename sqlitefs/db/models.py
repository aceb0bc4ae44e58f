"""Entry rows: decoding and the visible-entry point query."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1
INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1

LOOKUP_SQL = (
    "SELECT content, modified, mode FROM {table} "
    "WHERE name = ? AND (expired_at IS NULL OR expired_at > ?) "
    "LIMIT 1"
)


class MalformedEntryError(ValueError):
    """A row was found but a column could not be decoded."""


def _decode_content(value: Any) -> bytes:
    if value is None:
        return b""
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    raise MalformedEntryError(f"content: expected BLOB or TEXT, got {type(value).__name__}")


def _decode_int(value: Any, column: str, lo: int, hi: int) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, (str, bytes)):
        try:
            number = int(value)
        except ValueError:
            raise MalformedEntryError(f"{column}: not an integer: {value!r}") from None
    else:
        raise MalformedEntryError(f"{column}: expected INTEGER, got {type(value).__name__}")

    if not lo <= number <= hi:
        raise MalformedEntryError(f"{column}: {number} out of range")
    return number


@dataclass
class Entry:
    name: str
    content: bytes = b""
    modified: int | None = None
    mode: int | None = None

    @classmethod
    def from_row(cls, name: str, row: tuple) -> Entry:
        """Decode a ``(content, modified, mode)`` row."""
        content, modified, mode = row
        return cls(
            name=name,
            content=_decode_content(content),
            modified=_decode_int(modified, "modified", INT64_MIN, INT64_MAX),
            mode=_decode_int(mode, "mode", INT32_MIN, INT32_MAX),
        )


class EntryRepository:
    """Read-only queries against the entries table.

    The table itself is owned by an external writer; nothing here creates
    or migrates it.
    """

    def __init__(self, conn: sqlite3.Connection, table: str = "files"):
        self.conn = conn
        self.table = table

    def get_visible(self, name: str, now: int) -> Entry | None:
        """Fetch the entry for ``name`` unless it expired at or before ``now``.

        If several visible rows share a name, which one is returned depends on
        SQLite's row order. Raises ``sqlite3.Error`` on query failure and
        ``MalformedEntryError`` when the row can't be decoded.
        """
        cursor = self.conn.execute(LOOKUP_SQL.format(table=self.table), (name, now))
        try:
            row = cursor.fetchone()
        finally:
            cursor.close()
        if row is None:
            return None
        return Entry.from_row(name, row)

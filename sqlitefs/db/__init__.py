"""Database layer: lazily opened SQLite handle and the entries query."""

from sqlitefs.db.connection import ConnectionManager
from sqlitefs.db.models import Entry, EntryRepository, MalformedEntryError

__all__ = ["ConnectionManager", "Entry", "EntryRepository", "MalformedEntryError"]

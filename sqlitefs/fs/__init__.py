"""Filesystem surface: the read-only interface and its SQLite implementation."""

from sqlitefs.fs.base import ReadOnlyFS
from sqlitefs.fs.file import ZERO_TIME, FileInfo, SQLiteFile
from sqlitefs.fs.filesystem import MODULE_ID, SQLiteFS

__all__ = ["ReadOnlyFS", "FileInfo", "SQLiteFile", "ZERO_TIME", "SQLiteFS", "MODULE_ID"]

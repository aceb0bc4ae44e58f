"""sqlitefs, a read-only virtual filesystem backed by SQLite rows."""

from sqlitefs.fs import ZERO_TIME, FileInfo, ReadOnlyFS, SQLiteFile, SQLiteFS

__version__ = "0.1.0"

__all__ = ["FileInfo", "ReadOnlyFS", "SQLiteFile", "SQLiteFS", "ZERO_TIME"]

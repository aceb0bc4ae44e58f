"""Read-only filesystem interface: open a file by its path."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlitefs.fs.file import FileInfo, SQLiteFile


class ReadOnlyFS(ABC):
    """Abstract interface for read-only filesystems.

    ``open`` either returns a readable file or raises ``FileNotFoundError``.
    """

    @abstractmethod
    def open(self, name: str) -> SQLiteFile:
        """Open the file stored under ``name``."""
        raise NotImplementedError

    def read_bytes(self, name: str) -> bytes:
        """Return the whole content of ``name``."""
        with self.open(name) as f:
            return f.read()

    def stat(self, name: str) -> FileInfo:
        """Return metadata for ``name``."""
        with self.open(name) as f:
            return f.stat()

"""In-memory file handles materialized from entry rows."""

from __future__ import annotations

import io
import posixpath
import stat
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlitefs.db.models import Entry

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Reported when an entry has no modification time
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
MAX_TIME = datetime.max.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class FileInfo:
    path: str = ""
    size: int = 0
    # Epoch seconds as stored, None when unknown
    modified: int | None = None
    mode: int = 0

    @classmethod
    def from_entry(cls, entry: Entry) -> FileInfo:
        mode = 0
        if entry.mode is not None:
            # Stored signed, used as an unsigned bitmask
            mode = entry.mode & 0xFFFFFFFF

        return cls(path=entry.name, size=len(entry.content), modified=entry.modified, mode=mode)

    @property
    def name(self) -> str:
        """Last element of the path."""
        if not self.path:
            return "."
        stripped = self.path.rstrip("/")
        if not stripped:
            return "/"
        return posixpath.basename(stripped)

    @property
    def mod_time(self) -> datetime:
        """Modification time in UTC, ``ZERO_TIME`` when unknown.

        Timestamps beyond what ``datetime`` can hold are clamped to its range.
        """
        if self.modified is None:
            return ZERO_TIME
        try:
            return EPOCH + timedelta(seconds=self.modified)
        except OverflowError:
            return MAX_TIME if self.modified > 0 else ZERO_TIME

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def mtime(self) -> float | None:
        """Modification time as epoch seconds, or None when unknown."""
        if self.modified is None:
            return None
        return float(self.modified)

    @property
    def filemode(self) -> str:
        # No type bits means a regular file
        if stat.S_IFMT(self.mode) == 0:
            return stat.filemode(stat.S_IFREG | self.mode)
        return stat.filemode(self.mode)

    @property
    def sys(self) -> None:
        return None


class SQLiteFile(io.RawIOBase):
    """Forward-only readable stream over an entry's content.

    Closing releases the buffer and clears the metadata; it may be called
    any number of times.
    """

    def __init__(self, content: bytes, info: FileInfo):
        super().__init__()
        self._reader: io.BytesIO | None = io.BytesIO(content)
        self._info = info

    @property
    def name(self) -> str:
        return self._info.path

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._reader is None:
            raise ValueError("I/O operation on closed file.")
        return self._reader.readinto(buffer)

    def readall(self) -> bytes:
        if self._reader is None:
            raise ValueError("I/O operation on closed file.")
        return self._reader.read()

    def stat(self) -> FileInfo:
        return self._info

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
            self._info = FileInfo()
        super().close()

"""Tests for file handles and their metadata."""

from __future__ import annotations

import io
import stat
from datetime import datetime, timezone

import pytest

from sqlitefs.db.models import Entry
from sqlitefs.fs.file import MAX_TIME, ZERO_TIME, FileInfo, SQLiteFile


def _file(content: bytes = b"hello", path: str = "/a.txt") -> SQLiteFile:
    return SQLiteFile(content, FileInfo.from_entry(Entry(name=path, content=content)))


class TestFileInfo:
    def test_defaults_are_zero(self):
        info = FileInfo()
        assert info.size == 0
        assert info.mode == 0
        assert info.mod_time == ZERO_TIME
        assert info.mtime is None
        assert info.sys is None
        assert not info.is_dir

    @pytest.mark.parametrize(
        "path, name",
        [
            ("/a.txt", "a.txt"),
            ("/dir/sub/page.html", "page.html"),
            ("a.txt", "a.txt"),
            ("/dir/", "dir"),
            ("/", "/"),
            ("", "."),
        ],
    )
    def test_name(self, path, name):
        assert FileInfo(path=path).name == name

    def test_from_entry(self):
        entry = Entry(name="/a.txt", content=b"hello", modified=1700000000, mode=0o644)
        info = FileInfo.from_entry(entry)
        assert info.size == 5
        assert info.mod_time == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert info.mtime == 1700000000.0
        assert info.filemode == "-rw-r--r--"

    def test_negative_timestamp(self):
        info = FileInfo.from_entry(Entry(name="/old", modified=-86400))
        assert info.mod_time == datetime(1969, 12, 31, tzinfo=timezone.utc)

    def test_timestamp_past_datetime_range_clamped(self):
        info = FileInfo.from_entry(Entry(name="/far", modified=2**62))
        assert info.mod_time == MAX_TIME
        assert info.mtime == 2**62

    def test_timestamp_before_datetime_range_clamped(self):
        info = FileInfo.from_entry(Entry(name="/early", modified=-(2**62)))
        assert info.mod_time == ZERO_TIME
        assert info.mtime == -(2**62)

    @pytest.mark.parametrize(
        "mode, expected",
        [
            (0o644, "-rw-r--r--"),
            (0, "----------"),
            (stat.S_IFREG | 0o755, "-rwxr-xr-x"),
            (stat.S_IFLNK | 0o777, "lrwxrwxrwx"),
        ],
    )
    def test_filemode(self, mode, expected):
        assert FileInfo(mode=mode).filemode == expected

    def test_symlink_mode(self):
        info = FileInfo(mode=stat.S_IFLNK | 0o777)
        assert stat.S_ISLNK(info.mode)
        assert not info.is_dir

    def test_frozen(self):
        with pytest.raises(AttributeError):
            FileInfo().size = 3


class TestSQLiteFile:
    def test_is_readonly_stream(self):
        f = _file()
        assert isinstance(f, io.RawIOBase)
        assert f.readable()
        assert not f.writable()
        assert not f.seekable()
        assert f.name == "/a.txt"
        f.close()

    def test_read_in_chunks(self):
        f = _file(b"hello world")
        assert f.read(5) == b"hello"
        assert f.read(1) == b" "
        assert f.read() == b"world"
        assert f.read() == b""
        assert f.read(10) == b""
        f.close()

    def test_readinto(self):
        f = _file()
        buf = bytearray(3)
        assert f.readinto(buf) == 3
        assert bytes(buf) == b"hel"
        assert f.readinto(buf) == 2
        assert bytes(buf[:2]) == b"lo"
        assert f.readinto(buf) == 0
        f.close()

    def test_iterates_lines(self):
        with _file(b"one\ntwo\n") as f:
            assert list(f) == [b"one\n", b"two\n"]

    def test_close_twice(self):
        f = _file()
        f.close()
        f.close()
        assert f.closed

    def test_close_clears_metadata(self):
        f = _file()
        f.close()
        assert f.stat() == FileInfo()

    def test_read_after_close(self):
        f = _file()
        f.close()
        with pytest.raises(ValueError):
            f.read()

    def test_close_leaves_other_handles(self):
        first = _file()
        second = _file()
        first.close()
        assert second.read() == b"hello"
        assert second.stat().size == 5
        second.close()

    def test_context_manager_closes(self):
        with _file() as f:
            assert f.read() == b"hello"
        assert f.closed

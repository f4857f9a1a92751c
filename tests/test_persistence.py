"""Tests for recent_track.persistence — locked load and write-back."""

from __future__ import annotations

import fcntl
import threading
import time
from pathlib import Path

from recent_track.persistence import (
    load_lines,
    load_store,
    locked_records,
    save_store,
    write_lines,
)
from recent_track.records import DirectoryRecord, FileRecord


class TestLoad:
    def test_missing_file_is_empty(self, tmp_path: Path):
        assert load_lines(tmp_path / "missing.txt") == []
        assert len(load_store(tmp_path / "missing.txt")) == 0

    def test_preserves_order_and_cd_marker(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        p.write_text("/b\n/tmp/ \n/a\n")
        assert load_lines(p) == ["/b", "/tmp/ ", "/a"]
        store = load_store(p)
        assert list(store) == [
            FileRecord("/b"),
            DirectoryRecord("/tmp", visited_via_cd=True),
            FileRecord("/a"),
        ]

    def test_read_waits_for_lock(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        p.write_text("/old\n")
        result: list[list[str]] = []

        with open(p, "r+") as holder:
            fcntl.flock(holder.fileno(), fcntl.LOCK_EX)
            worker = threading.Thread(target=lambda: result.append(load_lines(p)))
            worker.start()
            time.sleep(0.2)
            assert result == []
            holder.seek(0)
            holder.truncate()
            holder.write("/new\n")
            holder.flush()
            fcntl.flock(holder.fileno(), fcntl.LOCK_UN)

        worker.join(timeout=5)
        assert result == [["/new"]]

    def test_invalid_utf8_survives_round_trip(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        p.write_bytes(b"/caf\xe9\n/a\n")
        write_lines(p, load_lines(p))
        assert p.read_bytes() == b"/caf\xe9\n/a\n"


class TestWrite:
    def test_truncates_previous_content(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        p.write_text("/x\n/y\n/z\n")
        assert write_lines(p, ["/a"]) is True
        assert p.read_text() == "/a\n"

    def test_creates_file(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        assert write_lines(p, ["/a", "/b/"]) is True
        assert p.read_text() == "/a\n/b/\n"

    def test_uncreatable_file_is_skipped(self, tmp_path: Path):
        assert write_lines(tmp_path / "no-such-dir" / "recent.txt", ["/a"]) is False

    def test_save_store_applies_capacity(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        p.write_text("".join(f"/old{i}\n" for i in range(5)))
        store = load_store(p)
        store.touch(FileRecord("/new"))
        assert save_store(p, store, capacity=3) is True
        assert p.read_text().splitlines() == ["/new", "/old0", "/old1"]

    def test_write_waits_for_lock(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        p.write_text("/old\n")
        done = threading.Event()

        with open(p) as holder:
            fcntl.flock(holder.fileno(), fcntl.LOCK_EX)
            worker = threading.Thread(target=lambda: (write_lines(p, ["/new"]), done.set()))
            worker.start()
            time.sleep(0.2)
            assert not done.is_set()
            assert p.read_text() == "/old\n"
            fcntl.flock(holder.fileno(), fcntl.LOCK_UN)

        worker.join(timeout=5)
        assert done.is_set()
        assert p.read_text() == "/new\n"


class TestLockedRecords:
    def test_read_modify_write(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        p.write_text("/a\n/b\n")
        with locked_records(p) as locked:
            assert locked is not None
            locked.store.touch(FileRecord("/b"))
            assert locked.save(capacity=10) is True
        assert p.read_text() == "/b\n/a\n"

    def test_missing_file_not_created_without_save(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        with locked_records(p) as locked:
            assert locked is not None
            assert len(locked.store) == 0
        assert not p.exists()

    def test_missing_file_created_on_save(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        with locked_records(p) as locked:
            locked.store.touch(FileRecord("/a"))
            assert locked.save(capacity=10) is True
        assert p.read_text() == "/a\n"

    def test_uncreatable_file_save_fails(self, tmp_path: Path):
        with locked_records(tmp_path / "missing-dir" / "recent.txt") as locked:
            locked.store.touch(FileRecord("/a"))
            assert locked.save(capacity=10) is False

    def test_unopenable_yields_none(self, tmp_path: Path):
        with locked_records(tmp_path) as locked:
            assert locked is None

    def test_lock_held_across_read_modify_write(self, tmp_path: Path):
        p = tmp_path / "recent.txt"
        p.write_text("/a\n")
        done = threading.Event()

        with locked_records(p) as locked:
            worker = threading.Thread(target=lambda: (write_lines(p, ["/other"]), done.set()))
            worker.start()
            time.sleep(0.2)
            assert not done.is_set()
            locked.store.touch(FileRecord("/b"))
            locked.save(capacity=10)
            time.sleep(0.1)
            assert not done.is_set()
            assert p.read_text() == "/b\n/a\n"

        worker.join(timeout=5)
        assert done.is_set()
        assert p.read_text() == "/other\n"

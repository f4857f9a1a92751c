"""Record file persistence guarded by an advisory exclusive lock.

Every read and every write holds a blocking ``flock(LOCK_EX)`` on the record
file for its duration. In split mode the read and the write lock independently,
so two shells racing through a read-modify-write can lose one update (last
writer wins). ``locked_records`` holds a single lock across the whole cycle.
"""

from __future__ import annotations

import fcntl
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

from recent_track.store import RecencyStore

logger = logging.getLogger(__name__)

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


@contextmanager
def exclusive_lock(handle: IO[str]) -> Iterator[None]:
    """Hold a blocking exclusive advisory lock on an open file."""
    fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
    try:
        yield
    finally:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def _read_lines(handle: IO[str]) -> list[str]:
    return [line.rstrip("\n") for line in handle]


def _write_lines(handle: IO[str], lines: list[str]) -> None:
    handle.seek(0)
    handle.truncate()
    for line in lines:
        handle.write(line)
        handle.write("\n")
    handle.flush()


def _open_for_update(path: Path, *, create: bool = True) -> IO[str]:
    # never truncates; truncation happens once the lock is held
    flags = os.O_RDWR | os.O_CREAT if create else os.O_RDWR
    fd = os.open(path, flags, 0o644)
    return os.fdopen(fd, "r+", encoding=_ENCODING, errors=_ERRORS)


def load_lines(path: Path) -> list[str]:
    """Read the stored lines of *path*. A missing or unreadable file reads as empty."""
    try:
        handle = open(path, encoding=_ENCODING, errors=_ERRORS)
    except FileNotFoundError:
        return []
    except OSError as exc:
        logger.debug("Cannot open %s for reading: %s", path, exc)
        return []
    with handle, exclusive_lock(handle):
        return _read_lines(handle)


def load_store(path: Path) -> RecencyStore:
    """Load the record file into a RecencyStore."""
    return RecencyStore.from_lines(load_lines(path))


def write_lines(path: Path, lines: list[str]) -> bool:
    """Rewrite *path* with *lines*. Returns False when the file cannot be written."""
    try:
        handle = _open_for_update(path)
    except OSError as exc:
        logger.debug("Cannot open %s for writing: %s", path, exc)
        return False
    with handle, exclusive_lock(handle):
        try:
            _write_lines(handle, lines)
        except OSError as exc:
            logger.debug("Writing %s failed: %s", path, exc)
            return False
    return True


def save_store(path: Path, store: RecencyStore, capacity: int) -> bool:
    """Write the store's *capacity* most recent records to *path*."""
    return write_lines(path, store.lines(capacity))


class LockedRecords:
    """A record file locked for a full read-modify-write cycle.

    A missing file loads as empty and is only created by ``save``.
    """

    def __init__(self, path: Path, handle: IO[str] | None) -> None:
        self.path = path
        self._handle = handle
        self.store = RecencyStore.from_lines(_read_lines(handle) if handle is not None else [])

    def save(self, capacity: int) -> bool:
        lines = self.store.lines(capacity)
        if self._handle is None:
            return write_lines(self.path, lines)
        try:
            _write_lines(self._handle, lines)
        except OSError as exc:
            logger.debug("Writing %s failed: %s", self.path, exc)
            return False
        return True


@contextmanager
def locked_records(path: Path) -> Iterator[LockedRecords | None]:
    """Open an existing *path* and hold its lock for the whole block.

    Yields None when the file exists but cannot be opened.
    """
    try:
        handle = _open_for_update(path, create=False)
    except FileNotFoundError:
        yield LockedRecords(path, None)
        return
    except OSError as exc:
        logger.debug("Cannot open %s for update: %s", path, exc)
        yield None
        return
    with handle, exclusive_lock(handle):
        yield LockedRecords(path, handle)

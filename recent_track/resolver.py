"""Turn candidate strings into records.

Local candidates are canonicalized against the real filesystem (which also
proves they exist); remote candidates of ``scp``/``ssh`` are accepted on
syntax alone. For ``cp``/``mv`` whose last argument is an existing directory,
each source also yields its destination inside that directory.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from recent_track.commands import Verb
from recent_track.records import (
    DirectoryRecord,
    FileRecord,
    Record,
    RemoteCopyRecord,
    RemoteLoginRecord,
)

logger = logging.getLogger(__name__)


def canonicalize(candidate: str) -> Path | None:
    """Resolve *candidate* to its symlink-free absolute path, or None if it does not exist."""
    try:
        return Path(candidate).resolve(strict=True)
    except (OSError, RuntimeError, ValueError) as exc:
        logger.debug("Dropping %s: %s", candidate, exc)
        return None


def resolve_candidate(candidate: str, verb: Verb, *, data_file: Path | None = None) -> Record | None:
    """Classify and normalize one candidate into a record, or None to drop it."""
    if verb is Verb.REMOTE_COPY and ":" in candidate:
        return RemoteCopyRecord(candidate)
    if verb is Verb.REMOTE_LOGIN:
        return RemoteLoginRecord(candidate)

    path = canonicalize(candidate)
    if path is None:
        return None
    if data_file is not None and path == data_file:
        return None
    if path.is_file():
        return FileRecord(str(path))
    if path.is_dir():
        return DirectoryRecord(str(path), visited_via_cd=verb is Verb.CHANGE_DIRECTORY)
    logger.debug("Dropping %s: neither a regular file nor a directory", path)
    return None


def split_target_directory(candidates: list[str], verb: Verb) -> tuple[list[str], Path | None]:
    """Separate a trailing existing-directory destination from ``cp``/``mv`` sources."""
    if verb not in (Verb.COPY, Verb.MOVE) or len(candidates) < 2:
        return candidates, None
    target = canonicalize(candidates[-1])
    if target is None or not target.is_dir():
        return candidates, None
    return candidates[:-1], target


def compose_destination(source: str, target_dir: Path) -> str | None:
    """The path *source* ends up at after being copied or moved into *target_dir*."""
    leaf = PurePosixPath(source).name
    if not leaf or leaf == "..":
        return None
    return str(target_dir / leaf)


def resolve_records(
    candidates: list[str], verb: Verb, *, data_file: Path | None = None
) -> Iterator[Record]:
    """Yield records for the candidates in observation order."""
    if data_file is not None:
        data_file = Path(data_file).resolve()
    sources, target_dir = split_target_directory(candidates, verb)

    for source in sources:
        record = resolve_candidate(source, verb, data_file=data_file)
        if record is not None:
            yield record
        if target_dir is None:
            continue
        composed = compose_destination(source, target_dir)
        if composed is None:
            continue
        record = resolve_candidate(composed, verb, data_file=data_file)
        if record is not None:
            yield record

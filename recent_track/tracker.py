"""End-to-end recording of one shell command.

parse → resolve → promote into the loaded store → write back. Nothing in here
raises for bad input or filesystem trouble; a command that yields no new
record leaves the record file untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from recent_track.commands import ParsedCommand, Verb, parse_command_line
from recent_track.config import LOCK_MODE_TRANSACTION, TrackerConfig
from recent_track.persistence import load_store, locked_records, save_store
from recent_track.records import Record
from recent_track.resolver import resolve_records
from recent_track.store import RecencyStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TrackResult:
    """Outcome of recording one command line."""

    verb: Verb = Verb.OTHER
    candidates: list[str] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)
    aborted: bool = False
    written: bool = False


def apply_records(store: RecencyStore, parsed: ParsedCommand, config: TrackerConfig) -> None:
    """Promote every record the parsed command yields into *store*."""
    for record in resolve_records(parsed.candidates, parsed.verb, data_file=config.data_file):
        store.touch(record)


def track(cwd: str, command_line: str, config: TrackerConfig) -> TrackResult:
    """Record the filesystem objects and hosts referenced by *command_line*."""
    if not cwd or not command_line:
        return TrackResult()

    parsed = parse_command_line(
        command_line,
        home=config.home,
        cwd=cwd,
        elevation_prefixes=config.elevation_prefixes,
        ignored_prefixes=config.ignored_prefixes,
    )
    result = TrackResult(
        verb=parsed.verb, candidates=list(parsed.candidates), aborted=parsed.aborted
    )
    if not parsed.candidates:
        return result

    if config.lock_mode == LOCK_MODE_TRANSACTION:
        with locked_records(config.data_file) as locked:
            if locked is None:
                return result
            apply_records(locked.store, parsed, config)
            result.records = locked.store.touched
            if locked.store.dirty:
                result.written = locked.save(config.capacity)
    else:
        store = load_store(config.data_file)
        apply_records(store, parsed, config)
        result.records = store.touched
        if store.dirty:
            result.written = save_store(config.data_file, store, config.capacity)

    logger.debug(
        "%s: %d candidate(s), %d record(s), written=%s",
        parsed.verb.value,
        len(result.candidates),
        len(result.records),
        result.written,
    )
    return result

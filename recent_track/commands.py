"""Command classification and candidate path extraction.

Decides which verb a command line invokes and turns its arguments into
candidate object strings: absolute local paths (not yet canonicalized),
verbatim remote specs, or nothing at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from recent_track.config import DEFAULT_ELEVATION_PREFIXES, DEFAULT_IGNORED_PREFIXES
from recent_track.tokenizer import split_command_line

logger = logging.getLogger(__name__)


class Verb(str, Enum):
    CHANGE_DIRECTORY = "cd"
    COPY = "cp"
    MOVE = "mv"
    REMOTE_COPY = "scp"
    REMOTE_LOGIN = "ssh"
    REMOVE_FILE = "rm"
    REMOVE_DIRECTORY = "rmdir"
    OTHER = "other"


_VERBS_BY_NAME = {v.value: v for v in Verb if v is not Verb.OTHER}

# A command token starting with one of these is a path, not a command name.
_PATH_INVOCATION_PREFIXES = ("./", "../", "/", "~/")


@dataclass(slots=True)
class ParsedCommand:
    """The verb of a command line and the candidate objects found in it."""

    verb: Verb
    candidates: list[str] = field(default_factory=list)
    aborted: bool = False


def classify(name: str) -> Verb:
    """Map a command name to its verb (case-sensitive)."""
    return _VERBS_BY_NAME.get(name, Verb.OTHER)


def is_target_directory_option(token: str) -> bool:
    """``-t DIR`` / ``--target-directory=DIR`` put the destination first."""
    return token == "-t" or token.startswith("--target-directory")


def expand_token(token: str, verb: Verb, *, home: str, cwd: str) -> str:
    """Expand one argument token to an absolute path or a verbatim remote spec."""
    if token.startswith("~/"):
        return home + token[1:]
    if token.startswith("/"):
        return token
    if ":" in token:
        # [user@]host:[path] or scp://[user@]host[:port][/path]
        return token
    if verb is Verb.REMOTE_LOGIN:
        return token
    return f"{cwd}/{token}"


def extract_candidates(
    tokens: list[str],
    *,
    home: str,
    cwd: str,
    elevation_prefixes: tuple[str, ...] = DEFAULT_ELEVATION_PREFIXES,
    ignored_prefixes: tuple[str, ...] = DEFAULT_IGNORED_PREFIXES,
) -> ParsedCommand:
    """Classify a tokenized command line and collect its candidate objects."""
    if tokens and tokens[0] in elevation_prefixes:
        tokens = tokens[1:]
    if not tokens:
        return ParsedCommand(Verb.OTHER)

    verb = classify(tokens[0])
    parsed = ParsedCommand(verb)
    args = tokens if tokens[0].startswith(_PATH_INVOCATION_PREFIXES) else tokens[1:]

    for token in args:
        if token.startswith("-"):
            if verb in (Verb.COPY, Verb.MOVE) and is_target_directory_option(token):
                logger.debug("Ignoring %s invocation using %s", verb.value, token)
                parsed.candidates.clear()
                parsed.aborted = True
                return parsed
            continue
        if token.startswith(ignored_prefixes):
            continue
        parsed.candidates.append(expand_token(token, verb, home=home, cwd=cwd))

    if verb is Verb.REMOTE_LOGIN and len(parsed.candidates) != 1:
        logger.debug("Skipping ssh invocation with %d host candidates", len(parsed.candidates))
        parsed.candidates.clear()

    return parsed


def parse_command_line(
    line: str,
    *,
    home: str,
    cwd: str,
    elevation_prefixes: tuple[str, ...] = DEFAULT_ELEVATION_PREFIXES,
    ignored_prefixes: tuple[str, ...] = DEFAULT_IGNORED_PREFIXES,
) -> ParsedCommand:
    """Tokenize *line* and extract its candidate objects."""
    return extract_candidates(
        split_command_line(line),
        home=home,
        cwd=cwd,
        elevation_prefixes=elevation_prefixes,
        ignored_prefixes=ignored_prefixes,
    )

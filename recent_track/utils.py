"""Shared console output, logging setup, and fuzzy matching utilities."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# ---------------------------------------------------------------------------
# Console singletons
# ---------------------------------------------------------------------------

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def setup_logging(level: str) -> None:
    """Route the package's log records to stderr through Rich."""
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root = logging.getLogger("recent_track")
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.propagate = False


# ---------------------------------------------------------------------------
# Record matching
# ---------------------------------------------------------------------------


def _leaf(value: str) -> str:
    """Last path component of a path or remote spec."""
    stripped = value.rstrip("/")
    if not stripped:
        return value
    return stripped.rsplit("/", 1)[-1].rsplit(":", 1)[-1]


def _in_order(needle: str, haystack: str) -> bool:
    pos = 0
    for ch in needle:
        pos = haystack.find(ch, pos) + 1
        if pos == 0:
            return False
    return True


def fuzzy_match(query: str, candidates: list[str]) -> list[tuple[int, str]]:
    """Return (index, candidate) pairs matching *query*, best first.

    Ranking, case-insensitive:
      0. the query occurs in the last path component
      1. the query occurs anywhere in the candidate
      2. the query characters occur in order

    Ties keep the candidates' original (recency) order.
    """
    q = query.lower()
    ranked: list[tuple[int, int, str]] = []
    for idx, candidate in enumerate(candidates):
        c = candidate.lower()
        if q in _leaf(c):
            rank = 0
        elif q in c:
            rank = 1
        elif _in_order(q, c):
            rank = 2
        else:
            continue
        ranked.append((rank, idx, candidate))
    ranked.sort(key=lambda item: item[:2])
    return [(idx, candidate) for _, idx, candidate in ranked]


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def _emit(target: Console, marker: str, style: str, msg: str) -> None:
    target.print(f"[{style}]{marker}[/{style}] {msg}")


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    _emit(err_console, "Error:", "bold red", msg)


def print_success(msg: str) -> None:
    _emit(console, "✓", "bold green", msg)


def print_info(msg: str) -> None:
    _emit(console, "ℹ", "bold blue", msg)

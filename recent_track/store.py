"""Recency store — an ordered, duplicate-free set of records, most recent first.

Records are keyed by their encoded text. Touching a record moves it to the
front; touching the record already at the front is a no-op. Capacity is
applied when the store is rendered for write-back.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Iterator

from recent_track.records import Record, parse_record


class RecencyStore:
    """Ordered record set with move-to-front promotion."""

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._entries: OrderedDict[str, Record] = OrderedDict()
        self._touched: list[Record] = []
        for record in records:
            # keep the first (most recent) occurrence of duplicates
            self._entries.setdefault(record.encode(), record)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> RecencyStore:
        """Build a store from stored lines, skipping blank ones."""
        return cls(parse_record(line) for line in lines if line.strip())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._entries.values())

    @property
    def touched(self) -> list[Record]:
        """Distinct records promoted since the store was built, in first-touch order."""
        return list(dict.fromkeys(self._touched))

    @property
    def dirty(self) -> bool:
        return bool(self._touched)

    def touch(self, record: Record) -> bool:
        """Promote *record* to most recent. Returns False when nothing changed."""
        key = record.encode()
        if self._entries and next(iter(self._entries)) == key:
            return False
        self._entries.pop(key, None)
        self._entries[key] = record
        self._entries.move_to_end(key, last=False)
        self._touched.append(record)
        return True

    def head(self, capacity: int) -> list[Record]:
        """The *capacity* most recent records, most recent first."""
        if capacity <= 0:
            return []
        out: list[Record] = []
        for record in self._entries.values():
            if len(out) >= capacity:
                break
            out.append(record)
        return out

    def lines(self, capacity: int) -> list[str]:
        """Encoded lines for write-back, bounded by *capacity*."""
        return [record.encode() for record in self.head(capacity)]

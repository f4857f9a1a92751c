"""Record types and their on-disk text encoding.

The record file is line oriented; each line is one record:

  - ``/abs/file``          file record
  - ``/abs/dir/``          directory referenced as an argument
  - ``/abs/dir/ ``         directory visited with ``cd`` (trailing space)
  - ``SCP#user@host:path`` remote copy endpoint
  - ``SSH#host``           remote login target

Two records are the same record exactly when their encodings are equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

SCP_TAG = "SCP#"
SSH_TAG = "SSH#"
CD_MARKER = " "


class RecordKind(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"
    VISITED = "cd"
    REMOTE_COPY = "scp"
    REMOTE_LOGIN = "ssh"


@dataclass(frozen=True, slots=True)
class FileRecord:
    """A regular file, by canonical absolute path."""

    path: str

    @property
    def kind(self) -> RecordKind:
        return RecordKind.FILE

    def encode(self) -> str:
        return self.path


@dataclass(frozen=True, slots=True)
class DirectoryRecord:
    """A directory, by canonical absolute path without the trailing separator."""

    path: str
    visited_via_cd: bool = False

    @property
    def kind(self) -> RecordKind:
        return RecordKind.VISITED if self.visited_via_cd else RecordKind.DIRECTORY

    def encode(self) -> str:
        text = self.path if self.path.endswith("/") else self.path + "/"
        if self.visited_via_cd:
            text += CD_MARKER
        return text


@dataclass(frozen=True, slots=True)
class RemoteCopyRecord:
    """A non-local copy endpoint (``user@host:path`` or ``scp://`` URI)."""

    spec: str

    @property
    def kind(self) -> RecordKind:
        return RecordKind.REMOTE_COPY

    def encode(self) -> str:
        return SCP_TAG + self.spec


@dataclass(frozen=True, slots=True)
class RemoteLoginRecord:
    """A host specification passed to ``ssh``."""

    spec: str

    @property
    def kind(self) -> RecordKind:
        return RecordKind.REMOTE_LOGIN

    def encode(self) -> str:
        return SSH_TAG + self.spec


Record = Union[FileRecord, DirectoryRecord, RemoteCopyRecord, RemoteLoginRecord]


def parse_record(line: str) -> Record:
    """Decode one stored line (without its newline) into a record.

    Any text decodes; bare strings without a tag or trailing separator are
    taken as file records so files from older writers load unchanged.
    """
    if line.startswith(SCP_TAG):
        return RemoteCopyRecord(line[len(SCP_TAG):])
    if line.startswith(SSH_TAG):
        return RemoteLoginRecord(line[len(SSH_TAG):])
    if line.endswith("/" + CD_MARKER):
        return DirectoryRecord(_strip_separator(line[: -len(CD_MARKER)]), visited_via_cd=True)
    if line.endswith("/"):
        return DirectoryRecord(_strip_separator(line))
    return FileRecord(line)


def _strip_separator(text: str) -> str:
    # "/" stays the root directory
    return text[:-1] if len(text) > 1 else text

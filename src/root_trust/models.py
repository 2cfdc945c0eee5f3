"""Data models for trust store operations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class Operation(str, Enum):
    """Store mutation kinds."""

    ADD = "add"
    REMOVE = "remove"

    @property
    def verb(self) -> str:
        return "add cert to" if self is Operation.ADD else "remove cert from"

    @property
    def past(self) -> str:
        return "added to" if self is Operation.ADD else "removed from"


class DatabaseKind(str, Enum):
    """NSS database formats."""

    SQL = "sql"  # cert9.db
    DBM = "dbm"  # cert8.db (legacy)


@dataclass(frozen=True)
class CommandResult:
    """Output of a finished shell command."""

    command: str
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.stderr.strip()


@dataclass(frozen=True)
class LinuxStoreConfig:
    """Anchor file layout and refresh command of a Linux host."""

    filename_template: str = ""  # e.g. "/usr/local/share/ca-certificates/%s.crt"
    update_commands: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return bool(self.filename_template)


@dataclass(frozen=True)
class NssDatabase:
    """A certificate database inside one browser profile."""

    kind: DatabaseKind
    profile: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.profile}"

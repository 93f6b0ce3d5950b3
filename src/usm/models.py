"""Domain models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from usm.desktop.document import Document
from usm.desktop.fields import EntryFields
from usm.errors import ParseError, UsmError


class Source(Enum):
    """Where an entry was loaded from. System entries are read-only by policy."""

    USER = "user"
    SYSTEM = "system"

    @property
    def label(self) -> str:
        return self.value


@dataclass
class Entry:
    """Semantic view of one autostart file, projected from its document."""

    path: Path | None
    source: Source
    document: Document
    name: str
    command: str
    enabled: bool
    localized_names: dict[str, str] = field(default_factory=dict)
    icon: str | None = None
    comment: str | None = None

    @classmethod
    def from_document(cls, path: Path | None, source: Source, document: Document) -> "Entry":
        fields = EntryFields(document)
        return cls(
            path=path,
            source=source,
            document=document,
            name=fields.get_name(),
            command=fields.get_command(),
            enabled=fields.get_enabled(),
            localized_names=fields.get_localized_names(),
            icon=fields.get_icon(),
            comment=fields.get_comment(),
        )

    @property
    def read_only(self) -> bool:
        return self.source is Source.SYSTEM

    @property
    def status_label(self) -> str:
        return "enabled" if self.enabled else "disabled"

    @property
    def file_name(self) -> str:
        return self.path.name if self.path is not None else ""

    def fields(self) -> EntryFields:
        """Field accessor over this entry's document, guarded for system entries."""
        return EntryFields(self.document, read_only=self.read_only)

    def matches(self, query: str) -> bool:
        """Return True if name, command or file name contains the query (case-insensitive)."""
        q = query.lower()
        return (
            q in self.name.lower() or q in self.command.lower() or q in self.file_name.lower()
        )


@dataclass
class EntryDraft:
    """User input for a new entry."""

    name: str
    command: str
    comment: str = ""
    icon: str = ""


class Field(Enum):
    NAME = "name"
    COMMAND = "command"
    ENABLED = "enabled"
    ICON = "icon"
    COMMENT = "comment"


@dataclass
class FilterConfig:
    """Which entries the list shows. Never mutates the entries it is applied to."""

    show_enabled: bool = True
    show_disabled: bool = True
    show_user: bool = True
    show_system: bool = True
    query: str = ""


class SortOrder(Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    STATUS = "status"
    SOURCE_USER_FIRST = "source-user-first"
    SOURCE_SYSTEM_FIRST = "source-system-first"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]


_SORT_LABELS = {
    SortOrder.NAME_ASC: "Name (A→Z)",
    SortOrder.NAME_DESC: "Name (Z→A)",
    SortOrder.STATUS: "Status (enabled first)",
    SortOrder.SOURCE_USER_FIRST: "Source (user first)",
    SortOrder.SOURCE_SYSTEM_FIRST: "Source (system first)",
}


@dataclass
class Result:
    """Outcome of one manager operation.

    ``error`` is set on failure and nothing was changed on disk. ``warnings``
    carries non-fatal problems (e.g. a stale file that could not be removed
    after a successful rename).
    """

    entry: Entry | None = None
    error: UsmError | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class LoadFailure:
    path: Path
    error: ParseError | OSError | UnicodeDecodeError


@dataclass
class LoadReport:
    """Entries loaded from both directories plus the files that were skipped."""

    entries: list[Entry] = field(default_factory=list)
    failures: list[LoadFailure] = field(default_factory=list)

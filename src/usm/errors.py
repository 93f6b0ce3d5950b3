"""Typed errors raised by the parser, field patcher, writer, and manager.

Core layers raise these; ``usm.manager`` turns them into ``Result`` values
for the UI to render.
"""

from pathlib import Path


class UsmError(Exception):
    """Base class for every error this package raises on purpose."""


class ParseError(UsmError):
    """Structurally invalid .desktop text. Aborts loading of that one file."""

    def __init__(self, message: str, line_no: int) -> None:
        super().__init__(f"line {line_no}: {message}")
        self.line_no = line_no


class MalformedGroupHeader(ParseError):
    """A ``[...]`` header with an empty name, nested brackets, or trailing text."""


class UnterminatedGroup(ParseError):
    """A line opening a group header with ``[`` but missing the closing ``]``."""


class KeyBeforeGroup(ParseError):
    """Content other than comments or blank lines before the first group header."""


class MutationRefused(UsmError):
    """A write was rejected before any I/O took place."""


class ReadOnlyEntry(MutationRefused):
    """Attempted mutation of a system-origin entry."""


class UnsafePath(MutationRefused):
    """Target path is outside the user autostart directory, a symlink, or not a file."""


class InvalidEntry(MutationRefused):
    """Draft values that cannot produce a usable entry (e.g. blank name)."""


class PersistError(UsmError):
    """I/O failure while persisting an entry."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class WriteFailed(PersistError):
    """Writing the temporary file failed. The destination is untouched."""


class CommitFailed(PersistError):
    """Renaming the temporary file onto the destination failed."""


class CleanupFailed(PersistError):
    """The stale file left by a rename could not be removed. Non-fatal."""


class DeleteFailed(PersistError):
    """Removing an entry's file failed."""

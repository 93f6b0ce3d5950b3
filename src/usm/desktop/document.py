"""In-memory model of a .desktop file that keeps its exact textual layout.

A ``Document`` is an optional byte-order mark and an optional preamble
(comments and blank lines before the first header) followed by ordered
``Group``s. Each group is an ordered list of lines: ``KeyValue``,
``Comment`` or ``Blank``. Every line remembers its own terminator so an
untouched document serializes back byte-for-byte.

Keys may repeat inside a group. Every occurrence keeps its position; lookups
return the last one.
"""

import copy
from dataclasses import dataclass, field


@dataclass
class KeyValue:
    """A ``key=value`` line.

    ``key`` is the stripped lookup key (e.g. ``Name[de]``). ``raw_key`` is the
    text before ``=`` exactly as read and ``gap`` the whitespace right after
    ``=``; both are reused verbatim when the value is patched.
    """

    key: str
    value: str
    raw_key: str | None = None
    gap: str = ""
    eol: str = "\n"


@dataclass
class Comment:
    """A ``#``/``;`` comment, or any other opaque text kept as-is."""

    text: str
    eol: str = "\n"


@dataclass
class Blank:
    """An empty or whitespace-only line."""

    text: str = ""
    eol: str = "\n"


Line = KeyValue | Comment | Blank


@dataclass
class Group:
    name: str
    lines: list[Line] = field(default_factory=list)
    header: str | None = None
    eol: str = "\n"

    def find_all(self, key: str) -> list[KeyValue]:
        """Return every ``KeyValue`` with this key, in file order."""
        return [line for line in self.lines if isinstance(line, KeyValue) and line.key == key]

    def find(self, key: str) -> KeyValue | None:
        """Return the last ``KeyValue`` with this key (last value wins)."""
        matches = self.find_all(key)
        return matches[-1] if matches else None

    def get(self, key: str) -> str | None:
        line = self.find(key)
        return line.value if line is not None else None

    def keys(self) -> list[str]:
        """Distinct keys in order of first appearance."""
        seen: dict[str, None] = {}
        for line in self.lines:
            if isinstance(line, KeyValue):
                seen.setdefault(line.key, None)
        return list(seen)

    def set(self, key: str, value: str) -> KeyValue:
        """Replace the value of ``key`` in place, or append a canonical line.

        Only the last occurrence of a repeated key is rewritten, so earlier
        occurrences keep both their position and their text.
        """
        line = self.find(key)
        if line is not None:
            line.value = value
            return line
        line = KeyValue(key=key, value=value)
        self.insert(self.insertion_index(), line)
        return line

    def remove(self, key: str) -> int:
        """Delete every line carrying ``key``. Returns how many were removed."""
        before = len(self.lines)
        self.lines = [
            line for line in self.lines if not (isinstance(line, KeyValue) and line.key == key)
        ]
        return before - len(self.lines)

    def insertion_index(self) -> int:
        """Where a new key goes: after the last key, ahead of trailing blanks/comments.

        In a group without keys the new line goes ahead of the trailing run of
        blank lines, so leading comments stay on top.
        """
        for index in range(len(self.lines) - 1, -1, -1):
            if isinstance(self.lines[index], KeyValue):
                return index + 1
        index = len(self.lines)
        while index > 0 and isinstance(self.lines[index - 1], Blank):
            index -= 1
        return index

    def insert(self, index: int, line: Line) -> None:
        # The line ahead of the insertion point may be the last line of a file
        # that had no trailing newline.
        if index == 0:
            if self.eol == "":
                self.eol = "\n"
        elif self.lines[index - 1].eol == "":
            self.lines[index - 1].eol = "\n"
        self.lines.insert(index, line)


@dataclass
class Document:
    groups: list[Group] = field(default_factory=list)
    preamble: list[Line] = field(default_factory=list)
    bom: str = ""

    def group(self, name: str) -> Group | None:
        """Return the first group called ``name``."""
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def ensure_group(self, name: str) -> Group:
        """Return the group called ``name``, appending an empty one if absent."""
        group = self.group(name)
        if group is not None:
            return group
        last = self._last_line()
        if last is not None and last.eol == "":
            last.eol = "\n"
        previous = self.groups[-1].lines if self.groups else []
        if previous and not isinstance(previous[-1], Blank):
            previous.append(Blank())
        group = Group(name=name)
        self.groups.append(group)
        return group

    def copy(self) -> "Document":
        return copy.deepcopy(self)

    def _last_line(self) -> Line | Group | None:
        if self.groups:
            group = self.groups[-1]
            return group.lines[-1] if group.lines else group
        return self.preamble[-1] if self.preamble else None

"""Typed access to the handful of [Desktop Entry] keys the editor manages.

Every setter touches exactly one key (``set_enabled`` also keeps an existing
``Hidden`` key consistent) and leaves the rest of the document alone. No I/O
happens here; persist with ``usm.storage.writer.commit``.
"""

import re

from usm.constants import (
    DEFAULT_NAME,
    DEFAULT_TYPE,
    DESKTOP_ENTRY_GROUP,
    KEY_AUTOSTART_ENABLED,
    KEY_COMMENT,
    KEY_EXEC,
    KEY_HIDDEN,
    KEY_ICON,
    KEY_NAME,
    KEY_TYPE,
)
from usm.desktop.document import Document, Group, KeyValue
from usm.errors import ReadOnlyEntry

_LOCALIZED_NAME = re.compile(r"^Name\[([^\]]+)\]$")


def _is_true(value: str) -> bool:
    return value.strip().lower() == "true"


def _bool_text(flag: bool) -> str:
    return "true" if flag else "false"


def localized_name_key(locale: str) -> str:
    return f"{KEY_NAME}[{locale}]"


class EntryFields:
    """Getter/setter view over the first ``[Desktop Entry]`` group of a document.

    Args:
        document: The document to read and patch in place.
        read_only: When True every setter raises ``ReadOnlyEntry``.
    """

    def __init__(self, document: Document, read_only: bool = False) -> None:
        self._document = document
        self.read_only = read_only

    @property
    def document(self) -> Document:
        return self._document

    def _group(self) -> Group | None:
        return self._document.group(DESKTOP_ENTRY_GROUP)

    def _get(self, key: str) -> str | None:
        group = self._group()
        return group.get(key) if group is not None else None

    def _check_writable(self) -> None:
        if self.read_only:
            raise ReadOnlyEntry("system autostart entries are read-only")

    def _writable_group(self) -> Group:
        self._check_writable()
        return self._document.ensure_group(DESKTOP_ENTRY_GROUP)

    def _set(self, key: str, value: str) -> None:
        self._writable_group().set(key, value)

    # Read side

    def get_name(self) -> str:
        name = self._get(KEY_NAME)
        return DEFAULT_NAME if name is None else name

    def get_localized_names(self) -> dict[str, str]:
        """Return ``{locale: name}`` for every ``Name[locale]`` key; last value wins."""
        group = self._group()
        names: dict[str, str] = {}
        if group is None:
            return names
        for line in group.lines:
            if not isinstance(line, KeyValue):
                continue
            match = _LOCALIZED_NAME.match(line.key)
            if match:
                names[match.group(1)] = line.value
        return names

    def get_command(self) -> str:
        return self._get(KEY_EXEC) or ""

    def get_enabled(self) -> bool:
        """Derive the enabled flag from ``Hidden`` and ``X-GNOME-Autostart-enabled``.

        Whichever of the two appears last in the group decides; an entry with
        neither key is enabled.
        """
        group = self._group()
        enabled = True
        if group is None:
            return enabled
        for line in group.lines:
            if not isinstance(line, KeyValue):
                continue
            if line.key == KEY_HIDDEN:
                enabled = not _is_true(line.value)
            elif line.key == KEY_AUTOSTART_ENABLED:
                enabled = _is_true(line.value)
        return enabled

    def get_icon(self) -> str | None:
        return self._get(KEY_ICON)

    def get_comment(self) -> str | None:
        return self._get(KEY_COMMENT)

    def get_type(self) -> str | None:
        return self._get(KEY_TYPE)

    # Write side

    def set_name(self, value: str) -> None:
        self._set(KEY_NAME, value)

    def set_localized_name(self, locale: str, value: str) -> None:
        self._set(localized_name_key(locale), value)

    def remove_localized_name(self, locale: str) -> bool:
        """Delete ``Name[locale]``. Returns False if there was nothing to delete."""
        self._check_writable()
        group = self._group()
        if group is None:
            return False
        return group.remove(localized_name_key(locale)) > 0

    def set_command(self, value: str) -> None:
        self._set(KEY_EXEC, value)

    def set_enabled(self, enabled: bool) -> None:
        group = self._writable_group()
        group.set(KEY_AUTOSTART_ENABLED, _bool_text(enabled))
        if group.find(KEY_HIDDEN) is not None:
            group.set(KEY_HIDDEN, _bool_text(not enabled))

    def set_icon(self, value: str) -> None:
        self._set(KEY_ICON, value)

    def set_comment(self, value: str) -> None:
        self._set(KEY_COMMENT, value)


def new_document(name: str, command: str) -> Document:
    """Build the document for a brand-new user autostart entry."""
    document = Document()
    group = document.ensure_group(DESKTOP_ENTRY_GROUP)
    group.set(KEY_TYPE, DEFAULT_TYPE)
    group.set(KEY_NAME, name)
    group.set(KEY_EXEC, command)
    group.set(KEY_AUTOSTART_ENABLED, "true")
    group.set(KEY_HIDDEN, "false")
    return document

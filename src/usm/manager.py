"""Operations the UI and CLI perform on autostart entries.

Every public method returns a ``Result`` instead of raising, so a failed
write never takes the caller down. The entry list a caller holds is never
mutated here; call ``load()`` again after a successful change.

Edits re-read the entry's file right before writing and apply the requested
field changes to that fresh document, so an edit never overwrites changes
made to the file since it was loaded. Callers run one operation at a time
per entry (the TUI runs them on its event loop, the CLI one per process).
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from usm.constants import SYSTEM_AUTOSTART_DIR, USER_AUTOSTART_DIR
from usm.desktop.document import Document
from usm.desktop.fields import EntryFields, new_document
from usm.domain.slug import slugify
from usm.errors import InvalidEntry, ReadOnlyEntry, UsmError, WriteFailed
from usm.models import Entry, EntryDraft, Field, LoadReport, Result, Source
from usm.storage.loader import is_user_owned, load_entries, read_document, validate_user_path
from usm.storage.writer import commit, remove, unique_path

logger = logging.getLogger(__name__)

FieldValue = str | bool


def _clean_text(label: str, value: str, required: bool) -> str:
    value = value.strip()
    if required and not value:
        raise InvalidEntry(f"{label} cannot be empty")
    if "\n" in value or "\r" in value:
        raise InvalidEntry(f"{label} must be a single line")
    return value


def _set_field(fields: EntryFields, field: Field, value: FieldValue) -> None:
    if field is Field.ENABLED:
        fields.set_enabled(bool(value))
    elif field is Field.NAME:
        fields.set_name(_clean_text("Name", str(value), required=True))
    elif field is Field.COMMAND:
        fields.set_command(_clean_text("Command", str(value), required=True))
    elif field is Field.ICON:
        fields.set_icon(_clean_text("Icon", str(value), required=False))
    elif field is Field.COMMENT:
        fields.set_comment(_clean_text("Comment", str(value), required=False))


class StartupManager:
    """Loads and mutates entries in a user and a system autostart directory.

    Args:
        user_dir: Writable autostart directory.
        system_dir: System-wide autostart directory, read-only by policy.
    """

    def __init__(
        self,
        user_dir: Path = USER_AUTOSTART_DIR,
        system_dir: Path = SYSTEM_AUTOSTART_DIR,
    ) -> None:
        self.user_dir = user_dir
        self.system_dir = system_dir

    def load(self) -> LoadReport:
        """Read both directories afresh."""
        return load_entries(self.user_dir, self.system_dir)

    def can_modify(self, entry: Entry) -> bool:
        """True for user entries whose file is a regular file inside the user directory."""
        if entry.read_only or entry.path is None:
            return False
        return is_user_owned(entry.path, self.user_dir)

    def create(self, draft: EntryDraft) -> Result:
        return self._run("create", self._create, draft)

    def update(self, entry: Entry, field: Field, value: FieldValue) -> Result:
        return self.apply(entry, {field: value})

    def apply(
        self,
        entry: Entry,
        changes: Mapping[Field, FieldValue],
        localized_names: Mapping[str, str | None] | None = None,
    ) -> Result:
        """Apply several field edits to one entry and write once.

        ``localized_names`` maps a locale to its new name, or to None to remove
        that ``Name[locale]`` key.
        """
        return self._run("update", self._apply, entry, changes, localized_names or {})

    def toggle(self, entry: Entry) -> Result:
        return self.update(entry, Field.ENABLED, not entry.enabled)

    def delete(self, entry: Entry) -> Result:
        return self._run("delete", self._delete, entry)

    def _run(self, label: str, operation: Callable[..., Result], *args: object) -> Result:
        try:
            return operation(*args)
        except UsmError as exc:
            logger.warning("Could not %s entry: %s", label, exc)
            return Result(error=exc)

    def _writable_path(self, entry: Entry) -> Path:
        if entry.read_only:
            raise ReadOnlyEntry(f"{entry.name} is a system entry and cannot be modified")
        if entry.path is None:
            raise InvalidEntry(f"{entry.name} has no file on disk")
        return validate_user_path(entry.path, self.user_dir)

    def _fresh_document(self, entry: Entry, path: Path) -> Document:
        try:
            return read_document(path)
        except FileNotFoundError:
            return entry.document.copy()
        except (OSError, UnicodeDecodeError) as exc:
            raise WriteFailed(f"Re-reading {path.name} failed: {exc}", path) from exc

    def _create(self, draft: EntryDraft) -> Result:
        name = _clean_text("Name", draft.name, required=True)
        command = _clean_text("Command", draft.command, required=True)
        destination = validate_user_path(unique_path(self.user_dir, slugify(name)), self.user_dir)

        document = new_document(name, command)
        fields = EntryFields(document)
        comment = _clean_text("Comment", draft.comment, required=False)
        icon = _clean_text("Icon", draft.icon, required=False)
        if comment:
            fields.set_comment(comment)
        if icon:
            fields.set_icon(icon)

        commit(document, destination)
        logger.info("Created %s", destination)
        return Result(entry=Entry.from_document(destination, Source.USER, document))

    def _apply(
        self,
        entry: Entry,
        changes: Mapping[Field, FieldValue],
        localized_names: Mapping[str, str | None],
    ) -> Result:
        path = self._writable_path(entry)
        document = self._fresh_document(entry, path)
        fields = EntryFields(document)
        for field, value in changes.items():
            _set_field(fields, field, value)
        for locale, value in localized_names.items():
            if value is None:
                fields.remove_localized_name(locale)
            else:
                fields.set_localized_name(locale, _clean_text("Name", value, required=True))

        destination = path
        new_name = fields.get_name()
        if Field.NAME in changes and slugify(new_name) != slugify(entry.name):
            destination = validate_user_path(
                unique_path(self.user_dir, slugify(new_name), own_path=path), self.user_dir
            )

        report = commit(document, destination, previous=path)
        warnings = [str(report.cleanup_error)] if report.cleanup_error is not None else []
        return Result(
            entry=Entry.from_document(destination, Source.USER, document),
            warnings=warnings,
        )

    def _delete(self, entry: Entry) -> Result:
        path = self._writable_path(entry)
        remove(path)
        return Result(entry=entry)

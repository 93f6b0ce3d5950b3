"""Read autostart directories into entries, tolerating broken files."""

import logging
from pathlib import Path

from usm.constants import DESKTOP_SUFFIX
from usm.desktop.document import Document
from usm.desktop.parser import parse
from usm.errors import ParseError, UnsafePath
from usm.models import Entry, LoadFailure, LoadReport, Source

logger = logging.getLogger(__name__)


def read_document(path: Path) -> Document:
    """Parse the file at ``path``.

    Bytes are decoded as UTF-8 without newline translation so ``\\r\\n``
    files round-trip unchanged.
    """
    return parse(path.read_bytes().decode("utf-8"))


def load_entry(path: Path, source: Source) -> Entry:
    return Entry.from_document(path, source, read_document(path))


def load_dir(directory: Path, source: Source) -> LoadReport:
    """Load every ``*.desktop`` regular file in ``directory``, sorted by file name.

    A file that cannot be read or parsed is recorded as a ``LoadFailure`` and
    the scan carries on. A directory that cannot be listed is recorded the
    same way. A missing directory is simply empty.
    """
    report = LoadReport()
    if not directory.is_dir():
        logger.debug("Autostart directory %s does not exist", directory)
        return report

    try:
        paths = sorted(directory.iterdir())
    except OSError as exc:
        logger.warning("Cannot list %s: %s", directory, exc)
        report.failures.append(LoadFailure(path=directory, error=exc))
        return report

    for path in paths:
        if path.suffix != DESKTOP_SUFFIX or not path.is_file():
            continue
        try:
            report.entries.append(load_entry(path, source))
        except (ParseError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            report.failures.append(LoadFailure(path=path, error=exc))
    return report


def load_entries(user_dir: Path, system_dir: Path) -> LoadReport:
    """Return user entries followed by system entries, freshly read from disk."""
    report = LoadReport()
    for directory, source in ((user_dir, Source.USER), (system_dir, Source.SYSTEM)):
        part = load_dir(directory, source)
        report.entries.extend(part.entries)
        report.failures.extend(part.failures)
    logger.info(
        "Loaded %d entries (%d skipped) from %s and %s",
        len(report.entries),
        len(report.failures),
        user_dir,
        system_dir,
    )
    return report


def validate_user_path(path: Path, user_dir: Path) -> Path:
    """Return ``path`` if it is safe to write or delete, else raise ``UnsafePath``.

    The file must sit directly inside ``user_dir`` and must not be a symlink;
    if it already exists it must be a regular file.
    """
    if path.parent.resolve() != user_dir.resolve():
        raise UnsafePath(f"{path} is outside the user autostart directory")
    if path.is_symlink():
        raise UnsafePath(f"Refusing to modify symlinked entry {path.name}")
    if path.exists() and not path.is_file():
        raise UnsafePath(f"{path.name} is not a regular file")
    return path


def is_user_owned(path: Path, user_dir: Path) -> bool:
    try:
        validate_user_path(path, user_dir)
    except UnsafePath:
        return False
    return path.is_file()

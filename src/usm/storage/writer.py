"""Atomic persistence of documents: write a temp file, then rename it into place.

The temp file lives in the destination's directory so ``os.replace`` never
crosses filesystems. A reader sees either the old file or the new one, never
a partial write.
"""

import contextlib
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path

from usm.constants import DESKTOP_SUFFIX
from usm.desktop.document import Document
from usm.desktop.serializer import serialize
from usm.errors import CleanupFailed, CommitFailed, DeleteFailed, WriteFailed

logger = logging.getLogger(__name__)

TEMP_PREFIX = ".usm-"
_DEFAULT_MODE = 0o644


@dataclass
class CommitReport:
    path: Path
    cleanup_error: CleanupFailed | None = None


def _target_mode(destination: Path) -> int:
    try:
        return stat.S_IMODE(destination.stat().st_mode)
    except FileNotFoundError:
        return _DEFAULT_MODE


def _write_temp(data: bytes, destination: Path) -> Path:
    """Write ``data`` to a synced temp file next to ``destination``."""
    tmp_path: Path | None = None
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=destination.parent,
            prefix=TEMP_PREFIX,
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_path = Path(handle.name)
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, _target_mode(destination))
    except OSError as exc:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
        raise WriteFailed(f"Writing {destination.name} failed: {exc}", destination) from exc
    return tmp_path


def commit(document: Document, destination: Path, previous: Path | None = None) -> CommitReport:
    """Atomically replace ``destination`` with the serialized ``document``.

    If ``previous`` is given and differs from ``destination`` (the entry moved
    to a new file name) it is deleted only after the rename succeeded.

    Raises:
        WriteFailed: the temp file could not be written; ``destination`` is untouched.
        CommitFailed: the rename failed; ``destination`` is untouched and the
            temp file is left behind.

    A failure to delete ``previous`` is logged and returned in the report as
    ``CleanupFailed``; the new file stays in place.
    """
    tmp_path = _write_temp(serialize(document).encode("utf-8"), destination)
    try:
        os.replace(tmp_path, destination)
    except OSError as exc:
        raise CommitFailed(
            f"Replacing {destination.name} failed: {exc} (temporary file left at {tmp_path})",
            destination,
        ) from exc
    logger.info("Wrote %s", destination)

    report = CommitReport(path=destination)
    if previous is not None and previous != destination:
        try:
            previous.unlink(missing_ok=True)
        except OSError as exc:
            report.cleanup_error = CleanupFailed(
                f"Saved {destination.name} but could not remove old file {previous.name}: {exc}",
                previous,
            )
            logger.warning("%s", report.cleanup_error)
        else:
            logger.info("Removed stale %s", previous)
    return report


def remove(path: Path) -> None:
    """Delete an entry's file. A file that is already gone counts as removed."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise DeleteFailed(f"Removing {path.name} failed: {exc}", path) from exc
    logger.info("Removed %s", path)


def unique_path(directory: Path, base: str, own_path: Path | None = None) -> Path:
    """Return the first free ``base.desktop``, ``base-2.desktop``, ... in ``directory``.

    ``own_path`` (the file of the entry being edited) always counts as free.
    """
    candidate = directory / f"{base}{DESKTOP_SUFFIX}"
    counter = 2
    while candidate != own_path and (candidate.exists() or candidate.is_symlink()):
        candidate = directory / f"{base}-{counter}{DESKTOP_SUFFIX}"
        counter += 1
    return candidate

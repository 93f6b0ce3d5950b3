"""Unit tests for usm.storage.writer — atomic commit, cleanup and file naming."""

import os
import stat
from pathlib import Path

import pytest

from usm.desktop.fields import new_document
from usm.desktop.parser import parse
from usm.errors import CleanupFailed, CommitFailed, DeleteFailed, WriteFailed
from usm.storage.writer import TEMP_PREFIX, commit, remove, unique_path

OLD = "[Desktop Entry]\nName=Old\nExec=old\n"


def _temp_files(directory: Path) -> list[Path]:
    return sorted(directory.glob(f"{TEMP_PREFIX}*"))


class TestCommit:
    def test_writes_serialized_document(self, tmp_path):
        """
        Given a document and a fresh destination
        When committed
        Then the file holds exactly the serialized text and no temp file is left
        """
        destination = tmp_path / "app.desktop"
        report = commit(new_document("App", "app"), destination)
        assert report.path == destination
        assert report.cleanup_error is None
        assert destination.read_text().startswith("[Desktop Entry]\nType=Application\n")
        assert _temp_files(tmp_path) == []

    def test_replaces_existing_file(self, tmp_path):
        destination = tmp_path / "app.desktop"
        destination.write_text(OLD)
        document = parse(OLD)
        document.group("Desktop Entry").set("Exec", "new")
        commit(document, destination)
        assert destination.read_text() == OLD.replace("Exec=old", "Exec=new")

    def test_creates_missing_directory(self, tmp_path):
        """
        Given a destination inside a directory that does not exist yet
        When committed
        Then the directory is created
        """
        destination = tmp_path / "config" / "autostart" / "app.desktop"
        commit(new_document("App", "app"), destination)
        assert destination.is_file()

    def test_crlf_bytes_are_written_verbatim(self, tmp_path):
        destination = tmp_path / "dos.desktop"
        text = "[Desktop Entry]\r\nName=Dos\r\n"
        commit(parse(text), destination)
        assert destination.read_bytes() == text.encode()

    def test_new_file_mode(self, tmp_path):
        destination = tmp_path / "app.desktop"
        commit(new_document("App", "app"), destination)
        assert stat.S_IMODE(destination.stat().st_mode) == 0o644

    def test_existing_file_mode_is_kept(self, tmp_path):
        """
        Given an existing file with mode 0600
        When it is replaced
        Then the new file has the same mode
        """
        destination = tmp_path / "app.desktop"
        destination.write_text(OLD)
        destination.chmod(0o600)
        commit(parse(OLD), destination)
        assert stat.S_IMODE(destination.stat().st_mode) == 0o600


class TestCommitFailures:
    def test_write_failure_leaves_destination_untouched(self, tmp_path, monkeypatch):
        """
        Given a failing fsync
        When a commit is attempted
        Then WriteFailed is raised, the old content remains, and the temp file is gone
        """
        destination = tmp_path / "app.desktop"
        destination.write_text(OLD)

        def boom(fd):
            raise OSError(5, "Input/output error")

        monkeypatch.setattr(os, "fsync", boom)
        with pytest.raises(WriteFailed) as info:
            commit(new_document("New", "new"), destination)
        assert info.value.path == destination
        assert destination.read_text() == OLD
        assert _temp_files(tmp_path) == []

    def test_unwritable_directory_raises_write_failed(self, tmp_path, monkeypatch):
        destination = tmp_path / "app.desktop"

        def refuse(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("usm.storage.writer.tempfile.NamedTemporaryFile", refuse)
        with pytest.raises(WriteFailed):
            commit(new_document("New", "new"), destination)
        assert not destination.exists()

    def test_rename_failure_raises_commit_failed(self, tmp_path, monkeypatch):
        """
        Given a failing os.replace
        When a commit is attempted
        Then CommitFailed is raised, the destination is untouched, and the
        temp file is left for inspection
        """
        destination = tmp_path / "app.desktop"
        destination.write_text(OLD)

        def refuse(src, dst):
            raise OSError(18, "Invalid cross-device link")

        monkeypatch.setattr(os, "replace", refuse)
        with pytest.raises(CommitFailed) as info:
            commit(new_document("New", "new"), destination)
        assert destination.read_text() == OLD
        leftovers = _temp_files(tmp_path)
        assert len(leftovers) == 1
        assert str(leftovers[0]) in str(info.value)

    def test_rename_failure_keeps_previous(self, tmp_path, monkeypatch):
        previous = tmp_path / "old.desktop"
        previous.write_text(OLD)

        def refuse(src, dst):
            raise OSError("nope")

        monkeypatch.setattr(os, "replace", refuse)
        with pytest.raises(CommitFailed):
            commit(parse(OLD), tmp_path / "new.desktop", previous=previous)
        assert previous.read_text() == OLD


class TestCommitWithPrevious:
    def test_previous_removed_after_new_file_is_in_place(self, tmp_path, monkeypatch):
        """
        Given an entry moving from old.desktop to new.desktop
        When committed
        Then old.desktop still exists at the moment of the rename and is gone afterwards
        """
        previous = tmp_path / "old.desktop"
        previous.write_text(OLD)
        destination = tmp_path / "new.desktop"
        seen = []
        real_replace = os.replace

        def spy(src, dst):
            seen.append(previous.exists())
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", spy)
        report = commit(parse(OLD), destination, previous=previous)
        assert seen == [True]
        assert destination.read_text() == OLD
        assert not previous.exists()
        assert report.cleanup_error is None

    def test_previous_equal_to_destination_is_kept(self, tmp_path):
        destination = tmp_path / "app.desktop"
        destination.write_text(OLD)
        commit(parse(OLD), destination, previous=destination)
        assert destination.read_text() == OLD

    def test_cleanup_failure_is_reported_not_raised(self, tmp_path, monkeypatch):
        """
        Given an old file that cannot be deleted
        When the commit succeeds
        Then the report carries CleanupFailed and the new file exists
        """
        previous = tmp_path / "old.desktop"
        previous.write_text(OLD)
        destination = tmp_path / "new.desktop"
        real_unlink = Path.unlink

        def guarded_unlink(self, missing_ok=False):
            if self == previous:
                raise PermissionError(13, "Permission denied")
            return real_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(Path, "unlink", guarded_unlink)
        report = commit(parse(OLD), destination, previous=previous)
        assert isinstance(report.cleanup_error, CleanupFailed)
        assert report.cleanup_error.path == previous
        assert destination.exists()
        assert previous.exists()


class TestRemove:
    def test_removes_file(self, tmp_path):
        path = tmp_path / "app.desktop"
        path.write_text(OLD)
        remove(path)
        assert not path.exists()

    def test_missing_file_is_fine(self, tmp_path):
        remove(tmp_path / "gone.desktop")

    def test_failure_raises_delete_failed(self, tmp_path, monkeypatch):
        path = tmp_path / "app.desktop"
        path.write_text(OLD)

        def refuse(self, missing_ok=False):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "unlink", refuse)
        with pytest.raises(DeleteFailed):
            remove(path)


class TestUniquePath:
    def test_free_name(self, tmp_path):
        assert unique_path(tmp_path, "app") == tmp_path / "app.desktop"

    def test_numeric_suffixes(self, tmp_path):
        """
        Given app.desktop and app-2.desktop already exist
        When a unique path is requested
        Then app-3.desktop is returned
        """
        (tmp_path / "app.desktop").write_text(OLD)
        (tmp_path / "app-2.desktop").write_text(OLD)
        assert unique_path(tmp_path, "app") == tmp_path / "app-3.desktop"

    def test_own_path_counts_as_free(self, tmp_path):
        own = tmp_path / "app.desktop"
        own.write_text(OLD)
        assert unique_path(tmp_path, "app", own_path=own) == own

    def test_dangling_symlink_is_taken(self, tmp_path):
        (tmp_path / "app.desktop").symlink_to(tmp_path / "missing")
        assert unique_path(tmp_path, "app") == tmp_path / "app-2.desktop"

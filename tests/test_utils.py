"""
Tests for filesystem helpers.

These tests verify path normalization, rename failure classification,
and the copy+delete fallback.
"""

import errno
import os
import shutil
from pathlib import Path

import pytest

from regex_file_mover.errors import RelocationError
from regex_file_mover.types import RenameFailure
from regex_file_mover.utils import (
    classify_rename_error,
    copy_and_delete,
    format_os_error,
    normalize_path,
)


@pytest.fixture
def temp_dirs(tmp_path):
    """Create source and target folders with one file in the source."""
    source = tmp_path / "source"
    target = tmp_path / "target"
    source.mkdir()
    target.mkdir()
    (source / "test_file.bin").write_bytes(b"test content\x00\x01\x02" * 1000)
    return {"source": source, "target": target, "root": tmp_path}


class TestNormalizePath:
    """Tests for normalize_path function."""

    def test_path_object_converted_to_string(self):
        """Path objects should be converted to strings."""
        result = normalize_path(Path("/some/path"))
        assert isinstance(result, str)

    def test_relative_path_becomes_absolute(self):
        """Relative paths should be converted to absolute."""
        result = normalize_path("relative/path")
        assert os.path.isabs(result)

    def test_home_expanded(self):
        """~ should be expanded to the user's home."""
        result = normalize_path("~")
        assert "~" not in result
        assert os.path.isabs(result)

    def test_path_with_spaces(self, tmp_path):
        """Paths with spaces should be kept intact."""
        spaced = str(tmp_path / "path with spaces")
        assert "with spaces" in normalize_path(spaced)


class TestClassifyRenameError:
    """Tests for classify_rename_error function."""

    def test_cross_device(self):
        """EXDEV is a cross-device failure."""
        error = OSError(errno.EXDEV, "Invalid cross-device link")
        assert classify_rename_error(error) == RenameFailure.CROSS_DEVICE

    def test_file_exists(self):
        """FileExistsError means the destination is taken."""
        error = FileExistsError(errno.EEXIST, "File exists")
        assert classify_rename_error(error) == RenameFailure.DEST_EXISTS

    def test_directory_not_empty(self):
        """ENOTEMPTY means the destination is taken."""
        error = OSError(errno.ENOTEMPTY, "Directory not empty")
        assert classify_rename_error(error) == RenameFailure.DEST_EXISTS

    def test_permission_denied_is_other(self):
        """Permission errors are neither exists nor cross-device."""
        error = PermissionError(errno.EACCES, "Permission denied")
        assert classify_rename_error(error) == RenameFailure.OTHER

    def test_missing_source_is_other(self):
        """Missing source is an OTHER failure."""
        error = FileNotFoundError(errno.ENOENT, "No such file or directory")
        assert classify_rename_error(error) == RenameFailure.OTHER

    def test_windows_not_same_device(self):
        """WinError 17 is a cross-device failure."""
        error = OSError(errno.EINVAL, "The system cannot move the file to a different disk drive")
        error.winerror = 17
        assert classify_rename_error(error) == RenameFailure.CROSS_DEVICE

    def test_windows_already_exists(self):
        """WinError 183 means the destination is taken."""
        error = OSError(errno.EINVAL, "Cannot create a file when that file already exists")
        error.winerror = 183
        assert classify_rename_error(error) == RenameFailure.DEST_EXISTS


class TestCopyAndDelete:
    """Tests for copy_and_delete function."""

    def test_copy_and_delete_success(self, temp_dirs):
        """Destination is byte-identical and source is gone."""
        src = temp_dirs["source"] / "test_file.bin"
        dest = temp_dirs["target"] / "test_file.bin"
        original = src.read_bytes()

        copy_and_delete(src, dest)

        assert dest.read_bytes() == original
        assert not src.exists()

    def test_empty_file(self, temp_dirs):
        """Empty files are copied."""
        src = temp_dirs["source"] / "empty.txt"
        src.write_bytes(b"")
        dest = temp_dirs["target"] / "empty.txt"

        copy_and_delete(src, dest)

        assert dest.exists()
        assert dest.read_bytes() == b""
        assert not src.exists()

    def test_existing_destination_not_overwritten(self, temp_dirs):
        """An existing destination is left alone and the source kept."""
        src = temp_dirs["source"] / "test_file.bin"
        dest = temp_dirs["target"] / "test_file.bin"
        dest.write_bytes(b"keep me")

        with pytest.raises(RelocationError) as exc_info:
            copy_and_delete(src, dest)

        assert exc_info.value.step == "create_dest"
        assert isinstance(exc_info.value.cause, FileExistsError)
        assert dest.read_bytes() == b"keep me"
        assert src.exists()

    def test_missing_source(self, temp_dirs):
        """Missing source fails at open_source and creates nothing."""
        src = temp_dirs["source"] / "missing.txt"
        dest = temp_dirs["target"] / "missing.txt"

        with pytest.raises(RelocationError) as exc_info:
            copy_and_delete(src, dest)

        assert exc_info.value.step == "open_source"
        assert not dest.exists()

    def test_missing_target_folder(self, temp_dirs):
        """Missing target folder fails at create_dest."""
        src = temp_dirs["source"] / "test_file.bin"
        dest = temp_dirs["root"] / "no_such_dir" / "test_file.bin"

        with pytest.raises(RelocationError) as exc_info:
            copy_and_delete(src, dest)

        assert exc_info.value.step == "create_dest"
        assert src.exists()

    def test_copy_failure_removes_partial(self, temp_dirs, monkeypatch):
        """A failed copy removes the partial destination and keeps the source."""
        src = temp_dirs["source"] / "test_file.bin"
        dest = temp_dirs["target"] / "test_file.bin"
        original = src.read_bytes()

        def failing_copy(fsrc, fdst, length=0):
            fdst.write(b"partial")
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(shutil, "copyfileobj", failing_copy)

        with pytest.raises(RelocationError) as exc_info:
            copy_and_delete(src, dest)

        assert exc_info.value.step == "copy"
        assert not dest.exists()
        assert src.read_bytes() == original

    def test_delete_failure_leaves_duplicate(self, temp_dirs, monkeypatch):
        """If the source can't be deleted, both copies remain."""
        src = temp_dirs["source"] / "test_file.bin"
        dest = temp_dirs["target"] / "test_file.bin"
        original = src.read_bytes()
        real_remove = os.remove

        def failing_remove(path, *args, **kwargs):
            if str(path) == str(src):
                raise PermissionError(errno.EACCES, "Permission denied")
            return real_remove(path, *args, **kwargs)

        monkeypatch.setattr(os, "remove", failing_remove)

        with pytest.raises(RelocationError) as exc_info:
            copy_and_delete(src, dest)

        assert exc_info.value.step == "delete_source"
        assert isinstance(exc_info.value.cause, PermissionError)
        assert src.read_bytes() == original
        assert dest.read_bytes() == original


class TestFormatOsError:
    """Tests for format_os_error function."""

    def test_plain_error(self):
        """Errors without winerror are just str(e)."""
        error = OSError(errno.EACCES, "Permission denied")
        assert format_os_error(error) == str(error)

    def test_windows_error_code(self):
        """winerror is prefixed when present."""
        error = OSError(errno.EACCES, "Access is denied")
        error.winerror = 5
        assert format_os_error(error).startswith("[WinError 5]")

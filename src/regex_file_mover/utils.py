"""
Filesystem helpers for relocating a single file.

This module provides:
- normalize_path(): Absolute, normalized form of a user-supplied path
- classify_rename_error(): Sort a failed os.rename into RenameFailure kinds
- copy_and_delete(): Stream a file to its destination, then remove the source
- format_os_error(): Readable error text, with the Windows error code if any
"""

import errno
import logging
import os
import shutil
from pathlib import Path
from typing import Union

from .errors import RelocationError
from .types import RenameFailure

logger = logging.getLogger(__name__)

# Windows: ERROR_NOT_SAME_DEVICE, ERROR_ALREADY_EXISTS, ERROR_FILE_EXISTS
WINERROR_NOT_SAME_DEVICE = 17
WINERROR_EXISTS = (80, 183)

COPY_BUFFER_SIZE = 1024 * 1024


def normalize_path(path: Union[str, Path]) -> str:
    """
    Normalize a path to absolute form.

    User home (~) is expanded. Falls back to os.path.abspath when the
    path cannot be resolved.

    Args:
        path: A file path as string or Path object

    Returns:
        Normalized absolute path as string
    """
    path_str = os.path.expanduser(str(path))
    try:
        return str(Path(path_str).resolve())
    except (OSError, ValueError):
        return os.path.abspath(os.path.normpath(path_str))


def classify_rename_error(error: OSError) -> RenameFailure:
    """
    Decide what kind of failure an os.rename error is.

    Args:
        error: The OSError raised by os.rename

    Returns:
        DEST_EXISTS if something already occupies the destination,
        CROSS_DEVICE if source and destination are on different volumes,
        OTHER for anything else
    """
    winerror = getattr(error, "winerror", None)

    if isinstance(error, FileExistsError) or error.errno in (errno.EEXIST, errno.ENOTEMPTY):
        return RenameFailure.DEST_EXISTS
    if winerror in WINERROR_EXISTS:
        return RenameFailure.DEST_EXISTS

    if error.errno == errno.EXDEV or winerror == WINERROR_NOT_SAME_DEVICE:
        return RenameFailure.CROSS_DEVICE

    return RenameFailure.OTHER


def copy_and_delete(src: Union[str, Path], dest: Union[str, Path]) -> None:
    """
    Move a file by copying its bytes and then deleting the source.

    The destination is created exclusively, so an existing file is never
    overwritten. If the copy fails, the partial destination file is removed.
    If the copy succeeds but the source cannot be deleted, the destination
    is kept and the file exists in both places.

    Args:
        src: Source file path
        dest: Destination file path (must not exist)

    Raises:
        RelocationError: step is one of "open_source", "create_dest",
                         "copy" or "delete_source". For "create_dest" caused
                         by an existing file, cause is a FileExistsError.
    """
    src = str(src)
    dest = str(dest)
    name = os.path.basename(src)

    try:
        source_file = open(src, "rb")
    except OSError as e:
        raise RelocationError(name, "open_source", e) from e

    with source_file:
        try:
            dest_file = open(dest, "xb")
        except OSError as e:
            raise RelocationError(name, "create_dest", e) from e

        try:
            with dest_file:
                shutil.copyfileobj(source_file, dest_file, COPY_BUFFER_SIZE)
        except OSError as e:
            _cleanup_partial_copy(dest)
            raise RelocationError(name, "copy", e) from e

    # Keep permission bits and timestamps; not fatal if the target volume
    # does not support them
    try:
        shutil.copystat(src, dest)
    except OSError as e:
        logger.debug(f"Could not copy metadata to {dest}: {e}")

    try:
        os.remove(src)
    except OSError as e:
        logger.debug(
            f"Copied {src} to {dest} but could not delete the source; "
            f"file now exists in both folders: {e}"
        )
        raise RelocationError(name, "delete_source", e) from e

    logger.debug(f"Copied and deleted {src} -> {dest}")


def _cleanup_partial_copy(dest: str) -> None:
    """Attempt to remove a partially written destination file."""
    try:
        if os.path.exists(dest):
            os.remove(dest)
            logger.debug(f"Cleaned up partial copy at {dest}")
    except OSError as e:
        logger.warning(f"Could not clean up partial copy at {dest}: {e}")


def format_os_error(e: BaseException) -> str:
    """
    Format an OS error with its Windows error code if available.

    Args:
        e: The exception to format

    Returns:
        Formatted error string
    """
    error_code = getattr(e, "winerror", None)
    if error_code is not None:
        return f"[WinError {error_code}] {e}"
    return str(e)

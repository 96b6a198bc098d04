"""
File mover for relocating matched files to the target folder.

This module is responsible for:
- Moving a single file with os.rename, the cheap same-volume path
- Falling back to copy+delete when the rename fails (e.g. across volumes)
- Never overwriting an existing file at the destination
- Supporting dry-run mode (no actual moves)
- Catching and recording per-file errors without stopping the batch
- Returning detailed results for reporting
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Union

from .errors import RelocationError
from .types import MoveResult, MoveStatus, RenameFailure
from .utils import classify_rename_error, copy_and_delete, format_os_error

logger = logging.getLogger(__name__)


def _skipped(file_name: str, src: str, dest: str) -> MoveResult:
    logger.debug(f"File '{file_name}' already exists in the target folder, skipping")
    return MoveResult(
        file_name=file_name,
        source_path=src,
        dest_path=dest,
        status=MoveStatus.SKIPPED_EXISTS,
        message="Destination already exists"
    )


def relocate_file(
    file_name: str,
    source_folder: Union[str, Path],
    target_folder: Union[str, Path],
    dry_run: bool = False
) -> MoveResult:
    """
    Move one file from source_folder to target_folder.

    Handles:
    - Existing destination (skips with SKIPPED_EXISTS, nothing touched)
    - Same-volume moves via os.rename
    - Cross-volume and other rename failures via copy+delete
    - Copy succeeded but source delete failed (FAILED, duplicate left behind)

    Args:
        file_name: Name of the file inside source_folder
        source_folder: Folder the file is in
        target_folder: Folder to move it to
        dry_run: If True, report what would happen without moving

    Returns:
        MoveResult with status and details
    """
    src = os.path.join(str(source_folder), file_name)
    dest = os.path.join(str(target_folder), file_name)

    # lexists so a dangling symlink at the destination also counts
    if os.path.lexists(dest):
        return _skipped(file_name, src, dest)

    if dry_run:
        logger.debug(f"[DRY RUN] {src} -> {dest}")
        return MoveResult(
            file_name=file_name,
            source_path=src,
            dest_path=dest,
            status=MoveStatus.DRY_RUN,
            message=f"Would move to {dest}"
        )

    try:
        os.rename(src, dest)
    except OSError as e:
        rename_error = e
        failure = classify_rename_error(e)
    else:
        logger.debug(f"Moved: {file_name}")
        return MoveResult(
            file_name=file_name,
            source_path=src,
            dest_path=dest,
            status=MoveStatus.MOVED,
            message="Moved successfully",
            method="rename"
        )

    if failure == RenameFailure.DEST_EXISTS:
        # Appeared between the existence check and the rename
        return _skipped(file_name, src, dest)

    if failure == RenameFailure.CROSS_DEVICE:
        logger.info(f"Cross-volume move detected for '{file_name}', using copy+delete")
    else:
        logger.warning(f"Rename failed for '{file_name}' ({rename_error}), attempting copy+delete")

    try:
        copy_and_delete(src, dest)
    except RelocationError as err:
        if err.step == "create_dest" and isinstance(err.cause, FileExistsError):
            return _skipped(file_name, src, dest)

        if err.step == "delete_source":
            message = (
                f"Copied to destination but could not delete source; "
                f"file now exists in both folders: {format_os_error(err.cause)}"
            )
        else:
            message = f"{err.step}: {format_os_error(err.cause)}"

        logger.debug(f"Error moving file '{file_name}': {message}")
        return MoveResult(
            file_name=file_name,
            source_path=src,
            dest_path=dest if err.step == "delete_source" else None,
            status=MoveStatus.FAILED,
            message=message
        )

    logger.debug(f"Moved: {file_name} (via copy+delete)")
    return MoveResult(
        file_name=file_name,
        source_path=src,
        dest_path=dest,
        status=MoveStatus.MOVED,
        message="Moved successfully (via copy+delete)",
        method="copy"
    )


class FileMover:
    """
    Moves files from one source folder into a target folder.

    Supports dry-run mode for previewing operations and keeps per-status
    statistics across calls.
    """

    def __init__(
        self,
        source_folder: Union[str, Path],
        target_folder: Union[str, Path],
        dry_run: bool = False
    ):
        """
        Initialize the mover.

        Args:
            source_folder: Folder the files are taken from
            target_folder: Folder the files are moved into
            dry_run: If True, simulate moves without actually performing them
        """
        self.source_folder = Path(source_folder)
        self.target_folder = Path(target_folder)
        self.dry_run = dry_run

        self._stats: Dict[MoveStatus, int] = {status: 0 for status in MoveStatus}

    def move_file(self, file_name: str) -> MoveResult:
        """Relocate a single file and record its outcome."""
        result = relocate_file(
            file_name,
            self.source_folder,
            self.target_folder,
            self.dry_run
        )
        self._stats[result.status] += 1
        return result

    def move_all(
        self,
        file_names: List[str],
        progress_callback=None
    ) -> List[MoveResult]:
        """
        Move every file in order, one at a time.

        A skipped or failed file never stops the rest of the batch.

        Args:
            file_names: Names of files inside the source folder
            progress_callback: Optional callable(current, total, file_name)

        Returns:
            List of MoveResult objects, one per file, in input order
        """
        results: List[MoveResult] = []
        total = len(file_names)

        logger.info(f"Processing {total} matched files...")

        for i, file_name in enumerate(file_names):
            if progress_callback:
                progress_callback(i + 1, total, file_name)

            results.append(self.move_file(file_name))

            if (i + 1) % 100 == 0:
                logger.info(f"Processed {i + 1}/{total} files...")

        logger.info(f"Completed processing {total} files")
        return results

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about move operations.

        Returns:
            Dictionary mapping status names to counts
        """
        return {status.value: count for status, count in self._stats.items()}

    def get_summary(self) -> str:
        """
        Get a human-readable summary of move operations.

        Returns:
            Formatted summary string
        """
        stats = self.get_stats()
        total = sum(stats.values())

        lines = [f"Move Summary ({total} total):"]

        if self.dry_run:
            lines.append(f"  Would move: {stats['dry_run']}")
        else:
            lines.append(f"  Moved: {stats['moved']}")

        if stats["skipped_exists"]:
            lines.append(f"  Skipped (already exists): {stats['skipped_exists']}")

        if stats["failed"]:
            lines.append(f"  Failed: {stats['failed']}")

        return "\n".join(lines)

    def reset_stats(self) -> None:
        """Reset statistics for a new batch."""
        self._stats = {status: 0 for status in MoveStatus}

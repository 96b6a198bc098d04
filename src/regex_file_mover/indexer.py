"""
File indexer for listing a source folder and filtering it by regex.

This module is responsible for:
- Listing the immediate, non-directory entries of a folder (no recursion)
- Compiling the user's regular expression
- Filtering file names with an unanchored search, preserving listing order
- Reporting unreadable folders and bad patterns as distinct errors
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .errors import DirectoryReadError, InvalidPatternError

logger = logging.getLogger(__name__)


def list_files(folder: Union[str, Path]) -> List[str]:
    """
    List the names of regular files directly inside a folder.

    Directories (including symlinks to directories) are skipped. The order
    is the order of a single os.scandir() pass.

    Args:
        folder: The folder to list

    Returns:
        List of file names (not paths). Empty if the folder has no files.

    Raises:
        DirectoryReadError: If the folder is missing, not a directory,
                            or cannot be read
    """
    folder_str = str(folder)
    names: List[str] = []

    try:
        with os.scandir(folder_str) as entries:
            for entry in entries:
                try:
                    if entry.is_dir():
                        continue
                except OSError as e:
                    # Can't stat it; leave it out rather than guess
                    logger.warning(f"Cannot stat {entry.path}: {e}")
                    continue
                names.append(entry.name)
    except OSError as e:
        logger.error(f"Cannot read directory {folder_str}: {e}")
        raise DirectoryReadError(folder_str, e) from e

    logger.debug(f"Found {len(names)} files in {folder_str}")
    return names


def compile_pattern(pattern: str, ignore_case: bool = False) -> re.Pattern[str]:
    """
    Compile a regex pattern, raising InvalidPatternError on failure.

    Args:
        pattern: Regular expression in Python re syntax
        ignore_case: Compile with re.IGNORECASE

    Returns:
        The compiled pattern
    """
    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def match_files(
    names: Sequence[str],
    pattern: Union[str, re.Pattern[str]],
    ignore_case: bool = False
) -> List[str]:
    """
    Filter file names by a regular expression.

    The pattern is searched for anywhere in each name (re.search), so
    "report" matches "old_report.txt". Anchor with ^ and $ for whole-name
    matching. The pattern is compiled before any name is looked at.

    Args:
        names: Candidate file names
        pattern: Pattern string or an already compiled pattern
        ignore_case: Only used when pattern is a string

    Returns:
        Names that match, in their original order. May be empty.

    Raises:
        InvalidPatternError: If a string pattern does not compile
    """
    if isinstance(pattern, str):
        regex = compile_pattern(pattern, ignore_case)
    else:
        regex = pattern

    logger.info(f"Checking {len(names)} files against regex {regex.pattern!r}")

    matched: List[str] = []
    for name in names:
        if regex.search(name):
            logger.debug(f"Matched: {name}")
            matched.append(name)
        else:
            logger.debug(f"No match: {name}")

    return matched


class FileIndexer:
    """
    Lists a source folder once and answers pattern queries against it.

    The listing is built lazily on first access and cached.
    """

    def __init__(self, source_folder: Union[str, Path], ignore_case: bool = False):
        self.source_folder = Path(source_folder)
        self.ignore_case = ignore_case
        self._files: Optional[List[str]] = None

    def build_index(self) -> int:
        """
        List the source folder and cache the file names.

        Returns:
            Number of files found
        """
        logger.info(f"Listing files in {self.source_folder}")
        self._files = list_files(self.source_folder)
        if not self._files:
            logger.warning(f"Source folder contains no files: {self.source_folder}")
        return len(self._files)

    @property
    def files(self) -> List[str]:
        """Cached file names, listing the folder on first access."""
        if self._files is None:
            self.build_index()
        return self._files

    def find_matches(self, pattern: Union[str, re.Pattern[str]]) -> List[str]:
        """Return the cached file names matching pattern."""
        return match_files(self.files, pattern, self.ignore_case)

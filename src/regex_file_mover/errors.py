"""
Exceptions raised by the file selection and relocation pipeline.

DirectoryReadError, InvalidPatternError and NoMatchError end a run.
RelocationError is per file: the mover turns it into a FAILED result and
carries on with the rest of the batch.
"""

from typing import Optional


class FileMoverError(Exception):
    """Base error for the project."""


class DirectoryReadError(FileMoverError):
    """The source folder is missing, not a directory, or unreadable."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot read directory '{path}'{detail}")


class InvalidPatternError(FileMoverError, ValueError):
    """The regular expression does not compile."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regex pattern '{pattern}': {reason}")


class NoMatchError(FileMoverError):
    """The pattern compiled but matched no file in the source folder."""

    def __init__(self, pattern: str, source_folder: str, candidate_count: int = 0):
        self.pattern = pattern
        self.source_folder = source_folder
        self.candidate_count = candidate_count
        super().__init__(
            f"No files matched the regex pattern '{pattern}' in "
            f"'{source_folder}' ({candidate_count} files checked)"
        )


class RelocationError(FileMoverError):
    """One step of relocating a single file failed."""

    def __init__(self, file_name: str, step: str, cause: Optional[BaseException] = None):
        self.file_name = file_name
        self.step = step
        self.cause = cause
        super().__init__(f"Failed to {step.replace('_', ' ')} for '{file_name}': {cause}")

"""
Type definitions and data classes for the regex file mover.

This module defines:
- OperationRequest: Immutable description of one run (source, pattern, target)
- MoveStatus: Enum for per-file relocation outcomes
- RenameFailure: Classification of a failed atomic rename
- MoveResult: Data class representing the result of a single relocation
- PipelineResult: Aggregate outcome of one pipeline run
- ReportEntry: Data class for report rows
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class OperationRequest:
    """
    A validated request to relocate files.

    Attributes:
        source_folder: Folder whose immediate files are candidates
        pattern: Regular expression tested against each file name
        target_folder: Folder the matched files are relocated into
        dry_run: If True, report what would happen without touching files
        ignore_case: If True, the pattern is compiled case-insensitively
    """
    source_folder: str
    pattern: str
    target_folder: str
    dry_run: bool = False
    ignore_case: bool = False


class MoveStatus(Enum):
    """Status of a single file relocation."""
    MOVED = "moved"                    # Relocated via rename or copy+delete
    SKIPPED_EXISTS = "skipped_exists"  # Same name already at destination
    FAILED = "failed"                  # Rename and fallback both failed
    DRY_RUN = "dry_run"                # Would move (dry run mode)


class RenameFailure(Enum):
    """Why an atomic rename did not succeed."""
    DEST_EXISTS = "dest_exists"
    CROSS_DEVICE = "cross_device"
    OTHER = "other"


@dataclass
class MoveResult:
    """Result of relocating one file."""
    file_name: str
    source_path: str
    dest_path: Optional[str]
    status: MoveStatus
    message: str
    method: str = ""  # "rename", "copy" or "" when nothing was moved


@dataclass
class PipelineResult:
    """Everything one pipeline run produced."""
    request: OperationRequest
    candidates: List[str] = field(default_factory=list)
    matched: List[str] = field(default_factory=list)
    results: List[MoveResult] = field(default_factory=list)

    def count(self, status: MoveStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def moved(self) -> int:
        return self.count(MoveStatus.MOVED)

    @property
    def skipped(self) -> int:
        return self.count(MoveStatus.SKIPPED_EXISTS)

    @property
    def failed(self) -> int:
        return self.count(MoveStatus.FAILED)

    @property
    def ok(self) -> bool:
        """True when no file ended up FAILED."""
        return self.failed == 0


class ReportStatus(Enum):
    """Status values for the run report (human-readable)."""
    MOVED = "MOVED"
    SKIPPED_EXISTS = "SKIPPED_EXISTS"
    FAILED = "FAILED"
    DRY_RUN = "DRY_RUN"
    PARAMETER = "PARAMETER"

    @classmethod
    def from_move_status(cls, status: MoveStatus):
        """Convert MoveStatus to ReportStatus."""
        mapping = {
            MoveStatus.MOVED: cls.MOVED,
            MoveStatus.SKIPPED_EXISTS: cls.SKIPPED_EXISTS,
            MoveStatus.FAILED: cls.FAILED,
            MoveStatus.DRY_RUN: cls.DRY_RUN,
        }
        return mapping.get(status, cls.FAILED)


@dataclass
class ReportEntry:
    """Entry for the run report."""
    timestamp: str
    file_name: str
    status: str
    source_path: str
    dest_path: str
    message: str

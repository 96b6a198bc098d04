"""
Run report writer and reader.

This module is responsible for:
- Writing one row per relocated file, preceded by PARAMETER rows
- Writing CSV with the csv module, or XLSX with openpyxl for .xlsx paths
- Reading a CSV report back for inspection
"""

import csv
import logging
from dataclasses import astuple, fields
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

import openpyxl
from openpyxl.styles import Font

from . import __version__
from .types import MoveResult, OperationRequest, ReportEntry, ReportStatus

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [f.name for f in fields(ReportEntry)]


def build_entries(
    results: Iterable[MoveResult],
    request: Optional[OperationRequest] = None
) -> List[ReportEntry]:
    """
    Convert move results (and optional request parameters) to report rows.

    Args:
        results: Move results in processing order
        request: If given, PARAMETER rows describing it are emitted first

    Returns:
        List of ReportEntry rows
    """
    timestamp = datetime.now().isoformat(timespec="seconds")
    entries: List[ReportEntry] = []

    if request is not None:
        params = [
            f"version={__version__}",
            f"source_folder={request.source_folder}",
            f"pattern={request.pattern}",
            f"target_folder={request.target_folder}",
            f"dry_run={request.dry_run}",
            f"ignore_case={request.ignore_case}",
            "--- END PARAMETERS ---",
        ]
        for param in params:
            entries.append(ReportEntry(
                timestamp=timestamp,
                file_name="",
                status=ReportStatus.PARAMETER.value,
                source_path="",
                dest_path="",
                message=param
            ))

    for result in results:
        entries.append(ReportEntry(
            timestamp=timestamp,
            file_name=result.file_name,
            status=ReportStatus.from_move_status(result.status).value,
            source_path=result.source_path,
            dest_path=result.dest_path or "",
            message=result.message
        ))

    return entries


def write_report(
    results: Iterable[MoveResult],
    report_path: Union[str, Path],
    request: Optional[OperationRequest] = None
) -> Path:
    """
    Write a run report to report_path.

    Paths ending in .xlsx are written as an Excel workbook, anything else
    as CSV. Parent folders are created as needed.

    Args:
        results: Move results to report
        report_path: Output file path
        request: Optional request to record as PARAMETER rows

    Returns:
        The path written
    """
    path = Path(report_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    entries = build_entries(results, request)

    if path.suffix.lower() == ".xlsx":
        _write_xlsx(entries, path)
    else:
        _write_csv(entries, path)

    logger.info(f"Report written to {path} ({len(entries)} rows)")
    return path


def _write_csv(entries: List[ReportEntry], path: Path) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(REPORT_COLUMNS)
        for entry in entries:
            writer.writerow(astuple(entry))


def _write_xlsx(entries: List[ReportEntry], path: Path) -> None:
    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    worksheet.title = "Report"

    worksheet.append(REPORT_COLUMNS)
    for cell in worksheet[1]:
        cell.font = Font(bold=True)

    for entry in entries:
        worksheet.append(list(astuple(entry)))

    workbook.save(path)
    workbook.close()


def load_report(report_path: Union[str, Path]) -> List[ReportEntry]:
    """
    Read a CSV report written by write_report.

    Whitespace around values is stripped.

    Args:
        report_path: Path to the CSV report

    Returns:
        List of ReportEntry rows, PARAMETER rows included

    Raises:
        FileNotFoundError: If the report doesn't exist
        ValueError: If the report is empty or missing required columns
    """
    path = Path(report_path)
    if not path.exists():
        raise FileNotFoundError(f"Report file not found: {path}")

    with path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise ValueError(f"Report file is empty or invalid: {path}")

        missing = set(REPORT_COLUMNS) - {name.strip() for name in reader.fieldnames}
        if missing:
            raise ValueError(
                f"Report file is missing required columns: {', '.join(sorted(missing))}"
            )

        entries = []
        for row in reader:
            values = {key.strip(): (value or "").strip() for key, value in row.items() if key}
            entries.append(ReportEntry(**{col: values[col] for col in REPORT_COLUMNS}))

    return entries

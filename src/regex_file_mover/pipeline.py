"""
Pipeline that lists, filters and relocates files for one request.

List the source folder, match names against the pattern, then relocate
each matched file in order. Unreadable folders, bad patterns and empty
match sets end the run with an exception; per-file problems end up in
the results list.
"""

import logging

from .errors import NoMatchError
from .indexer import FileIndexer
from .mover import FileMover
from .types import OperationRequest, PipelineResult

logger = logging.getLogger(__name__)


def process_files(request: OperationRequest, progress_callback=None) -> PipelineResult:
    """
    Run the listing, matching and relocation steps for request.

    An empty source folder is not an error by itself; it produces an empty
    match set, which raises NoMatchError like any other run that matches
    nothing.

    Args:
        request: The validated operation request
        progress_callback: Optional callable(current, total, file_name)

    Returns:
        PipelineResult holding the candidates, matches and per-file results

    Raises:
        DirectoryReadError: If the source folder cannot be listed
        InvalidPatternError: If the pattern does not compile
        NoMatchError: If no file name matches the pattern
    """
    indexer = FileIndexer(request.source_folder, ignore_case=request.ignore_case)
    candidates = indexer.files

    matched = indexer.find_matches(request.pattern)
    if not matched:
        raise NoMatchError(request.pattern, request.source_folder, len(candidates))

    logger.info(f"{len(matched)} of {len(candidates)} files matched {request.pattern!r}")

    mover = FileMover(request.source_folder, request.target_folder, dry_run=request.dry_run)
    results = mover.move_all(matched, progress_callback=progress_callback)

    logger.info(mover.get_summary())

    return PipelineResult(
        request=request,
        candidates=candidates,
        matched=matched,
        results=results
    )

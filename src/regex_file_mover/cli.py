"""
Command-line interface for the regex file mover.

Usage:
    regex-file-mover SOURCE PATTERN TARGET [options]
    regex-file-mover -i
    regex-file-mover                     (mode selection menu)

Examples:
    regex-file-mover ./source ".*\\.txt$" ./target
    regex-file-mover ./photos "^IMG_2023" ./archive --dry-run --report moves.csv
"""

import argparse
import logging
import os
import sys
from typing import Callable, List, Optional

from . import __version__
from .errors import FileMoverError, InvalidPatternError
from .indexer import compile_pattern
from .pipeline import process_files
from .report import write_report
from .types import MoveResult, MoveStatus, OperationRequest
from .utils import normalize_path

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_PARTIAL = 3
EXIT_INTERRUPTED = 130

PROG = "regex-file-mover"


class QuitRequested(Exception):
    """The user chose to quit from the menu or closed stdin."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Move files whose names match a regular expression "
                    "from a source folder to a target folder.",
        epilog=(
            "Examples:\n"
            f"  {PROG} ./source \".*\\.txt$\" ./target\n"
            f"  {PROG} -i\n\n"
            "Patterns are Python regular expressions searched anywhere in the\n"
            "file name. Use ^ and $ to match the whole name."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("source", nargs="?", help="Folder containing the files")
    parser.add_argument("pattern", nargs="?", help="Regex matched against file names")
    parser.add_argument("target", nargs="?", help="Folder to move files into (created if missing)")
    parser.add_argument(
        "-i", "--interactive",
        action="store_true",
        help="Prompt for source folder, pattern and target folder"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be moved without moving anything"
    )
    parser.add_argument(
        "--ignore-case",
        action="store_true",
        help="Match the pattern case-insensitively"
    )
    parser.add_argument(
        "--report",
        metavar="PATH",
        help="Write a report of every file processed (.csv or .xlsx)"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every matching decision"
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log warnings and errors"
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write the log to this file"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def setup_logging(verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger for a CLI run.

    Args:
        verbose: DEBUG level
        quiet: WARNING level
        log_file: Optional file that receives the log with timestamps
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Replace handlers from an earlier call, leave anyone else's alone
    for handler in list(root.handlers):
        if getattr(handler, "_file_mover_handler", False):
            root.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    console._file_mover_handler = True
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
        file_handler._file_mover_handler = True
        root.addHandler(file_handler)


def validate_source_folder(path: str) -> str:
    """
    Check that the source folder exists and is a directory.

    Returns:
        The normalized path

    Raises:
        ValueError: If the folder is missing or not a directory
    """
    normalized = normalize_path(path)
    if not os.path.exists(normalized):
        raise ValueError(f"Source folder does not exist: {path}")
    if not os.path.isdir(normalized):
        raise ValueError(f"Source path is not a folder: {path}")
    return normalized


def ensure_target_folder(path: str, dry_run: bool = False) -> str:
    """
    Create the target folder if it doesn't exist.

    In dry-run mode a missing folder is only reported, not created.

    Returns:
        The normalized path

    Raises:
        ValueError: If the path exists but is not a folder, or cannot be created
    """
    normalized = normalize_path(path)
    if os.path.isdir(normalized):
        return normalized
    if os.path.exists(normalized):
        raise ValueError(f"Target path is not a folder: {path}")

    if dry_run:
        print(f"Target folder doesn't exist. Would create: {path}")
        return normalized

    print(f"Target folder doesn't exist. Creating: {path}")
    try:
        os.makedirs(normalized, exist_ok=True)
    except OSError as e:
        raise ValueError(f"Failed to create target folder: {e}") from e
    return normalized


def _ask(prompt: str, input_func: Callable[[str], str]) -> str:
    try:
        return input_func(prompt).strip()
    except EOFError:
        raise QuitRequested() from None


def prompt_for_request(
    input_func: Callable[[str], str] = input,
    dry_run: bool = False,
    ignore_case: bool = False
) -> OperationRequest:
    """
    Ask for source folder, pattern and target folder on stdin.

    Each question is repeated until the answer is usable: the source must
    be an existing folder, the pattern must compile, and the target must be
    a folder or creatable.

    Raises:
        QuitRequested: If stdin is closed
    """
    while True:
        answer = _ask("Enter source folder path: ", input_func)
        if not answer:
            print("Source folder is required.")
            continue
        try:
            source = validate_source_folder(answer)
            break
        except ValueError as e:
            print(e)

    while True:
        pattern = _ask("Enter regex pattern (e.g., .*\\.txt$ for txt files): ", input_func)
        if not pattern:
            print("Pattern is required.")
            continue
        try:
            compile_pattern(pattern, ignore_case)
            break
        except InvalidPatternError as e:
            print(e)

    while True:
        answer = _ask("Enter target folder path: ", input_func)
        if not answer:
            print("Target folder is required.")
            continue
        try:
            target = ensure_target_folder(answer, dry_run)
            break
        except ValueError as e:
            print(e)

    return OperationRequest(
        source_folder=source,
        pattern=pattern,
        target_folder=target,
        dry_run=dry_run,
        ignore_case=ignore_case
    )


def select_mode(parser: argparse.ArgumentParser, input_func: Callable[[str], str] = input) -> str:
    """
    Show the mode selection menu until the user picks interactive or quit.

    Returns:
        "i" for interactive mode

    Raises:
        QuitRequested: On "q" or closed stdin
    """
    print("Welcome to File Mover!")
    while True:
        print("Select a mode:")
        print("  i - Interactive mode")
        print("  h - Help")
        print("  q - Quit")
        choice = _ask("Enter your choice: ", input_func).lower()

        if choice == "i":
            print("Entering interactive mode...")
            return choice
        if choice == "h":
            parser.print_help()
        elif choice == "q":
            raise QuitRequested()
        else:
            print("Invalid option. Please try again.")


def request_from_args(args: argparse.Namespace) -> OperationRequest:
    """
    Build a request from direct-mode arguments.

    Raises:
        ValueError: If an argument is empty, the source is invalid or the
                    target cannot be created
    """
    required = [
        (args.source, "Source folder"),
        (args.pattern, "Pattern"),
        (args.target, "Target folder"),
    ]
    for value, label in required:
        if not value.strip():
            raise ValueError(f"{label} is required.")

    source = validate_source_folder(args.source)
    target = ensure_target_folder(args.target, args.dry_run)
    return OperationRequest(
        source_folder=source,
        pattern=args.pattern,
        target_folder=target,
        dry_run=args.dry_run,
        ignore_case=args.ignore_case
    )


def format_result(result: MoveResult) -> str:
    """One line describing a single file's outcome."""
    if result.status == MoveStatus.MOVED:
        return f"Moved: {result.file_name}"
    if result.status == MoveStatus.DRY_RUN:
        return f"Would move: {result.file_name}"
    if result.status == MoveStatus.SKIPPED_EXISTS:
        return f"Skipped (already exists): {result.file_name}"
    return f"Failed: {result.file_name}: {result.message}"


def run(request: OperationRequest, report_path: Optional[str] = None) -> int:
    """
    Run the pipeline for request and print each file's outcome.

    Returns:
        Process exit code
    """
    try:
        result = process_files(request)
    except FileMoverError as e:
        logger.debug(f"Run ended: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    for move_result in result.results:
        print(format_result(move_result))

    if result.failed:
        print(
            f"{result.failed} file(s) need manual attention, see messages above.",
            file=sys.stderr
        )

    if report_path:
        try:
            write_report(result.results, report_path, request)
        except OSError as e:
            print(f"Error: could not write report: {e}", file=sys.stderr)
            return EXIT_ERROR

    return EXIT_OK if result.ok else EXIT_PARTIAL


def main(argv: Optional[List[str]] = None, input_func: Callable[[str], str] = input) -> int:
    """
    Entry point for the CLI.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        input_func: Used for prompts; replaceable in tests

    Returns:
        Process exit code
    """
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.quiet, args.log_file)

    try:
        if not argv:
            select_mode(parser, input_func)
            args.interactive = True

        if args.interactive:
            request = prompt_for_request(input_func, args.dry_run, args.ignore_case)
        else:
            if args.source is None or args.pattern is None or args.target is None:
                parser.print_usage(sys.stderr)
                print(
                    "Error: expected SOURCE PATTERN TARGET, or -i for interactive mode",
                    file=sys.stderr
                )
                return EXIT_ERROR
            request = request_from_args(args)
    except QuitRequested:
        print("Goodbye!")
        return EXIT_OK
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    logger.debug(f"Request: {request}")

    try:
        return run(request, args.report)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())

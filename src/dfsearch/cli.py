#!/usr/bin/env python3
"""
dfsearch CLI: command line interface for duplicate file detection.
Prints the empty-file list, every duplicate group and the redundant data size.
Read-only: no file is ever modified.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
import logging
from pathlib import Path
from typing import List, Optional, NoReturn, TextIO

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dfsearch.core.models import DeduplicationConfig, DeduplicationParams, DuplicateReport
from dfsearch.core.errors import TraversalError
from dfsearch.commands import DeduplicationCommand
from dfsearch.utils.convert_utils import ConvertUtils
from dfsearch.aliases import BUFFER_HELP_TEXT, SAMPLE_HELP_TEXT, CHUNK_HELP_TEXT, EPILOG_TEXT


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.out: TextIO = stdout or sys.stdout
        self.err: TextIO = stderr or sys.stderr

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dfsearch",
            description="dfsearch: find byte-identical files in a directory tree",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            default=".",
            type=str,
            help="Directory to scan for duplicates. Default: current directory"
        )
        parser.add_argument(
            "--excluded-dirs", '-e',
            nargs="+",
            default=[],
            type=str,
            metavar='',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )

        # Tuning options
        parser.add_argument(
            "--buffer-size", "-b",
            default="4M",
            type=str,
            metavar='',
            help=BUFFER_HELP_TEXT
        )
        parser.add_argument(
            "--head-size",
            default="64K",
            type=str,
            metavar='',
            help=SAMPLE_HELP_TEXT.format(end="start")
        )
        parser.add_argument(
            "--tail-size",
            default="64K",
            type=str,
            metavar='',
            help=SAMPLE_HELP_TEXT.format(end="end")
        )
        parser.add_argument(
            "--chunk-size", "-c",
            default="32K",
            type=str,
            metavar='',
            help=CHUNK_HELP_TEXT
        )
        parser.add_argument(
            "--workers", "-j",
            default=1,
            type=int,
            metavar='',
            help="Number of threads hashing size buckets in parallel. Default: 1"
        )
        parser.add_argument(
            "--verify",
            action="store_true",
            help="Byte-compare files whose full hashes match before reporting them"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Print only duplicate groups and the redundant data size"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics, progress and debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        for option in ("buffer_size", "head_size", "tail_size", "chunk_size"):
            value = getattr(args, option)
            if not ConvertUtils.is_valid_size_format(value):
                self.error_exit(f"Invalid --{option.replace('_', '-')} format: {value}")

        root_path = Path(args.input)
        if not root_path.exists():
            self.error_exit(f"No such directory: {args.input}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.input}")

        for excl_dir in args.excluded_dirs:
            if not Path(excl_dir).is_dir():
                self.warning(f"Excluded directory not found: {excl_dir}")

    def create_params(self, args: argparse.Namespace) -> DeduplicationParams:
        """Create DeduplicationParams from CLI arguments."""
        try:
            config = DeduplicationConfig.from_human_readable(
                buffer_size_str=args.buffer_size,
                head_size_str=args.head_size,
                tail_size_str=args.tail_size,
                chunk_size_str=args.chunk_size,
                workers=args.workers,
                verify=args.verify,
            )
            return DeduplicationParams(
                root_dir=args.input,
                excluded_dirs=[item.strip() for item in args.excluded_dirs if item.strip()],
                config=config,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            self.err.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            self.err.write(f"\r  [{stage}] {current} files processed...")
        self.err.flush()

    def run_deduplication(self, params: DeduplicationParams) -> DuplicateReport:
        """Execute the scan and partition workflow."""
        command = DeduplicationCommand()
        try:
            report = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except TraversalError as e:
            self.error_exit(f"Traversal failed: {e}")

        if self.verbose:
            self.err.write("\n")
            self.err.write(command.last_result.stats.print_summary() + "\n")
        return report

    def output_empty_files(self, report: DuplicateReport) -> None:
        print("Empty file list:", file=self.out)
        for path in report.empty_files:
            print(path, file=self.out)
        print(f"\nEmpty: {report.empty_count}\nTotal: {report.total_files}\n", file=self.out)

    def output_groups(self, report: DuplicateReport) -> None:
        for group in report.groups:
            size_str = ConvertUtils.bytes_with_separators(group.size)
            print(f" #{group.index} ({group.count}) {size_str} B", file=self.out)
            for path in group.paths:
                print(path, file=self.out)
            print(file=self.out)

    def output_read_errors(self, report: DuplicateReport) -> None:
        for error in report.read_errors:
            self.warning(f"Cannot read {error.path}: {error.cause}")

    def output_results(self, report: DuplicateReport) -> None:
        """Render the report in the classic dfsearch layout."""
        if not self.quiet:
            self.output_empty_files(report)

        self.output_groups(report)
        self.output_read_errors(report)

        redundant = ConvertUtils.bytes_with_separators(report.redundant_bytes)
        print(f"Redundant data size: {redundant} B", file=self.out)
        if self.verbose:
            print(f"  ({ConvertUtils.bytes_to_human(report.redundant_bytes)} in "
                  f"{len(report.groups)} groups, {report.duplicate_file_count} files)", file=self.out)

        if not self.quiet:
            elapsed = time.time() - self.start_time
            print(f"\nDone in {elapsed:.3f}s.", file=self.out)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        print(f"Warning: {message}", file=self.err)

    def error_exit(self, message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=self.err)
        sys.exit(code)

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.ERROR,
            format=LOG_FORMAT
        )

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging(self.verbose)

        self.validate_args(args)
        params = self.create_params(args)

        report = self.run_deduplication(params)
        self.output_results(report)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
Unified command orchestrator for duplicate search.
This is the SINGLE source of truth for the scan → partition → report flow,
used by the CLI and by library callers.
"""
from typing import Iterable, Optional

from dfsearch.core.models import DuplicateReport, DeduplicationParams, DeduplicationConfig, PartitionResult
from dfsearch.core.scanner import FileScannerImpl
from dfsearch.core.deduplicator import DeduplicatorImpl
from dfsearch.core.report import ReportBuilder
from dfsearch.core.interfaces import ProgressCallback, Entry


class DeduplicationCommand:
    """
    Orchestrates the whole workflow:
    1. Scan the root directory
    2. Partition the files into duplicate groups
    3. Build the report

    Usage:
        params = DeduplicationParams(root_dir="~/Downloads")
        report = DeduplicationCommand().execute(params, progress_callback=printer)
    """

    def __init__(self):
        self._last_result: Optional[PartitionResult] = None

    def execute(
            self,
            params: DeduplicationParams,
            progress_callback: Optional[ProgressCallback] = None
    ) -> DuplicateReport:
        """
        Scan params.root_dir and report its duplicate groups.

        Raises:
            TraversalError: if the directory tree cannot be walked
        """
        scanner = FileScannerImpl(
            root_dir=params.root_dir,
            excluded_dirs=params.excluded_dirs
        )
        files = scanner.scan(progress_callback=progress_callback)
        return self.execute_entries(files, params.config, progress_callback=progress_callback)

    def execute_entries(
            self,
            entries: Iterable[Entry],
            config: Optional[DeduplicationConfig] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> DuplicateReport:
        """Same pipeline over (path, size) pairs supplied by the caller."""
        deduplicator = DeduplicatorImpl(config)
        self._last_result = deduplicator.find_duplicates(entries, progress_callback=progress_callback)
        return ReportBuilder.build(self._last_result)

    @property
    def last_result(self) -> Optional[PartitionResult]:
        """Partition result (with stats) of the most recent run."""
        return self._last_result

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Implements the partition engine: size buckets → sample hash → full hash
(→ optional byte comparison), bucket by bucket.

Buckets never interact, so with `workers > 1` they are fanned out to a
thread pool. Each worker thread owns one ReadBuffer.
"""
import time
import threading
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Iterable, Tuple

from dfsearch.core.models import (
    DuplicateGroup, DeduplicationStats, DeduplicationConfig, FileReadError, PartitionResult
)
from dfsearch.core.grouper import FileGrouperImpl
from dfsearch.core.hasher import FingerprintEngine, ReadBuffer
from dfsearch.core.interfaces import Deduplicator, ProgressCallback, Entry
from dfsearch.core.sorter import Sorter
from dfsearch.core.stages import SizeStageImpl, SampleHashStage, FullHashStage, ByteCompareStage, stage_counts

logger = logging.getLogger(__name__)


@dataclass
class BucketOutcome:
    """What one size bucket produced. Merged on the calling thread."""
    size: int
    groups: List[DuplicateGroup] = field(default_factory=list)
    read_errors: List[FileReadError] = field(default_factory=list)
    # stage key -> (groups, files, seconds)
    timings: Dict[str, Tuple[int, int, float]] = field(default_factory=dict)


# =============================
# Main Deduplicator Class
# =============================
class DeduplicatorImpl(Deduplicator):
    """
    Implements multi-stage duplicate detection using a pipeline architecture.
    Collects detailed statistics and keeps unreadable files out of every group.
    """
    def __init__(
            self,
            config: Optional[DeduplicationConfig] = None,
            fingerprinter: Optional[FingerprintEngine] = None
    ):
        if config is None:
            config = fingerprinter.config if fingerprinter else DeduplicationConfig()
        self.config = config
        self.fingerprinter = fingerprinter or FingerprintEngine(config)
        self.grouper = FileGrouperImpl(self.fingerprinter)
        self._local = threading.local()

    def find_duplicates(
        self,
        files: Iterable[Entry],
        progress_callback: Optional[ProgressCallback] = None
    ) -> PartitionResult:
        """
        Main deduplication pipeline.
        Args:
            files: (path, size) pairs or FileHandles, in any order
            progress_callback: Reports progress per stage.
        Returns:
            PartitionResult with groups in ascending size order
        """
        stats = DeduplicationStats()
        total_start_time = time.time()

        # Built once, before any fan-out, and only read afterwards
        start_time = time.time()
        buckets, empty_files, total_files = SizeStageImpl(self.grouper).process(
            files,
            progress_callback=progress_callback
        )
        counts = stage_counts(buckets)
        stats.update_stage("size", counts["groups"], counts["files"], time.time() - start_time)

        outcomes = self._run_buckets(buckets, progress_callback)

        result = PartitionResult(
            empty_files=sorted(empty_files, key=lambda f: f.path),
            total_files=total_files,
            stats=stats,
        )
        for outcome in outcomes:
            result.groups.extend(outcome.groups)
            result.read_errors.extend(outcome.read_errors)
            for stage, (groups_found, files_processed, duration) in outcome.timings.items():
                stats.update_stage(stage, groups_found, files_processed, duration)

        Sorter.sort_files_inside_groups(result.groups)
        Sorter.sort_groups(result.groups)

        stats.total_time = time.time() - total_start_time
        logger.debug(
            f"Found {len(result.groups)} duplicate groups among {total_files} files "
            f"({len(result.read_errors)} unreadable)"
        )
        return result

    def _run_buckets(
            self,
            buckets: List[DuplicateGroup],
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[BucketOutcome]:
        total_files = sum(len(b.files) for b in buckets)
        processed_files = 0
        outcomes: List[BucketOutcome] = []

        if self.config.workers == 1 or len(buckets) < 2:
            for bucket in buckets:
                outcomes.append(self._process_bucket(bucket, progress_callback))
                processed_files += len(bucket.files)
                if progress_callback:
                    progress_callback("Hashing", processed_files, total_files)
            return outcomes

        # Stage-level progress is only reported from the calling thread
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            # map() yields in submission order, which keeps results deterministic
            for bucket, outcome in zip(buckets, executor.map(self._process_bucket, buckets)):
                outcomes.append(outcome)
                processed_files += len(bucket.files)
                if progress_callback:
                    progress_callback("Hashing", processed_files, total_files)
        return outcomes

    def _process_bucket(
            self,
            bucket: DuplicateGroup,
            progress_callback: Optional[ProgressCallback] = None
    ) -> BucketOutcome:
        """Runs every tier over one size bucket on the current thread."""
        buffer = self._thread_buffer()
        outcome = BucketOutcome(size=bucket.size)
        confirmed: List[DuplicateGroup] = []

        start_time = time.time()
        pending = SampleHashStage(self.grouper).process(
            [bucket], confirmed, outcome.read_errors, buffer, progress_callback)
        self._record(outcome, "sample", confirmed + pending, start_time)

        if pending:
            start_time = time.time()
            FullHashStage(self.grouper).process(
                pending, confirmed, outcome.read_errors, buffer, progress_callback)
            self._record(outcome, "full", confirmed, start_time)

        if self.config.verify and confirmed:
            start_time = time.time()
            verified: List[DuplicateGroup] = []
            ByteCompareStage(self.fingerprinter).process(
                confirmed, verified, outcome.read_errors, buffer, progress_callback)
            self._record(outcome, "verify", verified, start_time)
            confirmed = verified

        outcome.groups = confirmed
        return outcome

    def _thread_buffer(self) -> ReadBuffer:
        buffer = getattr(self._local, "buffer", None)
        if buffer is None:
            buffer = self.fingerprinter.new_buffer()
            self._local.buffer = buffer
        return buffer

    @staticmethod
    def _record(outcome: BucketOutcome, stage: str, groups: List[DuplicateGroup], start_time: float) -> None:
        counts = stage_counts(groups)
        outcome.timings[stage] = (counts["groups"], counts["files"], time.time() - start_time)

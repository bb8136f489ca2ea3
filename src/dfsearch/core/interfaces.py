"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication system.

Key Components:
---------------
- HashAlgorithm: one-shot and incremental digest functions.
- Fingerprinter: computes a tiered FingerprintResult for one file.
- FileScanner: walks a directory and returns FileHandles.
- FileGrouper: groups files by size or fingerprint.
- SizeStage / HashStage: individual stages of the pipeline.
- Deduplicator: the engine coordinating all stages.
"""

from typing import Protocol, List, Dict, Tuple, Optional, Callable, Iterable, Union, Any
from dfsearch.core.models import (
    FileHandle,
    FingerprintTier,
    FingerprintResult,
    FileReadError,
    DuplicateGroup,
    PartitionResult,
)

ProgressCallback = Callable[[str, int, Optional[int]], None]
Entry = Union[FileHandle, Tuple[str, int]]


class HashState(Protocol):
    def update(self, data: Any) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for hash functions. One-shot and incremental digests of the
    same bytes must be equal.
    """

    @staticmethod
    def hash(data: Any) -> bytes:
        """Computes the hash of the provided byte data."""
        ...

    @staticmethod
    def new() -> HashState:
        """Returns a fresh incremental hash state."""
        ...


class Fingerprinter(Protocol):
    def new_buffer(self) -> Any: ...

    def select_tier(self, size: int) -> FingerprintTier: ...

    def fingerprint(self, file: FileHandle, tier: FingerprintTier, buffer: Any) -> FingerprintResult: ...


class FileScanner(Protocol):
    def scan(self, progress_callback: Optional[ProgressCallback] = None) -> List[FileHandle]:
        """
        Walk the configured directory.

        Raises:
            TraversalError: if the root or any directory below it cannot be read.
        """
        ...


class FileGrouper(Protocol):
    """
    Interface for grouping files by size or fingerprint.
    Groups with fewer than two files are never returned.
    """
    def group_by_size(self, files: List[FileHandle]) -> Dict[int, List[FileHandle]]: ...

    def group_by_fingerprint(
        self,
        files: List[FileHandle],
        tier: FingerprintTier,
        buffer: Any
    ) -> Tuple[Dict[bytes, List[FileHandle]], List[FileReadError]]: ...


# =============================
# Stage Interfaces
# =============================

class SizeStage(Protocol):
    def process(
        self,
        files: Iterable[Entry],
        progress_callback: Optional[ProgressCallback] = None
    ) -> Tuple[List[DuplicateGroup], List[FileHandle], int]:
        """
        Split files into size buckets.

        Returns:
            (buckets with 2+ files, empty files, number of files seen)
        """
        ...


class HashStage(Protocol):
    def get_stage_name(self) -> str: ...

    def process(
        self,
        groups: List[DuplicateGroup],
        confirmed_duplicates: List[DuplicateGroup],
        read_errors: List[FileReadError],
        buffer: Any,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[DuplicateGroup]:
        """
        Refine candidate groups.

        Appends proven duplicates to confirmed_duplicates and failed files to
        read_errors; returns the groups that still need a deeper tier.
        """
        ...


class Deduplicator(Protocol):
    def find_duplicates(
        self,
        files: Iterable[Entry],
        progress_callback: Optional[ProgressCallback] = None
    ) -> PartitionResult: ...

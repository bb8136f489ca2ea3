"""
Core deduplication engine: fingerprinting, grouping, pipeline and report.

This package contains the performance-critical foundation of dfsearch:
- FileScannerImpl: recursive directory traversal
- FingerprintEngine + XXH3HashAlgorithm: tiered 128-bit XXH3 fingerprints
- FileGrouperImpl: size and fingerprint grouping
- DeduplicatorImpl: multi-stage pipeline (size → sample hash → full hash)
- ReportBuilder: numbered groups and redundant-bytes total
- Models: FileHandle, DuplicateGroup, DuplicateReport and configuration objects

Pure Python apart from xxhash; suitable for CLI and library usage.
"""

from .errors import DFSearchError, TraversalError
from .scanner import FileScannerImpl
from .grouper import FileGrouperImpl
from .hasher import FingerprintEngine, ReadBuffer, XXH3HashAlgorithm
from .deduplicator import DeduplicatorImpl
from .report import ReportBuilder
from .sorter import Sorter
from .models import (
    FileHandle, Fingerprint, FingerprintTier, FingerprintResult, FileReadError,
    DuplicateGroup, DeduplicationConfig, DeduplicationParams, DeduplicationStats,
    PartitionResult, DuplicateReport, ReportGroup)

__all__ = [
    "DFSearchError",
    "TraversalError",
    "FileScannerImpl",
    "FileGrouperImpl",
    "FingerprintEngine",
    "ReadBuffer",
    "XXH3HashAlgorithm",
    "DeduplicatorImpl",
    "ReportBuilder",
    "Sorter",
    "FileHandle",
    "Fingerprint",
    "FingerprintTier",
    "FingerprintResult",
    "FileReadError",
    "DuplicateGroup",
    "DeduplicationConfig",
    "DeduplicationParams",
    "DeduplicationStats",
    "PartitionResult",
    "DuplicateReport",
    "ReportGroup",
]

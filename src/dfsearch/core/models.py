"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for duplicate file detection.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union
from enum import Enum

from dfsearch.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class FingerprintTier(Enum):
    """
    Fingerprinting depth. PARTIAL hashes a head+tail sample and is only a
    candidate signal; both FULL tiers cover the entire content.
    """
    PARTIAL = "partial"
    FULL_STREAMED = "full-streamed"
    FULL_BUFFERED = "full-buffered"

    @property
    def is_authoritative(self) -> bool:
        return self is not FingerprintTier.PARTIAL


class Stage(str, Enum):
    SIZE = "Size grouping"
    SAMPLE = "Sample Hash"
    FULL = "Full Hash"
    VERIFY = "Byte comparison"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileHandle:
    """
    A regular file as reported by traversal: its path and exact byte length.
    Holds no content; the file is re-opened for every read.
    """
    path: str
    size: int  # in bytes

    def __post_init__(self):
        if self.size < 0:
            raise ValueError(f"File size cannot be negative: {self.path}")

    def __repr__(self):
        return f"<FileHandle path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class Fingerprint:
    digest: bytes
    tier: FingerprintTier

    def __post_init__(self):
        if not isinstance(self.digest, bytes):
            raise ValueError("Fingerprint digest must be bytes")


@dataclass(frozen=True)
class FileReadError:
    """A file that could not be read at some tier. It never joins a group."""
    path: str
    cause: str
    tier: Optional[FingerprintTier] = None

    def __str__(self):
        return f"{self.path}: {self.cause}"


@dataclass(frozen=True)
class FingerprintResult:
    """
    Outcome of fingerprinting one file: exactly one of fingerprint/error is set.
    """
    file: FileHandle
    fingerprint: Optional[Fingerprint] = None
    error: Optional[FileReadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, file: FileHandle, digest: bytes, tier: FingerprintTier) -> "FingerprintResult":
        return cls(file=file, fingerprint=Fingerprint(digest=digest, tier=tier))

    @classmethod
    def failure(cls, file: FileHandle, cause: str, tier: FingerprintTier) -> "FingerprintResult":
        return cls(file=file, error=FileReadError(path=file.path, cause=cause, tier=tier))


@dataclass
class DuplicateGroup:
    """
    A group of files of one size. Between stages it holds candidates;
    once returned by the deduplicator its files are content-identical.
    """
    size: int
    files: List[FileHandle]

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def redundant_bytes(self) -> int:
        """Bytes reclaimable by keeping a single copy."""
        return self.size * max(0, self.duplicate_count - 1)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}>"


class DeduplicationStats:
    """
    Statistics collected during the deduplication process.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def print_summary(self) -> str:
        labels = {
            "size": "Size Groups",
            "sample": "Sample Hash Groups",
            "full": "Full Content Hash Groups",
            "verify": "Byte Comparison Groups",
        }

        lines = [
            "Deduplication Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


@dataclass
class PartitionResult:
    """Everything the partition engine learned in one run."""
    groups: List[DuplicateGroup] = field(default_factory=list)
    empty_files: List[FileHandle] = field(default_factory=list)
    total_files: int = 0
    read_errors: List[FileReadError] = field(default_factory=list)
    stats: DeduplicationStats = field(default_factory=DeduplicationStats)

    @property
    def non_empty_files(self) -> int:
        return self.total_files - len(self.empty_files)


# ======================
#  Report
# ======================

@dataclass(frozen=True)
class ReportGroup:
    index: int
    size: int
    count: int
    paths: List[str]

    @property
    def redundant_bytes(self) -> int:
        return self.size * (self.count - 1)


@dataclass
class DuplicateReport:
    """
    Final, render-ready result of a run. Built by ReportBuilder.
    """
    groups: List[ReportGroup] = field(default_factory=list)
    empty_files: List[str] = field(default_factory=list)
    total_files: int = 0
    redundant_bytes: int = 0
    read_errors: List[FileReadError] = field(default_factory=list)

    @property
    def empty_count(self) -> int:
        return len(self.empty_files)

    @property
    def non_empty_files(self) -> int:
        return self.total_files - self.empty_count

    @property
    def duplicate_file_count(self) -> int:
        return sum(g.count for g in self.groups)


# ======================
#  Configuration
# ======================

DEFAULT_BUFFER_SIZE = 4 * 1024 * 1024
DEFAULT_SAMPLE_SIZE = 64 * 1024
DEFAULT_CHUNK_SIZE = 32 * 1024


@dataclass
class DeduplicationConfig:
    """
    I/O tuning knobs. None of them changes which files are reported as
    duplicates, only how many bytes are read to find out.
    """
    buffer_size: int = DEFAULT_BUFFER_SIZE
    head_size: int = DEFAULT_SAMPLE_SIZE
    tail_size: int = DEFAULT_SAMPLE_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    workers: int = 1
    verify: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if self.buffer_size <= 0:
            raise ValueError("Buffer size must be positive")

        if self.head_size < 0 or self.tail_size < 0:
            raise ValueError("Sample sizes cannot be negative")

        if self.sample_size == 0:
            raise ValueError("Head and tail samples cannot both be empty")

        if self.sample_size > self.buffer_size:
            raise ValueError("Head and tail samples must fit into the buffer")

        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")

        if self.workers < 1:
            raise ValueError("At least one worker is required")

    @property
    def sample_size(self) -> int:
        return self.head_size + self.tail_size

    @staticmethod
    def from_human_readable(
            buffer_size_str: str = "4M",
            head_size_str: str = "64K",
            tail_size_str: str = "64K",
            chunk_size_str: str = "32K",
            workers: int = 1,
            verify: bool = False,
    ) -> 'DeduplicationConfig':
        """
        Factory method to create a config from human-readable sizes.
        Useful for CLI argument parsing.
        """
        return DeduplicationConfig(
            buffer_size=ConvertUtils.human_to_bytes(buffer_size_str),
            head_size=ConvertUtils.human_to_bytes(head_size_str),
            tail_size=ConvertUtils.human_to_bytes(tail_size_str),
            chunk_size=ConvertUtils.human_to_bytes(chunk_size_str),
            workers=workers,
            verify=verify,
        )


@dataclass
class DeduplicationParams:
    """Parameters for a whole scan-and-deduplicate run."""
    root_dir: str
    excluded_dirs: List[str] = field(default_factory=list)
    config: DeduplicationConfig = field(default_factory=DeduplicationConfig)

    def __post_init__(self):
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

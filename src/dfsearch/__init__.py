"""
dfsearch: find groups of byte-identical files in a directory tree.

Core features:
- Size buckets, then a tiered fingerprint: whole-file hash for small files,
  head+tail sample then streamed full hash for large ones
- 128-bit XXH3 digests (via xxhash), optional byte-by-byte verification
- Unreadable files are reported and skipped, never abort the run
- Read-only: nothing is deleted, moved or linked
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("dfsearch")
except PackageNotFoundError:
    import sys
    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib  # Python < 3.11: pip install tomli
    from pathlib import Path

    with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from dfsearch.commands import DeduplicationCommand
from dfsearch.core import (
    DeduplicationConfig, DeduplicationParams, DuplicateReport, DuplicateGroup, FileHandle,
    FileReadError, TraversalError)
from dfsearch.utils.convert_utils import ConvertUtils

__all__ = [
    "DeduplicationCommand",
    "DeduplicationConfig",
    "DeduplicationParams",
    "DuplicateReport",
    "DuplicateGroup",
    "FileHandle",
    "FileReadError",
    "TraversalError",
    "ConvertUtils",
    "__version__",
]

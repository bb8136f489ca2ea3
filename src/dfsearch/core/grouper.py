"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements file grouping strategies using FileHandle objects and a Fingerprinter.
"""

from typing import List, Dict, Tuple, Any, Callable, Optional
from collections import defaultdict
import logging

from dfsearch.core.interfaces import FileGrouper, Fingerprinter
from dfsearch.core.models import FileHandle, FingerprintTier, FileReadError
from dfsearch.core.hasher import FingerprintEngine, ReadBuffer

logger = logging.getLogger(__name__)


class FileGrouperImpl(FileGrouper):
    """
    Groups files by size or by fingerprint at a given tier.
    Uses an injected Fingerprinter for flexibility and testability.
    """

    def __init__(self, fingerprinter: Optional[Fingerprinter] = None):
        self.fingerprinter = fingerprinter or FingerprintEngine()

    def group_by_size(self, files: List[FileHandle]) -> Dict[int, List[FileHandle]]:
        """Groups files by their size."""
        return self._group_by(files, lambda f: f.size)

    def group_by_fingerprint(
            self,
            files: List[FileHandle],
            tier: FingerprintTier,
            buffer: ReadBuffer
    ) -> Tuple[Dict[bytes, List[FileHandle]], List[FileReadError]]:
        """
        Groups files by their fingerprint at `tier`.
        Files that could not be read are returned separately and join no group.
        """
        errors: List[FileReadError] = []

        def key_func(file: FileHandle) -> Optional[bytes]:
            result = self.fingerprinter.fingerprint(file, tier, buffer)
            if not result.ok:
                errors.append(result.error)
                return None
            return result.fingerprint.digest

        groups = self._group_by(files, key_func)
        if errors:
            logger.debug(f"Skipped {len(errors)} unreadable files at {tier.value} tier")
        return groups, errors

    @staticmethod
    def _group_by(files: List[FileHandle], key_func: Callable[[FileHandle], Any]) -> Dict[Any, List[FileHandle]]:
        """
        Helper method to group files by any computed key.
        Files whose key is None are left out.
        Returns:
            Dict[key, List[FileHandle]] holding only groups of 2+ files
        """
        groups = defaultdict(list)
        for file in files:
            key = key_func(file)
            if key is not None:
                groups[key].append(file)

        return {key: group for key, group in groups.items() if len(group) >= 2}

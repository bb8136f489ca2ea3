"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Recursive directory traversal producing FileHandles for the deduplicator.
Features:
- Regular files only, symbolic links skipped
- Empty files included (the size stage sets them aside)
- Excluded directories pruned before descent
- Unreadable directories abort the scan with TraversalError
"""

import os
import stat
import time
import logging
from typing import List, Optional
from pathlib import Path

from dfsearch.core.models import FileHandle
from dfsearch.core.errors import TraversalError
from dfsearch.core.interfaces import FileScanner, ProgressCallback

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Scans a directory tree recursively.

    Attributes:
        root_dir: Root directory to scan
        excluded_dirs: Directories whose subtrees are skipped
    """

    def __init__(self, root_dir: str, excluded_dirs: Optional[List[str]] = None):
        self.root_dir = root_dir
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []

    def scan(self, progress_callback: Optional[ProgressCallback] = None) -> List[FileHandle]:
        """
        Single-pass scanner. Returns every regular file found under root_dir.

        Raises:
            TraversalError: root missing, not a directory, or a directory unreadable.
        """
        logger.debug(f"Scanning directory: {self.root_dir}")

        root_path = Path(self.root_dir)
        if not root_path.exists():
            raise TraversalError(self.root_dir, "Directory does not exist")
        if not root_path.is_dir():
            raise TraversalError(self.root_dir, "Not a directory")

        found_files: List[FileHandle] = []
        progress_interval = 5000
        progress_counter = 0
        start_time = time.time()

        for root, dirs, files in os.walk(str(root_path), onerror=self._on_walk_error):
            dirs[:] = [d for d in dirs if self._prefilter_dir(Path(root) / d)]

            for filename in files:
                file = self._process_file(Path(root) / filename)
                if file is not None:
                    found_files.append(file)
                    progress_counter += 1

                if progress_callback and progress_counter >= progress_interval:
                    progress_callback('scanning', len(found_files), None)
                    progress_counter = 0

        if progress_callback and progress_counter > 0:
            progress_callback('scanning', len(found_files), None)

        logger.debug(
            f"Scan completed in {time.time() - start_time:.2f}s. Found {len(found_files)} regular files."
        )
        return found_files

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        path = error.filename or "<unknown>"
        cause = error.strerror or str(error)
        logger.error(f"Cannot read directory {path}: {cause}")
        raise TraversalError(path, cause) from error

    @staticmethod
    def _is_excluded_directory(path: Path, excluded_dirs: List[str]) -> bool:
        """Check if path is within an excluded directory."""
        path_str = str(path.resolve(strict=False))
        for excluded_dir in excluded_dirs:
            normalized_excluded = os.path.normpath(excluded_dir)
            if path_str.startswith(normalized_excluded + os.sep) or path_str == normalized_excluded:
                return True
        return False

    def _prefilter_dir(self, path: Path) -> bool:
        if path.is_symlink():
            logger.debug(f"Skipping symbolic link: {path}")
            return False

        if self.excluded_dirs and self._is_excluded_directory(path, self.excluded_dirs):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        return True

    @staticmethod
    def _process_file(path: Path) -> Optional[FileHandle]:
        """
        Return a FileHandle for a regular file, None for anything else.
        Files that disappear between listing and stat are skipped.
        """
        try:
            if path.is_symlink():
                logger.debug(f"Skipping symbolic link: {path}")
                return None
            stat_result = path.stat()
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return None

        if not stat.S_ISREG(stat_result.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        return FileHandle(path=str(path), size=stat_result.st_size)

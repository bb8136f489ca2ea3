"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exceptions that abort a run. Per-file read failures are not exceptions;
they travel as FileReadError records inside FingerprintResult.
"""


class DFSearchError(RuntimeError):
    """Base class for errors raised by dfsearch."""


class TraversalError(DFSearchError):
    """The directory tree could not be walked (missing root, unreadable directory)."""

    def __init__(self, path: str, cause: str):
        self.path = path
        self.cause = cause
        super().__init__(f"{cause}: {path}")

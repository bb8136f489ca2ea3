"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Tiered file fingerprinting with pluggable hash algorithms.

Three tiers, cheapest first:
- FULL_BUFFERED: the whole (small) file in one bounded read
- PARTIAL: head sample + tail sample, concatenated
- FULL_STREAMED: the whole file in fixed chunks through an incremental hash

All reads go through a ReadBuffer owned by the caller. Read failures are
returned as FingerprintResult values, never raised.
"""

import os
import logging
from typing import Optional, Any

import xxhash

from dfsearch.core.models import FileHandle, FingerprintTier, FingerprintResult, DeduplicationConfig
from dfsearch.core.interfaces import Fingerprinter, HashAlgorithm, HashState

logger = logging.getLogger(__name__)


# Use the same way to implement and use any other hashing algorithm
class XXH3HashAlgorithm(HashAlgorithm):
    """128-bit XXH3."""

    @staticmethod
    def hash(data: Any) -> bytes:
        return xxhash.xxh3_128(data).digest()

    @staticmethod
    def new() -> HashState:
        return xxhash.xxh3_128()


class ReadBuffer:
    """
    Fixed-capacity scratch memory reused across sequential reads.
    One instance per worker; never share an instance between threads.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("Buffer capacity must be positive")
        self._data = bytearray(capacity)
        self.view = memoryview(self._data)

    @property
    def capacity(self) -> int:
        return len(self._data)

    def fill(self, f, limit: int, offset: int = 0) -> int:
        """
        Read up to `limit` bytes from `f` into the buffer at `offset`.
        Stops early only at end of file. Returns the number of bytes read.
        """
        end = offset + limit
        if end > self.capacity:
            raise ValueError(f"Read of {limit} bytes at {offset} exceeds buffer capacity {self.capacity}")
        pos = offset
        while pos < end:
            n = f.readinto(self.view[pos:end])
            if not n:
                break
            pos += n
        return pos - offset


class FingerprintEngine(Fingerprinter):
    """
    Computes fingerprints at a requested tier. Stateless apart from its
    configuration, so one engine may serve many workers as long as each
    worker passes its own ReadBuffer.
    """

    def __init__(self, config: Optional[DeduplicationConfig] = None, algorithm: Optional[HashAlgorithm] = None):
        self.config = config or DeduplicationConfig()
        self.algorithm = algorithm or XXH3HashAlgorithm()

    def new_buffer(self) -> ReadBuffer:
        """A buffer large enough for every tier and for byte comparison."""
        return ReadBuffer(max(self.config.buffer_size, 2 * self.config.chunk_size))

    def select_tier(self, size: int) -> FingerprintTier:
        """First tier for a size bucket. Every file in a bucket shares the size."""
        if size <= self.config.buffer_size:
            return FingerprintTier.FULL_BUFFERED
        return FingerprintTier.PARTIAL

    def fingerprint(self, file: FileHandle, tier: FingerprintTier, buffer: ReadBuffer) -> FingerprintResult:
        try:
            if tier is FingerprintTier.FULL_BUFFERED:
                digest = self._hash_buffered(file, buffer)
            elif tier is FingerprintTier.PARTIAL:
                digest = self._hash_sample(file, buffer)
            else:
                digest = self._hash_streamed(file, buffer)
        except OSError as e:
            cause = e.strerror or str(e)
            logger.warning(f"Cannot read {file.path} ({tier.value}): {cause}")
            return FingerprintResult.failure(file, cause, tier)
        return FingerprintResult.success(file, digest, tier)

    def contents_equal(self, first: FileHandle, second: FileHandle, buffer: ReadBuffer) -> bool:
        """
        Byte-by-byte comparison of two files.

        Raises:
            OSError: if either file cannot be read; `filename` names the culprit.
        """
        chunk = self.config.chunk_size
        left = buffer.view[:chunk]
        right = buffer.view[chunk:2 * chunk]
        with self._open(first.path) as fa, self._open(second.path) as fb:
            while True:
                na = self._fill_named(buffer, fa, chunk, 0, first)
                nb = self._fill_named(buffer, fb, chunk, chunk, second)
                if na != nb or left[:na] != right[:nb]:
                    return False
                if na == 0:
                    return True

    @staticmethod
    def _fill_named(buffer: ReadBuffer, f, limit: int, offset: int, file: FileHandle) -> int:
        try:
            return buffer.fill(f, limit, offset=offset)
        except OSError as e:
            # readinto failures carry no filename
            e.filename = file.path
            raise

    @staticmethod
    def _open(path: str):
        return open(path, 'rb')

    def _hash_buffered(self, file: FileHandle, buffer: ReadBuffer) -> bytes:
        limit = self.config.buffer_size
        with self._open(file.path) as f:
            n = buffer.fill(f, limit)
            if n < limit:
                # Shorter than recorded (or exactly as recorded): hash what is there
                return self.algorithm.hash(buffer.view[:n])
            # Grew past the buffer since traversal: keep going so the digest
            # still covers the whole current content
            state = self.algorithm.new()
            state.update(buffer.view[:n])
            self._stream_rest(f, state, buffer)
            return state.digest()

    def _hash_sample(self, file: FileHandle, buffer: ReadBuffer) -> bytes:
        head_size = self.config.head_size
        tail_size = self.config.tail_size
        with self._open(file.path) as f:
            head = buffer.fill(f, head_size)
            end = f.seek(0, os.SEEK_END)
            # A file truncated since traversal must not have its head read twice
            f.seek(max(head, end - tail_size))
            tail = buffer.fill(f, tail_size, offset=head)
        return self.algorithm.hash(buffer.view[:head + tail])

    def _hash_streamed(self, file: FileHandle, buffer: ReadBuffer) -> bytes:
        state = self.algorithm.new()
        with self._open(file.path) as f:
            self._stream_rest(f, state, buffer)
        return state.digest()

    def _stream_rest(self, f, state: HashState, buffer: ReadBuffer) -> None:
        chunk = self.config.chunk_size
        while True:
            n = buffer.fill(f, chunk)
            if not n:
                break
            state.update(buffer.view[:n])

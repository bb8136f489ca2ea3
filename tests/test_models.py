"""
Unit tests for core data models and configuration validation.
"""
import dataclasses
import pytest

from dfsearch.core.models import (
    FileHandle, FingerprintTier, FingerprintResult, Fingerprint, DuplicateGroup,
    DeduplicationConfig, DeduplicationParams, DeduplicationStats, PartitionResult
)


class TestFileHandle:
    def test_is_immutable(self):
        handle = FileHandle(path="/a.txt", size=10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            handle.size = 20

    def test_equal_handles_are_interchangeable(self):
        assert FileHandle("/a.txt", 10) == FileHandle("/a.txt", 10)
        assert len({FileHandle("/a.txt", 10), FileHandle("/a.txt", 10)}) == 1

    def test_rejects_negative_size(self):
        with pytest.raises(ValueError):
            FileHandle(path="/a.txt", size=-1)


class TestFingerprint:
    def test_only_partial_tier_is_not_authoritative(self):
        assert not FingerprintTier.PARTIAL.is_authoritative
        assert FingerprintTier.FULL_STREAMED.is_authoritative
        assert FingerprintTier.FULL_BUFFERED.is_authoritative

    def test_digest_must_be_bytes(self):
        with pytest.raises(ValueError):
            Fingerprint(digest="abc", tier=FingerprintTier.PARTIAL)

    def test_result_success_and_failure(self):
        handle = FileHandle("/a.txt", 3)
        ok = FingerprintResult.success(handle, b"\x00" * 16, FingerprintTier.FULL_BUFFERED)
        assert ok.ok and ok.fingerprint.digest == b"\x00" * 16 and ok.error is None

        failed = FingerprintResult.failure(handle, "Permission denied", FingerprintTier.PARTIAL)
        assert not failed.ok and failed.fingerprint is None
        assert failed.error.path == "/a.txt"
        assert str(failed.error) == "/a.txt: Permission denied"


class TestDuplicateGroup:
    def test_redundant_bytes(self):
        group = DuplicateGroup(size=10, files=[FileHandle("/a", 10), FileHandle("/b", 10), FileHandle("/c", 10)])
        assert group.duplicate_count == 3
        assert group.redundant_bytes == 20
        assert group.paths == ["/a", "/b", "/c"]

    def test_single_file_is_not_duplicate(self):
        assert not DuplicateGroup(size=10, files=[FileHandle("/a", 10)]).is_duplicate()
        assert DuplicateGroup(size=10, files=[FileHandle("/a", 10), FileHandle("/b", 10)]).is_duplicate()


class TestDeduplicationConfig:
    def test_defaults(self):
        config = DeduplicationConfig()
        assert config.buffer_size == 4 * 1024 * 1024
        assert config.head_size == config.tail_size == 64 * 1024
        assert config.chunk_size == 32 * 1024
        assert config.workers == 1
        assert config.verify is False
        assert config.sample_size <= config.buffer_size

    @pytest.mark.parametrize("kwargs", [
        {"buffer_size": 0},
        {"head_size": -1},
        {"head_size": 0, "tail_size": 0},
        {"buffer_size": 100, "head_size": 64, "tail_size": 64},
        {"chunk_size": 0},
        {"workers": 0},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            DeduplicationConfig(**kwargs)

    def test_from_human_readable(self):
        config = DeduplicationConfig.from_human_readable("8M", "1K", "2K", "64K", workers=3, verify=True)
        assert config.buffer_size == 8 * 1024 * 1024
        assert config.head_size == 1024
        assert config.tail_size == 2048
        assert config.chunk_size == 64 * 1024
        assert config.workers == 3
        assert config.verify is True


class TestDeduplicationParams:
    def test_empty_root_rejected(self):
        with pytest.raises(ValueError, match="Root directory cannot be empty"):
            DeduplicationParams(root_dir="")


class TestDeduplicationStats:
    def test_update_stage_accumulates(self):
        stats = DeduplicationStats()

        stats.update_stage("sample", 2, 4, 0.5)
        stats.update_stage("sample", 1, 2, 0.25)

        assert stats.stage_stats["sample"] == {"groups": 3, "files": 6, "time": 0.75}

    def test_summary_lists_stages(self):
        stats = DeduplicationStats()
        stats.update_stage("size", 3, 9, 0.0)
        stats.update_stage("full", 1, 2, 0.01)
        summary = stats.print_summary()
        assert "Size Groups: 3 / 9" in summary
        assert "Full Content Hash Groups: 1 / 2" in summary


def test_partition_result_non_empty_count():
    result = PartitionResult(empty_files=[FileHandle("/e", 0)], total_files=5)
    assert result.non_empty_files == 4

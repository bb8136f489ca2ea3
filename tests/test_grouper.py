"""
Unit tests for FileGrouperImpl.
Verifies grouping logic for size and fingerprint grouping with proper filtering.
"""
from unittest import mock

from dfsearch.core import FileGrouperImpl, FingerprintEngine
from dfsearch.core.models import FileHandle, FingerprintTier, FingerprintResult


class TestFileGrouperImpl:
    """Test file grouping by size and fingerprint."""

    def test_groups_by_size_filters_single_files(self):
        files = [
            FileHandle(path="/a.txt", size=1024),
            FileHandle(path="/b.txt", size=1024),
            FileHandle(path="/c.txt", size=2048),
        ]

        size_groups = FileGrouperImpl().group_by_size(files)

        assert list(size_groups) == [1024]
        assert len(size_groups[1024]) == 2

    def test_groups_by_fingerprint_filters_small_groups(self):
        """Fingerprint grouping should exclude groups with <2 files."""
        files = [
            FileHandle(path="/dup1.txt", size=100),
            FileHandle(path="/dup2.txt", size=100),
            FileHandle(path="/unique.txt", size=100),
        ]
        digests = {"/dup1.txt": b"1" * 16, "/dup2.txt": b"1" * 16, "/unique.txt": b"2" * 16}

        fingerprinter = mock.Mock()
        fingerprinter.fingerprint.side_effect = lambda f, tier, buffer: FingerprintResult.success(
            f, digests[f.path], tier)

        groups, errors = FileGrouperImpl(fingerprinter).group_by_fingerprint(
            files, FingerprintTier.FULL_BUFFERED, buffer=None)

        assert errors == []
        assert len(groups) == 1
        assert {f.path for f in groups[b"1" * 16]} == {"/dup1.txt", "/dup2.txt"}

    def test_unreadable_files_are_reported_not_grouped(self):
        files = [
            FileHandle(path="/a.txt", size=5),
            FileHandle(path="/b.txt", size=5),
            FileHandle(path="/locked.txt", size=5),
        ]

        def fingerprint(f, tier, buffer):
            if f.path == "/locked.txt":
                return FingerprintResult.failure(f, "Permission denied", tier)
            return FingerprintResult.success(f, b"same" * 4, tier)

        fingerprinter = mock.Mock()
        fingerprinter.fingerprint.side_effect = fingerprint

        groups, errors = FileGrouperImpl(fingerprinter).group_by_fingerprint(
            files, FingerprintTier.PARTIAL, buffer=None)

        assert [f.path for f in groups[b"same" * 4]] == ["/a.txt", "/b.txt"]
        assert [e.path for e in errors] == ["/locked.txt"]
        assert errors[0].tier is FingerprintTier.PARTIAL

    def test_real_files_grouped_by_content(self, tmp_path, small_config):
        for name, content in [("a", b"same"), ("b", b"same"), ("c", b"diff")]:
            (tmp_path / name).write_bytes(content)
        files = [FileHandle(str(tmp_path / n), 4) for n in "abc"]
        engine = FingerprintEngine(small_config)

        groups, errors = FileGrouperImpl(engine).group_by_fingerprint(
            files, FingerprintTier.FULL_BUFFERED, engine.new_buffer())

        assert errors == []
        assert [[f.path for f in g] for g in groups.values()] == [[files[0].path, files[1].path]]

    def test_default_fingerprinter_is_xxh3_engine(self):
        assert isinstance(FileGrouperImpl().fingerprinter, FingerprintEngine)

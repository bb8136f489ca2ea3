"""
Tests for DeduplicationCommand, the scan → partition → report orchestrator.
"""
import pytest

from dfsearch.commands import DeduplicationCommand
from dfsearch.core.models import DeduplicationParams, DeduplicationConfig
from dfsearch.core.errors import TraversalError


class TestDeduplicationCommand:
    def test_execute_reports_duplicates_under_root(self, temp_dir, test_files):
        report = DeduplicationCommand().execute(DeduplicationParams(root_dir=str(temp_dir)))

        assert [g.paths for g in report.groups] == [
            sorted([str(test_files["dup1_a"]), str(test_files["dup1_b"]), str(test_files["sub_dup"])]),
            sorted([str(test_files["dup2_a"]), str(test_files["dup2_b"])]),
        ]
        assert [g.index for g in report.groups] == [1, 2]
        assert report.redundant_bytes == 1024 * 2 + 2048
        assert report.empty_files == [str(test_files["empty"])]
        assert report.total_files == len(test_files)
        assert report.non_empty_files == len(test_files) - 1

    def test_excluded_dirs_honoured(self, temp_dir, test_files):
        params = DeduplicationParams(root_dir=str(temp_dir), excluded_dirs=[str(temp_dir / "subdir")])
        report = DeduplicationCommand().execute(params)
        assert str(test_files["sub_dup"]) not in report.groups[0].paths
        assert report.groups[0].count == 2

    def test_missing_root_raises(self, temp_dir):
        with pytest.raises(TraversalError):
            DeduplicationCommand().execute(DeduplicationParams(root_dir=str(temp_dir / "missing")))

    def test_execute_entries_uses_given_config(self, temp_dir):
        content = b"x" * 3000
        (temp_dir / "a").write_bytes(content)
        (temp_dir / "b").write_bytes(content)
        config = DeduplicationConfig(buffer_size=1024, head_size=16, tail_size=16, chunk_size=64)

        command = DeduplicationCommand()
        report = command.execute_entries(
            [(str(temp_dir / "a"), 3000), (str(temp_dir / "b"), 3000)], config)

        assert report.groups[0].count == 2
        assert "full" in command.last_result.stats.stage_stats

    def test_last_result_empty_before_execution(self):
        assert DeduplicationCommand().last_result is None

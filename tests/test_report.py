"""
Unit tests for ReportBuilder.
"""
from dfsearch.core.models import PartitionResult, DuplicateGroup, FileHandle, FileReadError
from dfsearch.core.report import ReportBuilder


def group(size, *paths):
    return DuplicateGroup(size=size, files=[FileHandle(p, size) for p in paths])


class TestReportBuilder:
    def test_groups_numbered_from_one_in_received_order(self):
        result = PartitionResult(groups=[group(10, "/a", "/b"), group(20, "/c", "/d", "/e")], total_files=5)
        report = ReportBuilder.build(result)

        assert [(g.index, g.size, g.count) for g in report.groups] == [(1, 10, 2), (2, 20, 3)]
        assert report.groups[1].paths == ["/c", "/d", "/e"]

    def test_redundant_bytes_keeps_one_copy_per_group(self):
        result = PartitionResult(groups=[group(10, "/a", "/b"), group(20, "/c", "/d", "/e")])
        report = ReportBuilder.build(result)
        assert report.redundant_bytes == 10 * 1 + 20 * 2
        assert [g.redundant_bytes for g in report.groups] == [10, 40]
        assert report.duplicate_file_count == 5

    def test_counts_and_errors_passed_through(self):
        errors = [FileReadError(path="/locked", cause="Permission denied")]
        result = PartitionResult(
            empty_files=[FileHandle("/e1", 0), FileHandle("/e2", 0)],
            total_files=7,
            read_errors=errors,
        )
        report = ReportBuilder.build(result)

        assert report.empty_files == ["/e1", "/e2"]
        assert report.empty_count == 2
        assert report.total_files == 7
        assert report.non_empty_files == 5
        assert report.read_errors == errors
        assert report.groups == []
        assert report.redundant_bytes == 0

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/report.py
Turns a PartitionResult into a numbered, render-ready DuplicateReport.
"""
from typing import List

from dfsearch.core.models import PartitionResult, DuplicateReport, ReportGroup, DuplicateGroup


class ReportBuilder:
    """
    Numbers groups from 1 in the order received and totals the bytes that
    keeping one copy per group would free. Counts are passed through unchanged.
    """

    @staticmethod
    def build(result: PartitionResult) -> DuplicateReport:
        report = DuplicateReport(
            empty_files=[f.path for f in result.empty_files],
            total_files=result.total_files,
            read_errors=list(result.read_errors),
        )
        report.groups = ReportBuilder.number_groups(result.groups)
        report.redundant_bytes = sum(g.redundant_bytes for g in report.groups)
        return report

    @staticmethod
    def number_groups(groups: List[DuplicateGroup]) -> List[ReportGroup]:
        return [
            ReportGroup(index=idx, size=group.size, count=group.duplicate_count, paths=group.paths)
            for idx, group in enumerate(groups, 1)
        ]

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure sorting logic for duplicate groups, no dependencies outside core.
Gives every run over an unchanged tree the same presentation order.
"""
from typing import List
from dfsearch.core.models import DuplicateGroup


class Sorter:
    """
    Ordering rules:
    1. Files inside a group: by path string
    2. Groups of equal size: by their first path
    3. Groups of different size: ascending size
    """

    @staticmethod
    def sort_files_inside_groups(groups: List[DuplicateGroup]) -> None:
        """Modifies groups in-place."""
        for group in groups:
            group.files.sort(key=lambda f: f.path)

    @staticmethod
    def sort_groups(groups: List[DuplicateGroup]) -> None:
        """Sorts the list in-place. Expects files inside groups to be sorted already."""
        groups.sort(key=lambda g: (g.size, g.files[0].path if g.files else ""))

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Pipeline stages of the tiered duplicate detection engine.

CLASS HIERARCHY
---------------
SizeStageImpl     : routes files into size buckets, sets empty files aside
HashStageBase     : shared "split every group by fingerprint" loop
SampleHashStage   : tier 1, full-buffered for small buckets, head+tail sample for large ones
FullHashStage     : tier 2, full-streamed hash of partial-tier survivors
ByteCompareStage  : optional byte-by-byte check of confirmed groups

STAGE CONTRACTS
---------------
Hash stages implement the same `process()` interface:
  • Accept candidate groups from the previous stage
  • Append proven duplicates to `confirmed_duplicates`
  • Append unreadable files to `read_errors`
  • Return the groups that still need a deeper tier
  • Report progress via callback (stage name, processed count, total count)

Every stage only subdivides the groups it receives, so a file can never end
up in two groups and a group never mixes sizes.
"""

import os
import logging
from typing import List, Dict, Optional, Iterable, Tuple

from dfsearch.core.models import FileHandle, FingerprintTier, FileReadError, DuplicateGroup, Stage
from dfsearch.core.grouper import FileGrouperImpl
from dfsearch.core.hasher import FingerprintEngine, ReadBuffer
from dfsearch.core.interfaces import SizeStage, HashStage, ProgressCallback, Entry

logger = logging.getLogger(__name__)


# =============================
# Size Stage
# =============================
class SizeStageImpl(SizeStage):
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    @staticmethod
    def to_handle(entry: Entry) -> FileHandle:
        if isinstance(entry, FileHandle):
            return entry
        path, size = entry
        return FileHandle(path=os.fspath(path), size=int(size))

    def process(
            self,
            files: Iterable[Entry],
            progress_callback: Optional[ProgressCallback] = None
    ) -> Tuple[List[DuplicateGroup], List[FileHandle], int]:
        """
        Group by file size.
        Returns (DuplicateGroups with 2+ files of same size, empty files, files seen).
        """
        non_empty: List[FileHandle] = []
        empty_files: List[FileHandle] = []
        total_files = 0

        for entry in files:
            file = self.to_handle(entry)
            total_files += 1
            if file.size == 0:
                empty_files.append(file)
            else:
                non_empty.append(file)

        size_groups = self.grouper.group_by_size(non_empty)
        groups = [
            DuplicateGroup(size=size, files=files_list)
            for size, files_list in sorted(size_groups.items())
        ]
        logger.debug(
            f"Size grouping: {total_files} files, {len(empty_files)} empty, "
            f"{len(groups)} candidate buckets"
        )

        if progress_callback:
            progress_callback(Stage.SIZE.value, total_files, total_files)

        return groups, empty_files, total_files


# =============================
# Hash Stages
# =============================
class HashStageBase(HashStage):
    """
    Base class for fingerprint stages: splits each group by the tier
    returned from `get_tier()` and routes the pieces.
    """

    def __init__(self, grouper: FileGrouperImpl, fingerprinter: Optional[FingerprintEngine] = None):
        self.grouper = grouper
        self.fingerprinter = fingerprinter or grouper.fingerprinter

    def get_stage_name(self) -> str:
        raise NotImplementedError

    def get_tier(self, group: DuplicateGroup) -> FingerprintTier:
        raise NotImplementedError

    def process(
            self,
            groups: List[DuplicateGroup],
            confirmed_duplicates: List[DuplicateGroup],
            read_errors: List[FileReadError],
            buffer: ReadBuffer,
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[DuplicateGroup]:
        pending: List[DuplicateGroup] = []
        total_files = sum(len(group.files) for group in groups)
        processed_files = 0

        for group in groups:
            tier = self.get_tier(group)
            hash_groups, errors = self.grouper.group_by_fingerprint(group.files, tier, buffer)
            read_errors.extend(errors)

            for files_in_group in hash_groups.values():
                refined = DuplicateGroup(size=group.size, files=files_in_group)
                if tier.is_authoritative:
                    confirmed_duplicates.append(refined)
                else:
                    pending.append(refined)

            processed_files += len(group.files)
            if progress_callback:
                progress_callback(self.get_stage_name(), processed_files, total_files)

        return pending


class SampleHashStage(HashStageBase):
    """
    Tier 1. Buckets that fit the read buffer are hashed whole and confirmed
    right here; larger buckets get a head+tail sample and move on.
    """

    def get_stage_name(self) -> str:
        return Stage.SAMPLE.value

    def get_tier(self, group: DuplicateGroup) -> FingerprintTier:
        return self.fingerprinter.select_tier(group.size)


class FullHashStage(HashStageBase):
    def get_stage_name(self) -> str:
        return Stage.FULL.value

    def get_tier(self, group: DuplicateGroup) -> FingerprintTier:
        return FingerprintTier.FULL_STREAMED


class ByteCompareStage:
    """
    Optional paranoia check against hash collisions. Splits confirmed
    groups into classes of byte-identical files.
    """

    def __init__(self, fingerprinter: FingerprintEngine):
        self.fingerprinter = fingerprinter

    def get_stage_name(self) -> str:
        return Stage.VERIFY.value

    def process(
            self,
            groups: List[DuplicateGroup],
            confirmed_duplicates: List[DuplicateGroup],
            read_errors: List[FileReadError],
            buffer: ReadBuffer,
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[DuplicateGroup]:
        total_files = sum(len(group.files) for group in groups)
        processed_files = 0

        for group in groups:
            for members in self._split(group, read_errors, buffer):
                verified = DuplicateGroup(size=group.size, files=members)
                if verified.is_duplicate():
                    confirmed_duplicates.append(verified)

            processed_files += len(group.files)
            if progress_callback:
                progress_callback(self.get_stage_name(), processed_files, total_files)

        return []

    def _split(
            self,
            group: DuplicateGroup,
            read_errors: List[FileReadError],
            buffer: ReadBuffer
    ) -> List[List[FileHandle]]:
        classes: List[List[FileHandle]] = []

        for file in group.files:
            placed = False
            failed = False
            for members in classes:
                while members:
                    try:
                        same = self.fingerprinter.contents_equal(members[0], file, buffer)
                    except OSError as e:
                        culprit = members[0] if e.filename == members[0].path else file
                        self._record_failure(culprit, e, read_errors)
                        if culprit is file:
                            failed = True
                            break
                        # Representative vanished; the rest already matched it
                        members.pop(0)
                        continue
                    if same:
                        members.append(file)
                        placed = True
                    else:
                        logger.warning(f"Hash collision between {members[0].path} and {file.path}")
                    break
                if placed or failed:
                    break
            if not placed and not failed:
                classes.append([file])

        return classes

    @staticmethod
    def _record_failure(file: FileHandle, error: OSError, read_errors: List[FileReadError]) -> None:
        cause = error.strerror or str(error)
        logger.warning(f"Cannot read {file.path} (byte comparison): {cause}")
        read_errors.append(FileReadError(path=file.path, cause=cause, tier=None))


def stage_counts(groups: List[DuplicateGroup]) -> Dict[str, int]:
    """Groups and files held by a list of groups, for statistics."""
    return {"groups": len(groups), "files": sum(len(g.files) for g in groups)}

"""A reconstructed history of one file.

``metadata[0]`` is the record as read from the MFT and ``metadata[i + 1]``
is the state of the file before ``matches[i]`` happened, so ``matches[0]``
is the most recent operation and ``metadata[-1]`` the earliest known state.
Appended snapshots and time matches are never mutated afterwards, which lets
copies share them.
"""

from dataclasses import replace
from typing import List, Sequence as Seq

from .constants import SLOT_COUNT
from .marking import Marking
from .metadata import FileMetadata
from .operation import Operation, VolumeTransfer
from .rules import DELETE_OPERATION
from .time_match import TimeMatch


class Sequence:

    def __init__(self, metadata: FileMetadata):
        self.metadata: List[FileMetadata] = [metadata]
        self.matches: List[TimeMatch] = []
        self.marking = Marking()
        self.has_forgery = False

    def copy(self) -> 'Sequence':
        clone = Sequence.__new__(Sequence)
        clone.metadata = list(self.metadata)
        clone.matches = list(self.matches)
        clone.marking = self.marking.copy()
        clone.has_forgery = self.has_forgery
        return clone

    @property
    def earliest_metadata(self) -> FileMetadata:
        return self.metadata[-1]

    def find_time_match(self, metadata: FileMetadata, operations: Seq[Operation]) -> TimeMatch:
        # 우선순위: 기간 > 범위 > 시점
        first = operations[0]
        if first.has_duration_result_for(self.marking):
            lower, upper = first.get_duration(metadata, self.marking)
            return TimeMatch(lower, operations, upper, is_range=False)
        if first.has_range_result_for(self.marking):
            lower, upper = first.get_range(metadata, self.marking)
            return TimeMatch(lower, operations, upper, is_range=True)
        return TimeMatch(first.get_time(metadata, self.marking), operations)

    def add(self, metadata: FileMetadata, operations: Seq[Operation]) -> None:
        first = operations[0]
        self.matches.append(self.find_time_match(metadata, operations))
        if first.volume_transfer is not VolumeTransfer.NEVER:
            metadata = metadata.on_volume(first.volume_transfer)
        self.metadata.append(metadata)
        self.marking.mark(first.result_marking)

    def add_forgery(self, metadata: FileMetadata, operations: Seq[Operation]) -> None:
        self.matches.append(self.find_time_match(metadata, operations))
        self.metadata.append(metadata)
        self.has_forgery = True

    def add_with_copying(self, metadata: FileMetadata, operations: Seq[Operation]) -> None:
        """Add a copying operation and move copied values back to their sources."""
        first = operations[0]
        self.matches.append(self.find_time_match(metadata, operations))
        self.marking.mark(first.result_marking)
        timestamps = metadata.timestamps
        for slot in range(SLOT_COUNT):
            effect = first.effects[slot]
            if effect.is_copied() and not self.marking.is_marked(slot):
                source = effect.get_copy_source(slot)
                # 복사되기 전의 값은 원본 위치에 있었음
                timestamps = timestamps.with_copied(slot, source)
                self.marking.unmark(source)
        self.marking.mark(first.copy_marking)
        self.metadata.append(metadata.on_volume(first.volume_transfer).with_timestamps(timestamps))

    def add_split(self, metadata: FileMetadata, operations: Seq[Operation]) -> 'Sequence':
        """Add a combining operation; returns the history of the other file."""
        first = operations[0]
        own_marking, other_marking = first.split_markings
        split = Sequence(replace(self.earliest_metadata, split_origin=True))
        split.marking = self.marking.copy()

        self.matches.append(self.find_time_match(metadata, operations))
        split.matches.append(split.find_time_match(metadata, operations))
        self.metadata.append(metadata)
        split.metadata.append(metadata.split_from(first.volume_transfer))
        self.marking.mark(own_marking)
        split.marking.mark(other_marking)
        return split

    def add_deletion_operation(self, metadata: FileMetadata) -> None:
        latest = metadata.timestamps.latest()
        self.matches.append(TimeMatch(latest, [DELETE_OPERATION], is_range=True))
        self.metadata.append(metadata.undeleted())

    def is_fully_matched(self) -> bool:
        return self.marking.is_fully_marked()

    def has_irregular_timestamps(self) -> bool:
        return self.has_forgery or not self.matches

    def is_split(self) -> bool:
        return any(snapshot.split_origin for snapshot in self.metadata)
"""File operations described by their effect on the eight timestamp slots."""

from enum import Enum, IntEnum
from itertools import combinations
from typing import Optional, Sequence, Tuple

from .constants import SLOT_COUNT, SLOTS_PER_ATTRIBUTE
from .marking import Marking
from .slot_effect import SlotEffect
from .timestamps import Timestamp


class SearchStateError(RuntimeError):
    pass


class DirectoryMode(Enum):
    BOTH = 0
    FILES_ONLY = -1
    DIRECTORIES_ONLY = 1


class VolumeTransfer(IntEnum):
    NEVER = -1
    MAYBE = 0
    ALWAYS = 1


class Operation:

    def __init__(self, name: str, si: Sequence[SlotEffect], fn: Sequence[SlotEffect],
                 volume_transfer: VolumeTransfer = VolumeTransfer.NEVER,
                 directories: DirectoryMode = DirectoryMode.BOTH):
        if len(si) != SLOTS_PER_ATTRIBUTE or len(fn) != SLOTS_PER_ATTRIBUTE:
            raise ValueError(f"{name}: expected {SLOTS_PER_ATTRIBUTE} effects per attribute")

        self.name = name
        self.effects: Tuple[SlotEffect, ...] = tuple(si) + tuple(fn)
        self.volume_transfer = volume_transfer
        self.directories = directories

        # 한 번만 계산
        self.result_marking = Marking.of(
            *(i for i, effect in enumerate(self.effects) if effect.is_operation_result()))
        self.copy_marking = Marking.of(
            *(i for i, effect in enumerate(self.effects) if effect.is_copied()))
        self.is_creating = not any(
            effect.from_this_file() and not effect.is_operation_result() for effect in self.effects)
        self.is_combining = self.is_combining_operation_for(Marking())
        self.split_markings: Optional[Tuple[Marking, Marking]] = (
            self._calculate_split_markings() if self.is_combining else None)

    def _calculate_split_markings(self) -> Tuple[Marking, Marking]:
        # [0]: 이 파일 쪽 시퀀스, [1]: 분리된 다른 파일 쪽 시퀀스
        own, other = self.result_marking.copy(), self.result_marking.copy()
        first_file = self.effects[0].from_file if self.is_creating else 0
        for i, effect in enumerate(self.effects):
            if self.result_marking.is_marked(i):
                continue
            if effect.from_file == first_file:
                other.mark(i)
            else:
                own.mark(i)
        return own, other

    def matches(self, metadata, marking: Marking) -> bool:
        """Whether this operation can have produced the unmarked timestamps of ``metadata``."""
        if metadata.directory and self.directories is DirectoryMode.FILES_ONLY:
            return False
        if not metadata.directory and self.directories is DirectoryMode.DIRECTORIES_ONLY:
            return False

        if not self.has_copying() and marking.eclipses(self.result_marking):
            return False
        if self.has_copying() and marking.eclipses(self.copy_marking):
            return False

        timestamps = metadata.timestamps.all()
        for i, effect in enumerate(self.effects):
            if not marking.is_marked(i) and not effect.match(timestamps[i]):
                return False

        for i, j in combinations(range(SLOT_COUNT), 2):
            if marking.is_marked(i) or marking.is_marked(j):
                continue
            first, second = self.effects[i], self.effects[j]
            effect_order = first.compare(second)
            time_order = timestamps[i].compare(timestamps[j])

            # 늦어야 하는 쪽이 더 이른 시각
            if effect_order * time_order < 0:
                return False
            if first is second and first.is_always_self_equivalent() and time_order != 0:
                return False
            if not first.can_be_equivalent_with(second) and time_order == 0:
                return False
            if j - i == SLOTS_PER_ATTRIBUTE and first.same_type_equivalence_with(second) and time_order != 0:
                return False
        return True

    def has_copying(self) -> bool:
        return not self.copy_marking.is_unmarked()

    def _duration_pair(self, marking: Marking) -> Optional[Tuple[int, int, int]]:
        for i, j in combinations(range(SLOT_COUNT), 2):
            if marking.is_marked(i) or marking.is_marked(j):
                continue
            first, second = self.effects[i], self.effects[j]
            if not (first.is_operation_result() and second.is_operation_result()):
                continue
            order = first.compare(second)
            if order != 0:
                return i, j, order
        return None

    def has_duration_result_for(self, marking: Marking) -> bool:
        return self._duration_pair(marking) is not None

    def has_range_result_for(self, marking: Marking) -> bool:
        if not self.has_copying():
            return False
        return all(marking.is_marked(i) or not effect.is_operation_result()
                   for i, effect in enumerate(self.effects))

    def get_duration(self, metadata, marking: Marking) -> Tuple[Timestamp, Timestamp]:
        pair = self._duration_pair(marking)
        if pair is None:
            raise SearchStateError(f"{self.name} has no duration result for {marking!r}")
        i, j, order = pair
        timestamps = metadata.timestamps.all()
        if order < 0:
            return timestamps[i], timestamps[j]
        return timestamps[j], timestamps[i]

    def get_range(self, metadata, marking: Marking) -> Tuple[Timestamp, Optional[Timestamp]]:
        """Latest copied value, and the earliest uncopied value after it (None if open)."""
        if not self.has_range_result_for(marking):
            raise SearchStateError(f"{self.name} has no range result for {marking!r}")
        timestamps = metadata.timestamps.all()
        lower = Timestamp(0)
        for i, effect in enumerate(self.effects):
            if effect.is_copied() and timestamps[i] > lower:
                lower = timestamps[i]
        # 더 늦은 값이 없으면 최댓값 대신 상한 없음 (After T)
        upper = None
        for i, effect in enumerate(self.effects):
            if effect.is_copied() or timestamps[i] <= lower:
                continue
            if upper is None or timestamps[i] < upper:
                upper = timestamps[i]
        return lower, upper

    def get_time(self, metadata, marking: Marking) -> Timestamp:
        timestamps = metadata.timestamps.all()
        for i, effect in enumerate(self.effects):
            if effect.is_operation_result() and not marking.is_marked(i):
                return timestamps[i]
        raise SearchStateError(f"{self.name} has no unmarked result slot for {marking!r}")

    def is_combining_operation_for(self, marking: Marking) -> bool:
        for i, j in combinations(range(SLOT_COUNT), 2):
            if marking.is_marked(i) or marking.is_marked(j):
                continue
            first, second = self.effects[i], self.effects[j]
            if (not first.is_operation_result() and not second.is_operation_result()
                    and first.from_file != second.from_file):
                return True
        return False

    def equals_for_marking(self, other: 'Operation', marking: Marking) -> bool:
        """Whether both operations leave the same state behind for ``marking``."""
        if marking.get_change_for(self.result_marking) != marking.get_change_for(other.result_marking):
            return False
        if self.volume_transfer != other.volume_transfer:
            return False
        if self.has_copying() or other.has_copying():
            for mine, theirs in zip(self.effects, other.effects):
                if (mine.is_copied() or theirs.is_copied()) and mine is not theirs:
                    return False
        combining = self.is_combining_operation_for(marking)
        if combining != other.is_combining_operation_for(marking):
            return False
        if combining:
            for mine, theirs in zip(self.effects, other.effects):
                if mine.from_file != theirs.from_file:
                    return False
        return True

    def __repr__(self):
        return f"Operation({self.name!r})"

    def __str__(self):
        return self.name

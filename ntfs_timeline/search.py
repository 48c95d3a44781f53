"""Backtracking reconstruction of operation histories.

Each step takes the earliest known state of a sequence, finds every rule that
explains some of its still unexplained timestamps and groups the rules that
leave the same state behind. The first group continues the sequence, every
other group continues a copy of it, and combining rules additionally split off
the history of the second file. New sequences are appended to the case and
grown in turn, until every timestamp is explained or nothing matches.
"""

from enum import Enum
from typing import Iterable, List

from .case import Case
from .marking import Marking
from .metadata import FileMetadata
from .operation import Operation
from .rules import DEFAULT_CATALOG, RuleCatalog
from .sequence import Sequence


class Priority(Enum):
    # 일반 작업이 맞지 않을 때만 위조 작업 고려
    REGULAR = 'regular'
    # 일반 작업과 위조 작업을 동시에 고려
    EQUAL = 'equal'


def group_matches(operations: Iterable[Operation], metadata: FileMetadata,
                  marking: Marking) -> List[List[Operation]]:
    """Matching operations bucketed by equivalence for ``marking``, first fit."""
    groups: List[List[Operation]] = []
    for operation in operations:
        if not operation.matches(metadata, marking):
            continue
        for group in groups:
            if group[0].equals_for_marking(operation, marking):
                group.append(operation)
                break
        else:
            groups.append([operation])
    return groups


class TimelineSearch:

    def __init__(self, catalog: RuleCatalog = DEFAULT_CATALOG, priority: Priority = Priority.REGULAR):
        self.catalog = catalog
        self.priority = priority

    @property
    def active_operations(self):
        if self.priority is Priority.EQUAL:
            return self.catalog.all_operations
        return self.catalog.regular

    def analyse(self, case: Case) -> Case:
        if not case.has_si_and_fn():
            return case
        first = case.sequences[0]
        latest = first.metadata[0]
        if latest.deleted:
            first.add_deletion_operation(latest)

        # 분석 중 케이스에 시퀀스가 추가되므로 인덱스로 순회
        index = 0
        while index < len(case.sequences):
            self.fill_sequence(case, case.sequences[index])
            index += 1
        return case

    def matching_groups(self, metadata: FileMetadata, marking: Marking) -> List[List[Operation]]:
        return group_matches(self.active_operations, metadata, marking)

    def fill_sequence(self, case: Case, sequence: Sequence) -> None:
        while not sequence.is_fully_matched():
            metadata = sequence.earliest_metadata
            marking = sequence.marking.copy()
            groups = self.matching_groups(metadata, marking)

            if not groups:
                if self.priority is Priority.REGULAR:
                    forged = [op for op in self.catalog.forgery if op.matches(metadata, marking)]
                    if forged:
                        sequence.add_forgery(metadata, forged)
                # 위조이거나 설명할 수 없는 타임스탬프
                return

            # 0번 그룹이 원래 시퀀스를 이어가므로 마지막에 처리
            for position in range(len(groups) - 1, -1, -1):
                operations = groups[position]
                branch = sequence if position == 0 else sequence.copy()
                self._extend(case, branch, metadata, marking, operations)
                if position != 0:
                    case.add(branch)

    @staticmethod
    def _extend(case: Case, branch: Sequence, metadata: FileMetadata, marking: Marking,
                operations: List[Operation]) -> None:
        first = operations[0]
        if first.has_copying():
            branch.add_with_copying(metadata, operations)
        elif first.is_combining and first.is_combining_operation_for(marking):
            case.add(branch.add_split(metadata, operations))
        else:
            branch.add(metadata, operations)

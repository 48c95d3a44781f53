from typing import Optional, Sequence, Tuple

from .operation import Operation
from .timestamps import Timestamp


class TimeMatch:
    """A moment, range or duration and the operations that fit it equally well.

    A range (``is_range``) means the operation happened somewhere in between
    the bounds, or after ``lower`` when there is no upper bound. A duration
    means the operation was in progress from ``lower`` to ``upper``.
    """

    __slots__ = ('lower', 'upper', 'is_range', 'operations')

    def __init__(self, lower: Timestamp, operations: Sequence[Operation],
                 upper: Optional[Timestamp] = None, is_range: bool = False):
        if not operations:
            raise ValueError("TimeMatch needs at least one operation")
        self.lower = lower
        self.upper = upper if upper is not None and upper != lower else None
        self.is_range = is_range
        self.operations: Tuple[Operation, ...] = tuple(operations)

    def has_upper_bound(self) -> bool:
        return self.upper is not None

    @property
    def kind(self) -> str:
        if not self.has_upper_bound():
            return 'after' if self.is_range else 'at'
        return 'between' if self.is_range else 'from'

    def describe_time(self) -> str:
        kind = self.kind
        if kind == 'at':
            return f"At {self.lower}"
        if kind == 'after':
            return f"After {self.lower}"
        if kind == 'between':
            return f"Between {self.lower} and {self.upper}"
        return f"From {self.lower} to {self.upper}"

    def __str__(self):
        return f"{self.describe_time()}: {' | '.join(op.name for op in self.operations)}"

    def __repr__(self):
        return f"TimeMatch({self})"

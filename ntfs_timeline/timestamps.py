from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import (
    MAX_TIMESTAMP, SLOT_COUNT, SLOTS_PER_ATTRIBUTE, format_timestamp
)


@dataclass(frozen=True, order=True)
class Timestamp:
    """Unsigned count of 100 ns ticks since 1601-01-01 UTC."""
    value: int

    def __post_init__(self):
        if not 0 <= self.value <= MAX_TIMESTAMP:
            raise ValueError(f"Timestamp out of range: {self.value}")

    def is_rounded_on(self, ticks: int) -> bool:
        return self.value % ticks == 0

    def compare(self, other: 'Timestamp') -> int:
        return (self.value > other.value) - (self.value < other.value)

    def __str__(self):
        return format_timestamp(self.value)


@dataclass(frozen=True)
class Timestamps:
    si: Optional[Tuple[Timestamp, ...]] = None
    fn: Optional[Tuple[Timestamp, ...]] = None

    @classmethod
    def from_values(cls, si_values, fn_values) -> 'Timestamps':
        si = tuple(Timestamp(v) for v in si_values) if si_values is not None else None
        fn = tuple(Timestamp(v) for v in fn_values) if fn_values is not None else None
        return cls(si, fn)

    def has_si_and_fn(self) -> bool:
        return self.si is not None and self.fn is not None

    def all(self) -> Tuple[Timestamp, ...]:
        return self.si + self.fn

    def latest(self) -> Timestamp:
        return max(self.all())

    def with_copied(self, source: int, target: int) -> 'Timestamps':
        slots = list(self.all())
        slots[target] = slots[source]
        return Timestamps(tuple(slots[:SLOTS_PER_ATTRIBUTE]), tuple(slots[SLOTS_PER_ATTRIBUTE:SLOT_COUNT]))

    def __str__(self):
        si = ' '.join(str(t) for t in self.si) if self.si else '-'
        fn = ' '.join(str(t) for t in self.fn) if self.fn else '-'
        return f"$SI = {si}\n$FN = {fn}"

from .constants import SLOT_COUNT, SLOT_NAMES

FULL_BITMAP = (1 << SLOT_COUNT) - 1


class Marking:
    """Set of timestamp slots already explained by an operation."""

    __slots__ = ('_bitmap',)

    def __init__(self, bitmap: int = 0):
        self._bitmap = bitmap & FULL_BITMAP

    @classmethod
    def of(cls, *indexes: int) -> 'Marking':
        marking = cls()
        for index in indexes:
            marking.mark(index)
        return marking

    def is_marked(self, index: int) -> bool:
        return bool(self._bitmap & (1 << index))

    def mark(self, target) -> None:
        # 인덱스 또는 다른 Marking 전체
        if isinstance(target, Marking):
            self._bitmap |= target._bitmap
        else:
            self._bitmap |= 1 << target

    def unmark(self, index: int) -> None:
        self._bitmap &= ~(1 << index)

    def eclipses(self, other: 'Marking') -> bool:
        """True if every slot marked in ``other`` is also marked here."""
        return other._bitmap & ~self._bitmap == 0

    def get_change_for(self, other: 'Marking') -> 'Marking':
        """Slots marked in ``other`` but not in this marking."""
        return Marking(other._bitmap & ~self._bitmap)

    def is_fully_marked(self) -> bool:
        return self._bitmap == FULL_BITMAP

    def is_unmarked(self) -> bool:
        return self._bitmap == 0

    def indexes(self) -> list:
        return [i for i in range(SLOT_COUNT) if self.is_marked(i)]

    def copy(self) -> 'Marking':
        return Marking(self._bitmap)

    def __eq__(self, other):
        if not isinstance(other, Marking):
            return NotImplemented
        return self._bitmap == other._bitmap

    __hash__ = None

    def __repr__(self):
        return f"Marking({', '.join(SLOT_NAMES[i] for i in self.indexes())})"

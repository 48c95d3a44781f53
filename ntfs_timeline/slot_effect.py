"""How one file operation sets one timestamp slot.

Every member carries constant attributes and all behaviour is derived from
them:

lateness
    Ordering class of the resulting time. Operation time (1) is always later
    than an unchanged time (0). ``INCOMPARABLE`` is used for values shifted
    by a time-zone difference (FAT volumes, zip archives), which can be
    earlier or later than anything else.
possible_equivalence
    Effects in the same class may produce equal times.
same_type_equivalence
    Two different effects in the same class must produce equal times when
    they sit on the same timestamp kind of both attributes.
always_self_equivalent
    Two slots with this same effect must hold equal times.
from_file
    Which file the value originates from: 0 this file, 1 the other file,
    2 neither (any time / tunnelled).
operation_result
    The value is the time of the operation itself.
rounding
    Granularity in ticks the value must be quantized to.
copy_style / copied_from
    Whether the value is copied from another slot of the same record.
"""

from enum import Enum

from .constants import SLOT_COUNT, SLOTS_PER_ATTRIBUTE, TICKS_PER_SECOND

INCOMPARABLE = -1

THIS_FILE = 0
OTHER_FILE = 1
NO_FILE = 2


class CopyStyle(Enum):
    NOT_COPIED = 0
    FROM_SAME_TYPE = 1
    FROM_SLOT = 2


class SlotEffect(Enum):
    # any time
    ANY = (INCOMPARABLE, 0, 8, False, THIS_FILE, False, 1, CopyStyle.NOT_COPIED, None)
    # any time, rounded on seconds
    R_ANY = (INCOMPARABLE, 0, 9, False, THIS_FILE, False, TICKS_PER_SECOND, CopyStyle.NOT_COPIED, None)
    # rounded on 2 seconds + time-zone difference, copied from $SI.W
    R_W_P_TZD = (INCOMPARABLE, 2, 4, True, OTHER_FILE, True, 2 * TICKS_PER_SECOND, CopyStyle.FROM_SLOT, 1)
    # $SI.C of a FAT volume, rounded on 10 ms + time-zone difference
    SRC_FATR_C = (INCOMPARABLE, 2, 2, True, OTHER_FILE, False, 100_000, CopyStyle.NOT_COPIED, None)
    # $SI.W of a FAT volume, rounded on 2 seconds + time-zone difference
    SRC_FATR_W = (INCOMPARABLE, 2, 3, True, OTHER_FILE, False, 2 * TICKS_PER_SECOND, CopyStyle.NOT_COPIED, None)
    # unchanged
    U = (0, 0, 0, False, THIS_FILE, False, 1, CopyStyle.NOT_COPIED, None)
    # copied from the same kind in $SI
    SI_SRC = (0, 0, 0, False, THIS_FILE, False, 1, CopyStyle.FROM_SAME_TYPE, None)
    # taken from the source file
    SRC = (0, 1, 1, False, OTHER_FILE, False, 1, CopyStyle.NOT_COPIED, None)
    # restored by file tunneling
    TNL = (0, 5, 7, True, NO_FILE, False, 1, CopyStyle.NOT_COPIED, None)
    OP_START = (1, 3, 5, True, THIS_FILE, True, 1, CopyStyle.NOT_COPIED, None)
    # time of operation + processing time
    OP_END = (2, 3, 6, True, THIS_FILE, True, 1, CopyStyle.NOT_COPIED, None)

    def __init__(self, lateness, possible_equivalence, same_type_equivalence,
                 always_self_equivalent, from_file, operation_result, rounding,
                 copy_style, copied_from):
        self.lateness = lateness
        self.possible_equivalence = possible_equivalence
        self.same_type_equivalence = same_type_equivalence
        self.always_self_equivalent = always_self_equivalent
        self.from_file = from_file
        self.operation_result = operation_result
        self.rounding = rounding
        self.copy_style = copy_style
        self.copied_from = copied_from

    def compare(self, other: 'SlotEffect') -> int:
        """-1/1 if this effect is earlier/later than ``other``, 0 if unknown or equal."""
        if self.lateness == INCOMPARABLE or other.lateness == INCOMPARABLE:
            return 0
        return (self.lateness > other.lateness) - (self.lateness < other.lateness)

    def can_be_equivalent_with(self, other: 'SlotEffect') -> bool:
        return self.possible_equivalence == other.possible_equivalence

    def same_type_equivalence_with(self, other: 'SlotEffect') -> bool:
        return self is not other and self.same_type_equivalence == other.same_type_equivalence

    def is_always_self_equivalent(self) -> bool:
        return self.always_self_equivalent

    def is_operation_result(self) -> bool:
        return self.operation_result

    def from_this_file(self) -> bool:
        return self.from_file == THIS_FILE

    def is_copied(self) -> bool:
        return self.copy_style is not CopyStyle.NOT_COPIED

    def match(self, timestamp) -> bool:
        return timestamp.is_rounded_on(self.rounding)

    def get_copy_source(self, slot: int) -> int:
        if self.copy_style is CopyStyle.FROM_SAME_TYPE:
            return (slot + SLOTS_PER_ATTRIBUTE) % SLOT_COUNT
        if self.copy_style is CopyStyle.FROM_SLOT:
            return self.copied_from
        return slot

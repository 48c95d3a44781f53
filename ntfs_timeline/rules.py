"""Catalog of known Windows file operations and their timestamp effects.

Rules are listed in matching order; the first rule of every group of
equivalent matches represents the group during the search.
"""

from dataclasses import dataclass
from typing import Tuple

from .operation import DirectoryMode, Operation, VolumeTransfer
from .slot_effect import SlotEffect

ANY = SlotEffect.ANY
R_ANY = SlotEffect.R_ANY
R_W_P_TZD = SlotEffect.R_W_P_TZD
SRC_FATR_C = SlotEffect.SRC_FATR_C
SRC_FATR_W = SlotEffect.SRC_FATR_W
U = SlotEffect.U
SI_SRC = SlotEffect.SI_SRC
SRC = SlotEffect.SRC
TNL = SlotEffect.TNL
OP_START = SlotEffect.OP_START
OP_END = SlotEffect.OP_END

NEVER = VolumeTransfer.NEVER
MAYBE = VolumeTransfer.MAYBE
ALWAYS = VolumeTransfer.ALWAYS

FILES_ONLY = DirectoryMode.FILES_ONLY
DIRECTORIES_ONLY = DirectoryMode.DIRECTORIES_ONLY

ALL_OP_START = (OP_START, OP_START, OP_START, OP_START)
UNCHANGED = (U, U, U, U)
FROM_SI = (SI_SRC, SI_SRC, SI_SRC, SI_SRC)


@dataclass(frozen=True)
class RuleCatalog:
    regular: Tuple[Operation, ...]
    forgery: Tuple[Operation, ...]

    @property
    def all_operations(self) -> Tuple[Operation, ...]:
        return self.regular + self.forgery

    def find(self, name: str) -> Operation:
        for operation in self.all_operations:
            if operation.name == name:
                return operation
        raise KeyError(name)


REGULAR_OPERATIONS = (
    Operation("Create", ALL_OP_START, ALL_OP_START),
    Operation("Create with file tunneling", (TNL, OP_START, OP_START, OP_START), (TNL, OP_START, OP_START, OP_START)),

    # 복사
    Operation("Copy", (OP_START, SRC, OP_END, OP_START), ALL_OP_START, MAYBE),
    Operation("Copy from FAT volume", (OP_START, SRC_FATR_W, OP_END, OP_START), ALL_OP_START, ALWAYS),
    Operation("Copy with last access update enabled", (OP_START, SRC, OP_END, OP_END), ALL_OP_START, MAYBE),
    Operation("Copy with file tunneling", (TNL, SRC, OP_END, OP_START), (TNL, OP_START, OP_START, OP_START), MAYBE),
    Operation("Copy with quirk", (OP_START, SRC, SRC, OP_START), ALL_OP_START, MAYBE),
    Operation("Copy from FAT volume with last access update enabled",
              (OP_START, SRC_FATR_W, OP_END, OP_END), ALL_OP_START, ALWAYS),
    Operation("Copy with last access update enabled and file tunneling",
              (TNL, SRC, OP_END, OP_END), ALL_OP_START, MAYBE),
    Operation("Copy from FAT volume with last access update enabled and file tunneling",
              (TNL, SRC_FATR_W, OP_END, OP_END), ALL_OP_START, ALWAYS),

    # 수정
    Operation("Update", (U, OP_END, OP_START, U), UNCHANGED, NEVER, FILES_ONLY),
    Operation("Update directory", (U, OP_END, OP_START, OP_END), UNCHANGED, NEVER, DIRECTORIES_ONLY),
    Operation("Update with last access update enabled", (U, OP_END, OP_START, OP_END), UNCHANGED, NEVER, FILES_ONLY),

    # 이동
    Operation("Move in the same volume", (U, U, OP_START, U), FROM_SI),
    Operation("Move in the same volume with file tunneling", (TNL, U, OP_START, U), FROM_SI),
    Operation("Move from another volume", (SRC, SRC, OP_END, OP_START), ALL_OP_START, ALWAYS),
    Operation("Move from FAT volume", (SRC_FATR_C, SRC_FATR_W, OP_END, OP_START), ALL_OP_START, ALWAYS),
    Operation("Move from another volume with last access update enabled",
              (SRC, SRC, OP_END, OP_END), ALL_OP_START, ALWAYS),
    Operation("Move from another volume with quirk", (SRC, SRC, SRC, OP_START), ALL_OP_START, ALWAYS),
    Operation("Move from FAT volume with last access update enabled",
              (SRC_FATR_C, SRC_FATR_W, OP_END, OP_END), ALL_OP_START, ALWAYS),

    # 덮어쓰기
    Operation("Overwriting copy", (U, SRC, OP_START, U), UNCHANGED, MAYBE, FILES_ONLY),
    Operation("Overwriting copy from FAT volume", (U, SRC_FATR_W, OP_START, U), UNCHANGED, ALWAYS, FILES_ONLY),
    Operation("Overwriting copy with last access update enabled",
              (U, SRC, OP_START, OP_START), UNCHANGED, MAYBE, FILES_ONLY),
    Operation("Overwriting move from another volume", (SRC, SRC, OP_START, U), UNCHANGED, MAYBE, FILES_ONLY),
    Operation("Overwriting move from FAT volume",
              (SRC_FATR_C, SRC_FATR_W, OP_START, U), UNCHANGED, ALWAYS, FILES_ONLY),
    Operation("Overwriting move with last access update enabled",
              (SRC, SRC, OP_START, OP_START), UNCHANGED, MAYBE, FILES_ONLY),
    Operation("Overwriting move from FAT volume with last access update enabled",
              (SRC_FATR_C, SRC_FATR_W, OP_START, OP_START), UNCHANGED, ALWAYS, FILES_ONLY),

    # 이름 변경
    Operation("File name change", (U, U, OP_START, U), FROM_SI),
    Operation("File name change with file tunneling", (TNL, U, OP_START, U), FROM_SI),

    Operation("Attribute change", (U, U, OP_START, U), UNCHANGED),
    Operation("Extract zip file", (R_W_P_TZD, R_W_P_TZD, OP_END, R_W_P_TZD), ALL_OP_START, MAYBE, FILES_ONLY),
    Operation("Access with last access update enabled", (U, U, U, OP_START), UNCHANGED),
)

# 시각을 특정할 수 있는 위조 작업만 포함
FORGERY_OPERATIONS = (
    Operation("Use of a time-stamp change tool", (ANY, ANY, OP_START, ANY), UNCHANGED),
    Operation("Use of a time-stamp change tool which rounds on seconds", (R_ANY, R_ANY, OP_START, R_ANY), UNCHANGED),
)

# 타임스탬프를 바꾸지 않지만 모든 타임스탬프 이후에 일어남
DELETE_OPERATION = Operation("Delete", UNCHANGED, UNCHANGED)

DEFAULT_CATALOG = RuleCatalog(REGULAR_OPERATIONS, FORGERY_OPERATIONS)

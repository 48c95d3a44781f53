from enum import IntFlag, IntEnum
from datetime import datetime, timedelta, timezone

# NTFS 타임스탬프 에포크 (1601-01-01 00:00:00 UTC)
NTFS_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)

# 1 tick = 100 나노초
TICKS_PER_SECOND = 10_000_000
MAX_TIMESTAMP = 0xFFFFFFFFFFFFFFFF

MFT_ENTRY_SIZE = 1024
MFT_ENTRY_SIZE_UNIT = 1024

MFT_SIGNATURE = b'FILE'

ROOT_DIRECTORY_INDEX = 5

# 이 개수보다 많은 레코드를 분석할 때 진행률 표시
PROGRESS_THRESHOLD = 10_000

# 타임스탬프 슬롯: 0..3 = $SI, 4..7 = $FN
SLOT_COUNT = 8
SLOTS_PER_ATTRIBUTE = 4

SLOT_NAMES = (
    '$SI.C', '$SI.W', '$SI.E', '$SI.A',
    '$FN.C', '$FN.W', '$FN.E', '$FN.A',
)


class AttrType(IntEnum):
    STANDARD_INFORMATION = 0x10
    ATTRIBUTE_LIST = 0x20
    FILE_NAME = 0x30
    DATA = 0x80
    END = 0xFFFFFFFF


class MftRecordFlags(IntFlag):
    IN_USE = 0x0001
    DIRECTORY = 0x0002
    EXTENSION = 0x0004
    SPECIAL_INDEX = 0x0008


class FileNamespace(IntEnum):
    POSIX = 0
    WIN32 = 1
    DOS = 2
    WIN32_AND_DOS = 3


def filetime_to_datetime(filetime: int) -> datetime:
    if filetime is None or filetime < 0:
        return None
    try:
        seconds, ticks = divmod(filetime, TICKS_PER_SECOND)
        # timedelta는 마이크로초 단위까지만 지원
        return NTFS_EPOCH + timedelta(seconds=seconds, microseconds=ticks // 10)
    except (OverflowError, OSError, ValueError):
        return None


def format_timestamp(filetime: int) -> str:
    dt = filetime_to_datetime(filetime)
    if dt is None:
        return f"(invalid: {filetime})"
    ticks = filetime % TICKS_PER_SECOND
    return f"{dt.strftime('%Y-%m-%d %H:%M:%S')}.{ticks:07d} UTC"


def parse_file_reference(ref: int) -> tuple:
    entry_number = ref & 0x0000FFFFFFFFFFFF
    sequence_number = (ref >> 48) & 0xFFFF
    return entry_number, sequence_number

"""Pytest bootstrap and synthetic $MFT record builders.

The ``pytest`` console script can run with a sys.path that excludes the
repository root. Ensure ``import ntfs_timeline`` resolves to the local package.
"""

import struct
import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

from ntfs_timeline.constants import MFT_ENTRY_SIZE, MftRecordFlags  # noqa: E402

# 2019-06-28 12:47:24 UTC
BASE_TIME = 132061996440000000

FIRST_ATTRIBUTE_OFFSET = 56
UPDATE_SEQUENCE_OFFSET = 48
UPDATE_SEQUENCE_NUMBER = b'\x07\x00'


def _resident_attribute(attr_type, content):
    length = 24 + len(content)
    length += -length % 8
    header = struct.pack('<IIBBHHHIHBB', attr_type, length, 0, 0, 0, 0, 0, len(content), 24, 0, 0)
    return (header + content).ljust(length, b'\x00')


def standard_information(times):
    return _resident_attribute(0x10, struct.pack('<4Q', *times) + b'\x00' * 16)


def file_name(name, times, parent=5, parent_sequence=1, namespace=1):
    encoded = name.encode('utf-16-le')
    content = struct.pack('<Q4QQQII', (parent_sequence << 48) | parent, *times, 0, 0, 0, 0)
    content += struct.pack('<BB', len(name), namespace) + encoded
    return _resident_attribute(0x30, content)


def build_record(si_times=None, fn_times=None, name='file.txt', parent=5, in_use=True,
                 directory=False, sequence=1, signature=b'FILE', extra_names=()):
    """One record of MFT_ENTRY_SIZE bytes with the update sequence applied."""
    attributes = b''
    if si_times is not None:
        attributes += standard_information(si_times)
    for extra_name, namespace in extra_names:
        attributes += file_name(extra_name, fn_times, parent, namespace=namespace)
    if fn_times is not None:
        attributes += file_name(name, fn_times, parent)
    attributes += struct.pack('<II', 0xFFFFFFFF, 0)

    flags = 0
    if in_use:
        flags |= MftRecordFlags.IN_USE
    if directory:
        flags |= MftRecordFlags.DIRECTORY

    sectors = MFT_ENTRY_SIZE // 512
    used_size = FIRST_ATTRIBUTE_OFFSET + len(attributes)
    header = signature + struct.pack('<HHQHHHHII', UPDATE_SEQUENCE_OFFSET, sectors + 1, 0, sequence, 1,
                                     FIRST_ATTRIBUTE_OFFSET, flags, used_size, MFT_ENTRY_SIZE)
    record = bytearray(header.ljust(UPDATE_SEQUENCE_OFFSET, b'\x00'))
    # 원래 값은 0, 섹터 끝에는 USN
    record += UPDATE_SEQUENCE_NUMBER + b'\x00\x00' * sectors
    record = record.ljust(FIRST_ATTRIBUTE_OFFSET, b'\x00') + attributes
    record = record.ljust(MFT_ENTRY_SIZE, b'\x00')
    for sector in range(1, sectors + 1):
        record[sector * 512 - 2:sector * 512] = UPDATE_SEQUENCE_NUMBER
    return bytes(record)


def created_record(time=BASE_TIME, **kwargs):
    return build_record([time] * 4, [time] * 4, **kwargs)


@pytest.fixture
def write_mft(tmp_path):
    """Write ``{index: record bytes}`` as an $MFT file, empty slots zero-filled."""
    def write(records, name='MFT'):
        path = tmp_path / name
        count = max(records) + 1
        with open(path, 'wb') as f:
            for index in range(count):
                f.write(records.get(index, b'\x00' * MFT_ENTRY_SIZE))
        return path
    return write

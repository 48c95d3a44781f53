import struct
from enum import Enum
from pathlib import Path
from typing import Dict, Generator, Iterable, List, Optional, Sequence

from .case import Case
from .constants import (
    MFT_ENTRY_SIZE, MFT_ENTRY_SIZE_UNIT, MFT_SIGNATURE, ROOT_DIRECTORY_INDEX,
    AttrType, FileNamespace, MftRecordFlags,
    parse_file_reference
)
from .metadata import FileMetadata
from .timestamps import Timestamps


class RecordFilter(Enum):
    ALL = 'all'
    DELETED = 'deleted'
    IRREGULAR = 'irregular'


def validate_entry_size(entry_size: int) -> int:
    if entry_size < MFT_ENTRY_SIZE_UNIT or entry_size % MFT_ENTRY_SIZE_UNIT != 0:
        raise ValueError(
            f"Entry size needs to be a positive integer divisible by {MFT_ENTRY_SIZE_UNIT}, {entry_size} is not")
    return entry_size


class MFTEntry:

    def __init__(self, data: bytes, entry_number: int):
        self.data = data
        self.entry_number = entry_number
        self.attributes: List[dict] = []
        self.is_valid = False
        self.flags = 0
        self.sequence = 0
        self.attr_offset = 0
        self.used_size = 0

    @property
    def in_use(self) -> bool:
        return bool(self.flags & MftRecordFlags.IN_USE)

    @property
    def is_directory(self) -> bool:
        return bool(self.flags & MftRecordFlags.DIRECTORY)

    def parse(self, parse_attributes: bool = True) -> bool:
        if len(self.data) < 48:
            return False

        # 시그니처 확인 (BAAD 포함 나머지는 손상된 레코드)
        if self.data[0:4] != MFT_SIGNATURE:
            return False

        # Fixup 배열 적용
        fixup_offset = struct.unpack('<H', self.data[4:6])[0]
        fixup_count = struct.unpack('<H', self.data[6:8])[0]

        if fixup_count > 0 and fixup_offset + fixup_count * 2 <= len(self.data):
            self._apply_fixup(fixup_offset, fixup_count)

        # 헤더 파싱
        self.sequence = struct.unpack('<H', self.data[16:18])[0]
        self.flags = struct.unpack('<H', self.data[22:24])[0]

        # 속성 시작 오프셋
        self.attr_offset = struct.unpack('<H', self.data[20:22])[0]
        self.used_size = struct.unpack('<I', self.data[24:28])[0]

        if parse_attributes:
            self.parse_attributes()

        self.is_valid = True
        return True

    def _apply_fixup(self, offset: int, count: int):
        data = bytearray(self.data)

        for i in range(1, count):
            fixup_value = data[offset + i * 2:offset + i * 2 + 2]
            sector_end = (i * 512) - 2

            if sector_end + 2 <= len(data):
                # 섹터 끝 2바이트를 원래 값으로 교체
                data[sector_end:sector_end + 2] = fixup_value

        self.data = bytes(data)

    def parse_attributes(self):
        self.attributes = []
        offset = self.attr_offset
        max_offset = min(self.used_size, len(self.data)) or len(self.data)

        while offset + 4 <= len(self.data) and offset < max_offset:
            attr_type = struct.unpack('<I', self.data[offset:offset + 4])[0]

            if attr_type == AttrType.END:
                break

            if offset + 8 > len(self.data):
                break

            attr_length = struct.unpack('<I', self.data[offset + 4:offset + 8])[0]

            if attr_length == 0 or attr_length > len(self.data) - offset:
                break

            attr = self._parse_attribute(attr_type, self.data[offset:offset + attr_length])
            if attr:
                self.attributes.append(attr)

            offset += attr_length

    def _parse_attribute(self, attr_type: int, data: bytes) -> Optional[dict]:
        if len(data) < 24:
            return None

        attr = {
            'type': attr_type,
            'non_resident': bool(data[8]),
        }

        # 타임스탬프 속성은 항상 resident
        if attr['non_resident']:
            return attr

        content_size = struct.unpack('<I', data[16:20])[0]
        content_offset = struct.unpack('<H', data[20:22])[0]
        if content_offset + content_size <= len(data):
            attr['data'] = data[content_offset:content_offset + content_size]
        else:
            attr['data'] = b''

        if attr_type == AttrType.STANDARD_INFORMATION:
            self._parse_standard_info(attr)
        elif attr_type == AttrType.FILE_NAME:
            self._parse_filename(attr)

        return attr

    def _parse_standard_info(self, attr: dict):
        """$STANDARD_INFORMATION 파싱"""
        data = attr['data']
        if len(data) < 32:
            return

        attr['si_times'] = struct.unpack('<4Q', data[0:32])

    def _parse_filename(self, attr: dict):
        """$FILE_NAME 파싱"""
        data = attr['data']
        if len(data) < 66:
            return

        attr['parent_ref'] = struct.unpack('<Q', data[0:8])[0]
        attr['fn_times'] = struct.unpack('<4Q', data[8:40])
        attr['fn_namespace'] = data[65]

        name_length = data[64]
        try:
            attr['filename'] = data[66:66 + name_length * 2].decode('utf-16-le')
        except UnicodeDecodeError:
            attr['filename'] = ''

    def standard_information(self) -> Optional[dict]:
        for attr in self.attributes:
            if attr['type'] == AttrType.STANDARD_INFORMATION and 'si_times' in attr:
                return attr
        return None

    def best_file_name(self) -> Optional[dict]:
        # WIN32 또는 WIN32_AND_DOS 우선
        best = None
        for attr in self.attributes:
            if attr['type'] != AttrType.FILE_NAME or 'fn_times' not in attr:
                continue
            if attr['fn_namespace'] in (FileNamespace.WIN32, FileNamespace.WIN32_AND_DOS):
                return attr
            if best is None:
                best = attr
        return best

    def to_metadata(self, name_filter: Optional[Sequence[str]] = None) -> Optional[FileMetadata]:
        if not self.is_valid:
            return None

        si_attr = self.standard_information()
        fn_attr = self.best_file_name()

        name = ''
        parent_index = ROOT_DIRECTORY_INDEX
        fn_times = None
        if fn_attr:
            name = fn_attr.get('filename', '')
            parent_index, _ = parse_file_reference(fn_attr['parent_ref'])
            # 이름 필터가 있으면 일치하는 파일만 $FN 타임스탬프 유지
            if name_filter is None or name.lower() in name_filter:
                fn_times = fn_attr['fn_times']

        return FileMetadata(
            directory=self.is_directory,
            deleted=not self.in_use,
            timestamps=Timestamps.from_values(si_attr['si_times'] if si_attr else None, fn_times),
            name=name,
            parent_index=parent_index,
        )


class MFTReader:

    def __init__(self, mft_path: str, entry_size: int = MFT_ENTRY_SIZE,
                 record_filter: RecordFilter = RecordFilter.ALL,
                 indexes: Optional[Iterable[int]] = None,
                 names: Optional[Iterable[str]] = None):
        self.mft_path = Path(mft_path)
        self.entry_size = validate_entry_size(entry_size)
        self.record_filter = record_filter
        self.indexes = sorted(set(indexes)) if indexes is not None else None
        self.names = [name.lower() for name in names] if names is not None else None

    @property
    def has_index_filter(self) -> bool:
        return self.indexes is not None

    def get_total_entries(self) -> int:
        if self.has_index_filter:
            return len(self.indexes)
        file_size = self.mft_path.stat().st_size
        return file_size // self.entry_size

    def parse_entry(self, data: bytes, entry_number: int) -> Case:
        entry = MFTEntry(data, entry_number)
        if not entry.parse(parse_attributes=False):
            return Case(entry_number, signature_intact=False)

        # deleted 필터: 삭제된 레코드만 속성 해석
        if entry.in_use and self.record_filter is RecordFilter.DELETED:
            return Case(entry_number, True, entry.sequence, FileMetadata(
                directory=entry.is_directory, deleted=False))

        entry.parse_attributes()
        return Case(entry_number, True, entry.sequence, entry.to_metadata(self.names))

    def iter_cases(self) -> Generator[Case, None, None]:
        with open(self.mft_path, 'rb') as f:
            if self.has_index_filter:
                for entry_number in self.indexes:
                    f.seek(entry_number * self.entry_size)
                    data = f.read(self.entry_size)
                    if len(data) < self.entry_size:
                        yield Case(entry_number, signature_intact=False)
                        continue
                    yield self.parse_entry(data, entry_number)
                return

            entry_number = 0
            while True:
                data = f.read(self.entry_size)
                if len(data) < self.entry_size:
                    break

                yield self.parse_entry(data, entry_number)
                entry_number += 1

    def read(self) -> List[Case]:
        return list(self.iter_cases())


def resolve_paths(cases: Sequence[Case]) -> None:
    """Give every live record with both attributes its full path."""
    by_index: Dict[int, Case] = {case.index: case for case in cases}
    path_cache: Dict[int, str] = {}

    def get_path(entry_num: int) -> str:
        chain: List[int] = []
        visited = set()
        current = entry_num
        parent_path = ""

        # 부모 방향으로 올라가며 경로를 아는 레코드를 찾음
        while True:
            if current in path_cache:
                parent_path = path_cache[current]
                break

            case = by_index.get(current)
            if case is None or not case.is_readable():
                break

            if current in visited:  # 순환 참조
                break
            visited.add(current)

            metadata = case.metadata
            if metadata.parent_index == current:  # 루트 디렉토리
                parent_path = path_cache[current] = metadata.name
                break

            chain.append(current)
            current = metadata.parent_index

        # 부모에서 자식 방향으로 캐시 채움
        for index in reversed(chain):
            name = by_index[index].metadata.name
            parent_path = f"{parent_path}\\{name}" if parent_path else ""
            path_cache[index] = parent_path

        return path_cache.get(entry_num, "")

    for case in cases:
        if not case.has_si_and_fn() or case.metadata.deleted:
            continue
        path = get_path(case.index)
        if path:
            case.set_metadata(case.metadata.with_path(path))

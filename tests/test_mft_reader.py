import pytest

from conftest import BASE_TIME, build_record, created_record
from ntfs_timeline.case import Case
from ntfs_timeline.constants import MFT_ENTRY_SIZE
from ntfs_timeline.metadata import FileMetadata
from ntfs_timeline.mft_reader import MFTEntry, MFTReader, RecordFilter, resolve_paths, validate_entry_size
from ntfs_timeline.timestamps import Timestamp, Timestamps

SI_TIMES = [BASE_TIME + 1, BASE_TIME + 2, BASE_TIME + 3, BASE_TIME + 4]
FN_TIMES = [BASE_TIME + 5, BASE_TIME + 6, BASE_TIME + 7, BASE_TIME + 8]


def volume():
    return {
        5: created_record(name='.', parent=5, directory=True),
        6: created_record(name='Users', parent=5, directory=True),
        7: build_record(SI_TIMES, FN_TIMES, name='a.txt', parent=6),
        8: created_record(name='gone.txt', parent=6, in_use=False),
    }


def test_entry_size_must_be_a_multiple_of_1024():
    assert validate_entry_size(4096) == 4096
    for size in (0, 1000, 1536):
        with pytest.raises(ValueError):
            validate_entry_size(size)


def test_intact_record_is_decoded():
    entry = MFTEntry(build_record(SI_TIMES, FN_TIMES, name='a.txt', parent=6, sequence=3), 7)
    assert entry.parse()
    assert entry.in_use
    assert not entry.is_directory
    assert entry.sequence == 3

    md = entry.to_metadata()
    assert md.name == 'a.txt'
    assert md.parent_index == 6
    assert not md.deleted
    assert [t.value for t in md.timestamps.all()] == SI_TIMES + FN_TIMES


def test_update_sequence_is_undone():
    record = build_record(SI_TIMES, FN_TIMES)
    entry = MFTEntry(record, 0)
    entry.parse()
    assert entry.data[510:512] == b'\x00\x00'
    assert entry.data[1022:1024] == b'\x00\x00'


def test_win32_name_wins_over_dos_name():
    record = build_record(SI_TIMES, FN_TIMES, name='Long file name.txt', extra_names=[('LONGFI~1.TXT', 2)])
    entry = MFTEntry(record, 0)
    entry.parse()
    assert entry.to_metadata().name == 'Long file name.txt'


def test_bad_records_are_unreadable(write_mft):
    path = write_mft({0: created_record(signature=b'BAAD'), 1: created_record()})
    cases = MFTReader(path).read()

    assert len(cases) == 2
    assert not cases[0].signature_intact
    assert cases[0].metadata is None
    assert not cases[0].has_si_and_fn()
    assert cases[1].is_readable()


def test_truncated_tail_is_ignored(write_mft):
    path = write_mft({0: created_record()})
    with open(path, 'ab') as f:
        f.write(b'FILE' + b'\x00' * 100)
    assert [case.index for case in MFTReader(path).read()] == [0]


def test_malformed_attribute_length_does_not_raise():
    record = bytearray(created_record())
    # 첫 속성 길이를 0으로
    record[60:64] = b'\x00\x00\x00\x00'
    entry = MFTEntry(bytes(record), 0)
    assert entry.parse()
    assert entry.to_metadata().timestamps.si is None


def test_deleted_filter_decodes_only_deleted_records(write_mft):
    path = write_mft(volume())
    cases = MFTReader(path, record_filter=RecordFilter.DELETED).read()

    assert not cases[7].has_si_and_fn()
    assert cases[8].has_si_and_fn()
    assert cases[8].metadata.deleted


def test_name_filter_keeps_file_name_times_only_for_matches(write_mft):
    path = write_mft(volume())
    cases = MFTReader(path, names=['A.TXT']).read()

    assert cases[7].has_si_and_fn()
    assert not cases[6].has_si_and_fn()
    assert cases[6].metadata.name == 'Users'


def test_index_filter_reads_sorted_indexes(write_mft):
    path = write_mft(volume())
    reader = MFTReader(path, indexes=[7, 5, 7, 99])

    assert reader.has_index_filter
    assert reader.get_total_entries() == 3
    cases = reader.read()
    assert [case.index for case in cases] == [5, 7, 99]
    assert not cases[2].signature_intact


def test_paths_are_resolved_from_parents(write_mft):
    path = write_mft(volume())
    cases = MFTReader(path).read()
    resolve_paths(cases)

    assert cases[5].metadata.path == '.'
    assert cases[6].metadata.path == '.\\Users'
    assert cases[7].metadata.path == '.\\Users\\a.txt'
    assert cases[7].metadata.label() == '.\\Users\\a.txt'
    # 삭제된 레코드는 이름만
    assert cases[8].metadata.path == ''
    assert cases[8].metadata.label() == 'gone.txt'


def test_parent_cycle_leaves_path_unresolved(write_mft):
    path = write_mft({
        0: created_record(name='a', parent=1),
        1: created_record(name='b', parent=0),
        2: created_record(name='orphan', parent=40),
    })
    cases = MFTReader(path).read()
    resolve_paths(cases)

    assert [case.metadata.path for case in cases] == ['', '', '']
    assert cases[0].metadata.label() == 'a'


def test_total_entries_from_file_size(write_mft):
    path = write_mft(volume())
    assert MFTReader(path).get_total_entries() == 9
    assert MFTReader(path, entry_size=MFT_ENTRY_SIZE * 2).get_total_entries() == 4


def test_timestamps_are_kept_as_ticks(write_mft):
    path = write_mft(volume())
    md = MFTReader(path, indexes=[7]).read()[0].metadata
    assert md.timestamps.si[0] == Timestamp(BASE_TIME + 1)
    assert md.timestamps.latest() == Timestamp(BASE_TIME + 8)


def test_deep_parent_chain_is_resolved_without_recursion():
    depth = 1500
    times = Timestamps.from_values([BASE_TIME] * 4, [BASE_TIME] * 4)
    cases = [
        Case(i, True, 1, FileMetadata(timestamps=times, name=f"d{i}",
                                      parent_index=i if i == depth - 1 else i + 1))
        for i in range(depth)
    ]
    resolve_paths(cases)

    path = cases[0].metadata.path
    assert path.startswith(f"d{depth - 1}\\")
    assert path.endswith("\\d1\\d0")
    assert path.count("\\") == depth - 1
    assert cases[depth - 1].metadata.path == f"d{depth - 1}"

from ntfs_timeline.marking import Marking
from ntfs_timeline.metadata import FileMetadata
from ntfs_timeline.operation import VolumeTransfer
from ntfs_timeline.rules import DEFAULT_CATALOG
from ntfs_timeline.sequence import Sequence
from ntfs_timeline.timestamps import Timestamp, Timestamps

T1 = 132061996440000001
T2 = T1 + 50_000_000
T3 = T1 + 90_000_000


def metadata(si, fn, deleted=False):
    return FileMetadata(deleted=deleted, timestamps=Timestamps.from_values(si, fn), name='a.txt')


def ops(*names):
    return [DEFAULT_CATALOG.find(name) for name in names]


def test_point_match_for_create():
    md = metadata([T1] * 4, [T1] * 4)
    sequence = Sequence(md)
    sequence.add(md, ops("Create"))

    assert sequence.is_fully_matched()
    assert len(sequence.metadata) == 2
    match = sequence.matches[0]
    assert match.kind == 'at'
    assert match.lower == Timestamp(T1)
    assert str(match) == f"At {Timestamp(T1)}: Create"


def test_add_tags_volume_transfer():
    md = metadata([T1, T1, T2, T1], [T1] * 4)
    sequence = Sequence(md)
    sequence.add(md, ops("Copy"))

    assert sequence.metadata[1].on_other_volume is VolumeTransfer.MAYBE
    assert sequence.metadata[0].on_other_volume is VolumeTransfer.NEVER
    assert sequence.matches[0].kind == 'from'
    assert (sequence.matches[0].lower, sequence.matches[0].upper) == (Timestamp(T1), Timestamp(T2))


def test_copying_restores_the_source_values():
    md = metadata([T2, T2, T3, T2], [T1] * 4)
    sequence = Sequence(md)
    sequence.add_with_copying(md, ops("File name change"))

    before = sequence.earliest_metadata
    assert [t.value for t in before.timestamps.si] == [T1] * 4
    assert [t.value for t in before.timestamps.fn] == [T1] * 4
    # $SI 슬롯은 다시 설명 대상
    assert sequence.marking == Marking.of(4, 5, 6, 7)
    assert sequence.matches[0].lower == Timestamp(T3)
    # 원래 스냅샷 불변
    assert sequence.metadata[0].timestamps.si[0] == Timestamp(T2)


def test_split_partitions_the_slots():
    md = metadata([T1, T2, T3, T1], [T1] * 4)
    sequence = Sequence(md)
    split = sequence.add_split(md, ops("Overwriting copy"))

    assert sequence.marking == Marking.of(1, 2)
    assert split.marking == Marking.of(0, 2, 3, 4, 5, 6, 7)
    assert split.is_split()
    assert not sequence.is_split()
    assert split.metadata[0].split_origin
    assert split.metadata[-1].on_other_volume is VolumeTransfer.MAYBE
    assert str(split.matches[0]) == str(sequence.matches[0])
    assert len(split.metadata) == len(sequence.metadata) == 2


def test_deletion_happens_after_every_timestamp():
    md = metadata([T1, T2, T3, T1], [T1] * 4, deleted=True)
    sequence = Sequence(md)
    sequence.add_deletion_operation(md)

    match = sequence.matches[0]
    assert match.kind == 'after'
    assert match.lower == Timestamp(T3)
    assert [op.name for op in match.operations] == ["Delete"]
    assert not sequence.earliest_metadata.deleted
    assert sequence.metadata[0].deleted
    assert sequence.marking.is_unmarked()


def test_forgery_does_not_advance_marking():
    md = metadata([T3, T1, T2, T1], [T1] * 4)
    sequence = Sequence(md)
    sequence.add_forgery(md, ops("Use of a time-stamp change tool"))

    assert sequence.has_forgery
    assert sequence.has_irregular_timestamps()
    assert sequence.marking.is_unmarked()


def test_copy_is_independent():
    md = metadata([T1] * 4, [T1] * 4)
    sequence = Sequence(md)
    clone = sequence.copy()
    clone.add(md, ops("Create"))

    assert sequence.matches == []
    assert sequence.marking.is_unmarked()
    assert len(sequence.metadata) == 1
    assert sequence.has_irregular_timestamps()
    assert not clone.has_irregular_timestamps()


def test_create_on_equal_timestamps_is_a_point_in_time():
    value = 132061996440000000
    md = metadata([value] * 4, [value] * 4)
    sequence = Sequence(md)
    sequence.add(md, ops("Create"))

    assert len(sequence.matches) == 1
    assert not sequence.matches[0].has_upper_bound()
    assert sequence.matches[0].lower == Timestamp(value)


def test_copying_keeps_already_explained_slots():
    md = metadata([T2, T2, T3, T2], [T1] * 4)
    sequence = Sequence(md)
    sequence.marking.mark(4)
    sequence.add_with_copying(md, ops("File name change"))

    before = sequence.earliest_metadata
    # $FN.C는 이미 설명되어 복원하지 않음
    assert before.timestamps.si[0] == Timestamp(T2)
    assert [t.value for t in before.timestamps.si[1:]] == [T1] * 3
    assert sequence.marking == Marking.of(4, 5, 6, 7)


def test_split_covers_every_non_result_slot_once():
    md = metadata([T1, T2, T3, T1], [T1] * 4)
    operation = ops("Overwriting copy")[0]
    sequence = Sequence(md)
    split = sequence.add_split(md, [operation])

    results = set(operation.result_marking.indexes())
    own = set(sequence.marking.indexes()) - results
    other = set(split.marking.indexes()) - results
    assert not own & other
    assert own | other == set(range(8)) - results

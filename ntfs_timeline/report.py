import csv
import json
from pathlib import Path
from typing import Iterable, List

from .case import Case
from .operation import VolumeTransfer
from .sequence import Sequence
from .time_match import TimeMatch

OUTPUT_FORMATS = ('text', 'csv', 'json')

VOLUME_SUFFIX = {
    VolumeTransfer.MAYBE: " possibly on other volume",
    VolumeTransfer.ALWAYS: " on other volume",
}


def render_match(sequence: Sequence, position: int) -> str:
    match = f"({sequence.matches[position]})"
    # 같은 위치의 스냅샷: 이 작업 이후의 상태
    return match + VOLUME_SUFFIX.get(sequence.metadata[position].on_other_volume, "")


def render_timeline(sequence: Sequence) -> str:
    if not sequence.matches:
        if sequence.metadata[0].has_si_and_fn():
            return "irregular time-stamps"
        return "no time-stamps"

    timeline = " <- ".join(render_match(sequence, i) for i in range(len(sequence.matches)))
    if sequence.has_forgery:
        return f"irregular time-stamps: {timeline}"
    return timeline


def render_sequence(sequence: Sequence) -> str:
    return f"{sequence.metadata[0].label()} {render_timeline(sequence)}"


def render_case(case: Case) -> List[str]:
    lines = []
    for sequence in case.sequences:
        if sequence.is_split():
            lines.append(render_sequence(sequence))
        else:
            lines.append(f"{case.index} {render_sequence(sequence)}")
    return lines


def match_to_dict(match: TimeMatch, on_other_volume: VolumeTransfer) -> dict:
    return {
        'kind': match.kind,
        'lower': str(match.lower),
        'upper': str(match.upper) if match.has_upper_bound() else None,
        'lower_ticks': match.lower.value,
        'upper_ticks': match.upper.value if match.has_upper_bound() else None,
        'operations': [op.name for op in match.operations],
        'on_other_volume': on_other_volume.name.lower(),
    }


def case_to_dict(case: Case) -> dict:
    metadata = case.metadata
    return {
        'EntryNumber': case.index,
        'SequenceNumber': case.sequence_number,
        'FileName': metadata.name,
        'FullPath': metadata.path,
        'IsDirectory': metadata.directory,
        'IsDeleted': metadata.deleted,
        'Irregular': case.has_irregular_timestamps(),
        'Sequences': [
            {
                'Split': sequence.is_split(),
                'Irregular': sequence.has_irregular_timestamps(),
                'Forgery': sequence.has_forgery,
                'Matches': [
                    match_to_dict(match, sequence.metadata[i].on_other_volume)
                    for i, match in enumerate(sequence.matches)
                ],
            }
            for sequence in case.sequences
        ],
    }


class ReportWriter:

    def __init__(self, output_path: str, output_format: str = 'text'):
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported format: {output_format}")
        self.output_path = Path(output_path)
        self.output_format = output_format

    def write(self, cases: Iterable[Case]) -> str:
        if self.output_format == 'csv':
            self._write_csv(cases)
        elif self.output_format == 'json':
            self._write_json(cases)
        else:
            self._write_text(cases)
        return str(self.output_path)

    def _write_text(self, cases: Iterable[Case]):
        with open(self.output_path, 'w', encoding='utf-8') as f:
            for case in cases:
                for line in render_case(case):
                    f.write(line + '\n')

    def _write_csv(self, cases: Iterable[Case]):
        headers = ['EntryNumber', 'SequenceNumber', 'Split', 'Irregular', 'Name', 'Timeline']

        with open(self.output_path, 'w', newline='', encoding='utf-8-sig') as f:
            writer = csv.writer(f)
            writer.writerow(headers)

            for case in cases:
                for sequence in case.sequences:
                    writer.writerow([
                        case.index,
                        case.sequence_number,
                        sequence.is_split(),
                        sequence.has_irregular_timestamps(),
                        sequence.metadata[0].label(),
                        render_timeline(sequence),
                    ])

    def _write_json(self, cases: Iterable[Case]):
        with open(self.output_path, 'w', encoding='utf-8') as f:
            f.write('[\n')
            first = True

            for case in cases:
                if not first:
                    f.write(',\n')
                first = False

                f.write('  ' + json.dumps(case_to_dict(case), ensure_ascii=False))

            f.write('\n]')

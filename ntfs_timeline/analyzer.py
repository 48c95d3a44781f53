from typing import Callable, Iterable, List, Optional

from .case import Case
from .constants import MFT_ENTRY_SIZE
from .mft_reader import MFTReader, RecordFilter, resolve_paths
from .report import ReportWriter
from .rules import DEFAULT_CATALOG, RuleCatalog
from .search import Priority, TimelineSearch


class TimelineAnalyzer:

    def __init__(self, mft_path: str, entry_size: int = MFT_ENTRY_SIZE,
                 record_filter: RecordFilter = RecordFilter.ALL,
                 priority: Priority = Priority.REGULAR,
                 indexes: Optional[Iterable[int]] = None,
                 names: Optional[Iterable[str]] = None,
                 catalog: RuleCatalog = DEFAULT_CATALOG,
                 verbose: bool = False):
        self.record_filter = record_filter
        self.verbose = verbose
        self.reader = MFTReader(mft_path, entry_size, record_filter, indexes, names)
        self.search = TimelineSearch(catalog, priority)
        self.cases: List[Case] = []

    def _debug(self, msg: str):
        if self.verbose:
            print(f"[DEBUG] {msg}")

    def read(self) -> List[Case]:
        self.cases = self.reader.read()
        # 인덱스 필터 사용 시 부모 레코드가 없으므로 경로 복원 생략
        if not self.reader.has_index_filter:
            resolve_paths(self.cases)
        return self.cases

    def analyze(self, callback: Optional[Callable[[int, int], None]] = None) -> List[Case]:
        if not self.cases:
            self.read()

        total = len(self.cases)
        for count, case in enumerate(self.cases, 1):
            if not case.signature_intact:
                self._debug(f"Entry {case.index}: signature not intact, skipped")
            elif case.has_si_and_fn():
                self.search.analyse(case)
                if len(case.sequences) > 1:
                    self._debug(f"Entry {case.index}: {len(case.sequences)} sequences")
                if case.has_irregular_timestamps():
                    self._debug(f"Entry {case.index}: irregular time-stamps")
            if callback:
                callback(count, total)

        return self.cases

    def reportable_cases(self) -> List[Case]:
        reportable = [case for case in self.cases if case.has_si_and_fn()]
        if self.record_filter is RecordFilter.IRREGULAR:
            reportable = [case for case in reportable if case.has_irregular_timestamps()]
        return reportable

    def write(self, output_path: str, output_format: str = 'text') -> str:
        return ReportWriter(output_path, output_format).write(self.reportable_cases())

import argparse
import sys
from pathlib import Path
from datetime import datetime

from tqdm import tqdm

from ntfs_timeline.analyzer import TimelineAnalyzer
from ntfs_timeline.constants import MFT_ENTRY_SIZE, PROGRESS_THRESHOLD
from ntfs_timeline.mft_reader import RecordFilter
from ntfs_timeline.report import OUTPUT_FORMATS
from ntfs_timeline.rules import DEFAULT_CATALOG
from ntfs_timeline.search import Priority


VERSION = "1.0.0"


class Colors:
    # 기본 색상
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    WHITE = '\033[97m'
    # 스타일
    BOLD = '\033[1m'
    # 리셋
    RESET = '\033[0m'

    @classmethod
    def disable(cls):
        cls.RED = cls.GREEN = cls.YELLOW = ''
        cls.CYAN = cls.WHITE = ''
        cls.BOLD = cls.RESET = ''


# Windows 터미널 색상 지원 활성화
def init_colors():
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
        except (AttributeError, OSError):
            Colors.disable()


init_colors()


def log_info(msg):
    print(f"{Colors.CYAN}[*]{Colors.RESET} {msg}")


def log_success(msg):
    print(f"{Colors.GREEN}[+]{Colors.RESET} {msg}")


def log_error(msg):
    print(f"{Colors.RED}[ERROR]{Colors.RESET} {msg}")


def log_warning(msg):
    print(f"{Colors.YELLOW}[-]{Colors.RESET} {msg}")


def print_banner():
    C = Colors
    print(f"""
{C.CYAN}+============================================================+
|{C.RESET}{C.BOLD}{C.GREEN}          NTFS Timeline Analyser v{VERSION}                     {C.RESET}{C.CYAN}|
|{C.RESET}{C.YELLOW}     $MFT time-stamp operation history reconstruction     {C.RESET}{C.CYAN}|
|                                                            |
|{C.RESET}{C.WHITE}     Times are shown in UTC                                 {C.RESET}{C.CYAN}|
+============================================================+{C.RESET}
""")


def parse_entries(value):
    """Split an ``a|b|c`` entry list into record indexes or file names."""
    if not value:
        return None, None
    entries = [entry for entry in value.split('|') if entry]
    if entries and all(entry.isdigit() for entry in entries):
        return [int(entry) for entry in entries], None
    return None, entries


def analyze_command(args):
    input_path = args.input
    output_path = args.output
    output_format = args.format

    if not Path(input_path).exists():
        log_error(f"Input file not found: {input_path}")
        return 1

    indexes, names = parse_entries(args.entries)

    log_info(f"Analysing MFT: {input_path}")
    log_info(f"Output: {output_path} ({output_format})")
    log_info(f"Filter: {args.filter}, priority: {args.priority}")
    if indexes:
        log_info(f"Entries: {', '.join(str(i) for i in indexes)}")
    elif names:
        log_info(f"File names: {', '.join(names)}")

    start_time = datetime.now()

    try:
        analyzer = TimelineAnalyzer(
            input_path,
            entry_size=args.entry_size,
            record_filter=RecordFilter(args.filter),
            priority=Priority(args.priority),
            indexes=indexes,
            names=names,
            verbose=args.verbose
        )

        log_info(f"Total entries: {analyzer.reader.get_total_entries():,}")
        cases = analyzer.read()

        if len(cases) > PROGRESS_THRESHOLD:
            with tqdm(total=len(cases), desc="Analysing", unit="entry") as pbar:
                analyzer.analyze(callback=lambda count, total: pbar.update(1))
        else:
            analyzer.analyze()

        reportable = analyzer.reportable_cases()
        irregular = sum(1 for case in reportable if case.has_irregular_timestamps())
        result_path = analyzer.write(output_path, output_format)

        elapsed = (datetime.now() - start_time).total_seconds()
        log_success(f"Reported entries: {len(reportable):,}")
        if irregular:
            log_warning(f"Entries with irregular time-stamps: {irregular:,}")
        log_success(f"Completed in {elapsed:.2f} seconds")
        log_success(f"Output saved to: {result_path}")
        return 0

    except (ValueError, OSError) as e:
        log_error(f"Analysis failed: {e}")
        return 1


def rules_command(args):
    catalog = DEFAULT_CATALOG
    C = Colors

    print(f"{C.BOLD}{C.YELLOW}Regular operations ({len(catalog.regular)}):{C.RESET}")
    for operation in catalog.regular:
        print(f"  {C.GREEN}{operation.name}{C.RESET}")

    print(f"{C.BOLD}{C.YELLOW}Forgery operations ({len(catalog.forgery)}):{C.RESET}")
    for operation in catalog.forgery:
        print(f"  {C.RED}{operation.name}{C.RESET}")
    return 0


def main(argv=None):
    print_banner()

    C = Colors
    usage_examples = f"""
{C.BOLD}{C.YELLOW}Usage:{C.RESET}
  python timeline_analyser.py <command> [options]

{C.BOLD}{C.YELLOW}Commands:{C.RESET}
  {C.GREEN}analyze{C.RESET}          $MFT 타임스탬프로 작업 이력 복원
  {C.GREEN}rules{C.RESET}            작업 규칙 목록 출력

{C.BOLD}{C.YELLOW}Examples:{C.RESET}
  python timeline_analyser.py analyze -i <mft_file> -o <output> [-f <format>]
  python timeline_analyser.py analyze -i <mft_file> -o <output> --filter irregular
  python timeline_analyser.py analyze -i <mft_file> -o <output> --entries "41|42"
  python timeline_analyser.py rules

{C.BOLD}{C.YELLOW}Common Options:{C.RESET}
  {C.CYAN}-i, --input{C.RESET}       입력 $MFT 파일 경로
  {C.CYAN}-o, --output{C.RESET}      출력 파일 경로
  {C.CYAN}-f, --format{C.RESET}      출력 형식: text, csv, json (기본: text)
  {C.CYAN}-s, --entry-size{C.RESET}  MFT 엔트리 크기 (기본: {MFT_ENTRY_SIZE})
  {C.CYAN}--filter{C.RESET}          all, deleted, irregular (기본: all)
  {C.CYAN}--priority{C.RESET}        regular, equal (기본: regular)
  {C.CYAN}--entries{C.RESET}         분석할 엔트리 번호 또는 파일 이름 ("|" 구분)
  {C.CYAN}-v, --verbose{C.RESET}     상세 디버그 출력
"""

    parser = argparse.ArgumentParser(
        description="NTFS Timeline Analyser - Reconstruct file operations from $MFT time-stamps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=usage_examples
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # analyze 명령
    analyze_parser = subparsers.add_parser('analyze', help='Analyse an extracted $MFT file')
    analyze_parser.add_argument('-i', '--input', required=True, help='Path to $MFT file')
    analyze_parser.add_argument('-o', '--output', required=True, help='Output file path')
    analyze_parser.add_argument('-f', '--format', choices=list(OUTPUT_FORMATS), default='text',
                                help='Output format (default: text)')
    analyze_parser.add_argument('-s', '--entry-size', type=int, default=MFT_ENTRY_SIZE,
                                help=f'MFT entry size in bytes (default: {MFT_ENTRY_SIZE})')
    analyze_parser.add_argument('--filter', choices=[f.value for f in RecordFilter], default='all',
                                help='Entries to report (default: all)')
    analyze_parser.add_argument('--priority', choices=[p.value for p in Priority], default='regular',
                                help='Whether forgery operations compete with regular ones (default: regular)')
    analyze_parser.add_argument('--entries',
                                help='"|"-separated entry numbers or file names to analyse')
    analyze_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose debug output')

    # rules 명령
    subparsers.add_parser('rules', help='List the known operations')

    args = parser.parse_args(argv)

    if args.command == 'analyze':
        return analyze_command(args)
    elif args.command == 'rules':
        return rules_command(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())

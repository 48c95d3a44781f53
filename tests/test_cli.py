import json

from conftest import created_record
import timeline_analyser


def test_analyze_writes_report(write_mft, tmp_path, capsys):
    mft = write_mft({0: created_record(name='a.txt', parent=0)})
    output = tmp_path / 'out.json'

    code = timeline_analyser.main(['analyze', '-i', str(mft), '-o', str(output), '-f', 'json'])

    assert code == 0
    assert json.loads(output.read_text(encoding='utf-8'))[0]['FileName'] == 'a.txt'
    assert "Output saved to" in capsys.readouterr().out


def test_analyze_by_file_name(write_mft, tmp_path):
    mft = write_mft({0: created_record(name='a.txt', parent=0), 1: created_record(name='b.txt', parent=0)})
    output = tmp_path / 'out.txt'

    assert timeline_analyser.main(['analyze', '-i', str(mft), '-o', str(output), '--entries', 'B.TXT']) == 0
    lines = output.read_text(encoding='utf-8').splitlines()
    assert len(lines) == 1
    assert lines[0].startswith('1 ')


def test_missing_input(tmp_path, capsys):
    code = timeline_analyser.main(['analyze', '-i', str(tmp_path / 'nope'), '-o', str(tmp_path / 'out.txt')])
    assert code == 1
    assert "Input file not found" in capsys.readouterr().out


def test_bad_entry_size(write_mft, tmp_path, capsys):
    mft = write_mft({0: created_record()})
    code = timeline_analyser.main(['analyze', '-i', str(mft), '-o', str(tmp_path / 'out.txt'), '-s', '1000'])
    assert code == 1
    assert "[ERROR]" in capsys.readouterr().out


def test_parse_entries():
    assert timeline_analyser.parse_entries(None) == (None, None)
    assert timeline_analyser.parse_entries('41|7') == ([41, 7], None)
    assert timeline_analyser.parse_entries('a.txt|7') == (None, ['a.txt', '7'])


def test_rules_lists_catalog(capsys):
    assert timeline_analyser.main(['rules']) == 0
    out = capsys.readouterr().out
    assert "Regular operations (32)" in out
    assert "Use of a time-stamp change tool which rounds on seconds" in out


def test_no_command_prints_help(capsys):
    assert timeline_analyser.main([]) == 0
    assert "analyze" in capsys.readouterr().out


def test_analyze_reports_total_entries(write_mft, tmp_path, capsys):
    mft = write_mft({2: created_record(name='a.txt', parent=2)})
    assert timeline_analyser.main(['analyze', '-i', str(mft), '-o', str(tmp_path / 'out.txt')]) == 0
    assert "Total entries: 3" in capsys.readouterr().out

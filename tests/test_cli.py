import io
import json
from pathlib import Path

import pytest

from testpick.cli import EXIT_BAD_INPUT, EXIT_CANCELLED, EXIT_SCAN_ERROR, main
from testpick.receipts import validate_receipt


def _read_json(p: Path):
    return json.loads(p.read_text(encoding="utf-8"))


def test_lists_names(sample_path, capsys):
    rc = main([str(sample_path)])
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "math"
    assert lines[-1] == "strings/keeps source order"
    assert len(lines) == 11


def test_tests_only_with_lines(sample_path, capsys):
    rc = main([str(sample_path), "--tests-only", "--lines"])
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "9\tmath/sum/adds two numbers"
    assert all("\t" in l for l in lines)
    assert "3\tmath" not in lines


def test_suites_only_with_separator(sample_path, capsys):
    rc = main([str(sample_path), "--suites-only", "--separator", " > "])
    assert rc == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["math", "math > sum", "math > divide", "math > divide > by zero", "strings"]


def test_separator_from_environment(sample_path, capsys, monkeypatch):
    monkeypatch.setenv("TESTPICK_SEPARATOR", ".")
    assert main([str(sample_path), "--suites-only"]) == 0
    assert "math.divide.by zero" in capsys.readouterr().out.splitlines()


def test_pick_prints_only_the_choice(sample_path, capsys):
    rc = main([str(sample_path), "--pick", "3"])
    assert rc == 0
    assert capsys.readouterr().out == "math/sum/adds two numbers\n"


def test_pick_unknown_name_fails(sample_path, capsys):
    rc = main([str(sample_path), "--pick", "math/nothing"])
    assert rc == EXIT_SCAN_ERROR
    assert "no test named" in capsys.readouterr().err


def test_choose_uses_terminal_menu(sample_path, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("strings\n"))
    rc = main([str(sample_path), "--choose"])
    assert rc == 0
    captured = capsys.readouterr()
    assert captured.out == "strings\n"
    assert " 1) math" in captured.err


def test_choose_cancelled(sample_path, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([str(sample_path), "--choose"]) == EXIT_CANCELLED


def test_json_receipt_and_receipt_out(sample_path, tmp_path, capsys):
    out = tmp_path / "receipt.json"
    rc = main([str(sample_path), "--json", "--pick", "math/divide", "--receipt-out", str(out)])
    assert rc == 0
    printed = json.loads(capsys.readouterr().out)
    written = _read_json(out)
    assert printed == written
    validate_receipt(written)
    assert written["engine"] == "testpick"
    assert written["source"]["path"].endswith("sample.test.js")
    assert written["selected"] == {"index": 4, "label": "math/divide"}
    assert len(written["entries"]) == 11


def test_scan_error_writes_error_receipt(tmp_path, capsys):
    src = tmp_path / "bad.test.js"
    src.write_text('describe("A", () => {\n  it("b, () => {});\n});\n', encoding="utf-8")
    out = tmp_path / "err.json"
    rc = main([str(src), "--receipt-out", str(out)])
    assert rc == EXIT_SCAN_ERROR
    assert "title opened with" in capsys.readouterr().err
    j = _read_json(out)
    assert j["status"] == "error"
    assert j["error"]["kind"] == "UnterminatedTitle"
    assert j["error"]["line"] == 2
    assert [e["label"] for e in j["partial"]] == ["A"]
    assert j["names"] == []


def test_scan_error_json_on_stdout(tmp_path, capsys):
    src = tmp_path / "bad.test.js"
    src.write_text("describe(name, () => {})", encoding="utf-8")
    rc = main([str(src), "--json"])
    assert rc == EXIT_SCAN_ERROR
    captured = capsys.readouterr()
    j = json.loads(captured.out)
    assert j["error"]["kind"] == "UnrecognizedStructure"
    assert captured.err == ""


def test_reads_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO('test("solo", () => {});\n'))
    assert main(["-"]) == 0
    assert capsys.readouterr().out == "solo\n"


def test_choose_with_stdin_source_is_rejected(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO('test("solo", () => {});\n'))
    with pytest.raises(SystemExit) as ex:
        main(["-", "--choose"])
    assert ex.value.code == 2
    assert "--choose reads the answer from stdin" in capsys.readouterr().err


def test_pick_with_stdin_source_still_works(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO('test("solo", () => {});\n'))
    assert main(["-", "--pick", "1"]) == 0
    assert capsys.readouterr().out == "solo\n"


def test_missing_file(tmp_path, capsys):
    rc = main([str(tmp_path / "nope.js")])
    assert rc == EXIT_BAD_INPUT
    assert "cannot read" in capsys.readouterr().err


def test_empty_file_lists_nothing(tmp_path, capsys):
    src = tmp_path / "empty.test.js"
    src.write_text("", encoding="utf-8")
    assert main([str(src)]) == 0
    assert capsys.readouterr().out == ""

"""Unit tests for the regex-record command-line interface."""
import io
import json

import pytest

from regex_record.cli import build_parser, main, run

PATTERN = r"^(?<LastName>\w+), (?<FirstName>\w+)(?: \((?<Age>\d+)\))?$"


class TestRun:
    """Tests for run() with in-memory streams."""

    def test_writes_one_json_object_per_line(self):
        out = io.StringIO()

        status = run(PATTERN, io.StringIO("Connor, John (19)\nReese, Kyle\n"), out)

        assert status == 0
        lines = out.getvalue().splitlines()
        assert [json.loads(line) for line in lines] == [
            {"LastName": "Connor", "FirstName": "John", "Age": "19"},
            {"LastName": "Reese", "FirstName": "Kyle"},
        ]

    def test_unmatched_lines_print_empty_object(self):
        out = io.StringIO()

        run(PATTERN, io.StringIO("nobody\n"), out)

        assert out.getvalue() == "{}\n"

    def test_skip_unmatched(self):
        out = io.StringIO()

        run(PATTERN, io.StringIO("nobody\nConnor, John\n"), out, skip_unmatched=True)

        assert [json.loads(line) for line in out.getvalue().splitlines()] == [
            {"LastName": "Connor", "FirstName": "John"},
        ]

    def test_strict_fails_on_unmatched_line(self, capsys):
        out = io.StringIO()

        status = run(PATTERN, io.StringIO("Connor, John\nnobody\n"), out, strict=True)

        assert status == 1
        assert out.getvalue().count("\n") == 1
        assert "line 2" in capsys.readouterr().err

    def test_invalid_pattern(self, capsys):
        status = run(r"(?<Name>\w+", io.StringIO("x\n"), io.StringIO())

        assert status == 2
        assert "Invalid pattern" in capsys.readouterr().err

    def test_invalid_utf8_input(self, capsys):
        stream = io.TextIOWrapper(io.BytesIO(b"Connor, John (19)\n\xff\xfe bad\n"), encoding="utf-8")

        status = run(PATTERN, stream, io.StringIO())

        assert status == 2
        assert "not valid UTF-8" in capsys.readouterr().err


class TestMain:
    """Tests for the console entry point."""

    def test_reads_file(self, tmp_path, capsys, reset_structlog):
        source = tmp_path / "people.txt"
        source.write_text("Connor, Sarah (19)\n", encoding="utf-8")

        status = main([PATTERN, str(source)])

        assert status == 0
        assert json.loads(capsys.readouterr().out) == {
            "LastName": "Connor",
            "FirstName": "Sarah",
            "Age": "19",
        }

    def test_missing_file(self, tmp_path, capsys, reset_structlog):
        status = main([PATTERN, str(tmp_path / "missing.txt")])

        assert status == 2
        assert "cannot read" in capsys.readouterr().err

    def test_invalid_utf8_file(self, tmp_path, capsys, reset_structlog):
        source = tmp_path / "people.txt"
        source.write_bytes(b"Connor, John (19)\n\xff\xfe bad\n")

        status = main([PATTERN, str(source)])

        assert status == 2
        assert "Traceback" not in capsys.readouterr().err

    def test_strict_and_skip_unmatched_are_exclusive(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--strict", "--skip-unmatched", PATTERN])

"""
Tests for the lmcasm CLI and the listing / record views it prints.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import csv
import io
import json
import logging

import pytest
from lmc_assembler import Instruction, format_code, format_listing, to_records
import lmcasm


COUNTDOWN = """// count down from the input to zero
        INP
        OUT
        STA 9
        SUB 8
        STA 9
        BRP 1
        HLT
        DAT 1
"""


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "countdown.lmc"
    path.write_text(COUNTDOWN, encoding="utf-8")
    return path


class TestListing:
    def test_format_code_pads_to_three_digits(self):
        assert format_code(0) == "000"
        assert format_code(5) == "005"
        assert format_code(901) == "901"
        assert format_code(1000) == "1000"

    def test_listing_rows(self):
        text = format_listing([Instruction('INP', 901), Instruction('STA', 3, 9)])
        rows = text.split('\n')
        assert rows[0].split() == ["IDX", "NAME", "CODE", "OPERAND"]
        assert rows[2].split() == ["0", "INP", "901"]
        assert rows[3].split() == ["1", "STA", "003", "9"]

    def test_listing_empty(self):
        assert len(format_listing([]).split('\n')) == 2

    def test_to_records(self):
        assert to_records([Instruction('HLT', 0), Instruction('DAT', 1000, 1)]) == [
            {'name': 'HLT', 'code': 0, 'operand': None},
            {'name': 'DAT', 'code': 1000, 'operand': 1},
        ]


class TestCLI:
    def test_listing_to_stdout(self, source_file, capsys):
        lmcasm.main([str(source_file)])
        out = capsys.readouterr().out
        assert "INP" in out
        assert "DAT" in out
        assert "count down" not in out

    def test_json_output(self, source_file, capsys):
        lmcasm.main([str(source_file), "--format", "json"])
        records = json.loads(capsys.readouterr().out)
        assert len(records) == 8
        assert records[0] == {'name': 'INP', 'code': 901, 'operand': None}
        assert records[-1] == {'name': 'DAT', 'code': 1000, 'operand': 1}

    def test_csv_output(self, source_file, capsys):
        lmcasm.main([str(source_file), "--format", "csv"])
        rows = list(csv.DictReader(io.StringIO(capsys.readouterr().out)))
        assert len(rows) == 8
        assert rows[2] == {'name': 'STA', 'code': '3', 'operand': '9'}
        assert rows[0]['operand'] == ''

    def test_format_from_output_extension(self, source_file, tmp_path):
        out_path = tmp_path / "countdown.json"
        lmcasm.main([str(source_file), "-o", str(out_path)])
        records = json.loads(out_path.read_text(encoding="utf-8"))
        assert [r['name'] for r in records] == [
            'INP', 'OUT', 'STA', 'SUB', 'STA', 'BRP', 'HLT', 'DAT',
        ]

    def test_stdin_input(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("INP\nOUT\nHLT\n"))
        lmcasm.main(["-", "--format", "json"])
        records = json.loads(capsys.readouterr().out)
        assert [r['code'] for r in records] == [901, 902, 0]

    def test_decode_error_exit_code(self, tmp_path, capsys):
        path = tmp_path / "bad.lmc"
        path.write_text("INP\nFOO 1\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            lmcasm.main([str(path)])
        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "Decode error" in err
        assert "Line 2" in err

    def test_invalid_operand_exit_code(self, tmp_path, capsys):
        path = tmp_path / "bad.lmc"
        path.write_text("ADD 70000\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            lmcasm.main([str(path)])
        assert exc.value.code == 1
        assert "invalid operand" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            lmcasm.main([str(tmp_path / "nope.lmc")])
        assert exc.value.code == 1
        assert "File not found" in capsys.readouterr().err

    def test_log_file_captures_debug(self, source_file, tmp_path, capsys):
        log_path = tmp_path / "logs" / "lmcasm.log"
        lmcasm.main([str(source_file), "-q", "--log-file", str(log_path)])
        logging.getLogger(lmcasm.LOGGER_NAME).handlers[-1].flush()
        text = log_path.read_text(encoding="utf-8")
        assert "Decoded 8 instructions" in text

    def test_file_read_through_read_source(self, tmp_path, capsys):
        path = tmp_path / "crlf.lmc"
        path.write_bytes(b"INP\r\nOUT\r\nHLT\r\n")
        log_path = tmp_path / "read.log"
        lmcasm.main([str(path), "--format", "json", "-q", "--log-file", str(log_path)])
        records = json.loads(capsys.readouterr().out)
        assert [r['name'] for r in records] == ['INP', 'OUT', 'HLT']
        logging.getLogger(lmcasm.LOGGER_NAME).handlers[-1].flush()
        assert "Read 15 characters" in log_path.read_text(encoding="utf-8")

    def test_setup_logging_replaces_handlers(self):
        logger = lmcasm.setup_logging()
        lmcasm.setup_logging()
        assert len(logger.handlers) == 1

    def test_setup_logging_keeps_propagation(self, source_file, caplog):
        with caplog.at_level(logging.DEBUG):
            lmcasm.main([str(source_file), "-q"])
        assert logging.getLogger(lmcasm.LOGGER_NAME).propagate
        assert any("Decoded 8 instructions" in r.getMessage() for r in caplog.records)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

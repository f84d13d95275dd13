import errno
import io
import sys

import pytest

from tihex.cli import help_text, main, parse_args, version_text
from tihex.hexfile import HexFile

DATA_LINE = ":10010000214601360121470136007EFE09D2190140"
EOF_LINE = ":00000001FF"


@pytest.fixture
def hex_path(tmp_path):
    path = tmp_path / "image.hex"
    path.write_text(f"{DATA_LINE}\n{EOF_LINE}\n")
    return path


def test_parse_address_and_data():
    options = parse_args(["-a", "100", "-d", "1,2,ff"])
    assert options.address_set
    assert options.data == [(0x100, bytes([1, 2, 0xFF]))]


def test_parse_data_addresses_continue():
    options = parse_args(["-d", "1", "-a", "10", "-d", "2,3", "-d", "4"])
    assert options.data == [(0, b"\x01"), (0x10, b"\x02\x03"), (0x12, b"\x04")]


def test_parse_flags_and_filename():
    options = parse_args(["-i", "--stdout", "file.hex"])
    assert options.stdin and options.stdout
    assert options.filename == "file.hex"


def test_help_stops_parsing():
    options = parse_args(["-h", "-a"])
    assert options.show_help
    assert not options.address_set


@pytest.mark.parametrize(
    "argv", [["-a"], ["-a", "zz"], ["-d"], ["-d", "1,100"], ["-d", "1,,2"], ["-d", "-1"]]
)
def test_parse_errors(argv):
    with pytest.raises(ValueError):
        parse_args(argv)


def test_main_overwrites_file_data(hex_path, capsys):
    assert main(["-a", "101", "-d", "aa,bb", "-o", str(hex_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[1] == EOF_LINE
    result = HexFile()
    for line in lines:
        assert sum(bytes.fromhex(line[1:])) % 256 == 0
        result.append(line)
    assert result.get_value(0x101) == 0xAA
    assert result.get_value(0x102) == 0xBB
    assert result.get_value(0x100) == 0x21


def test_main_round_trip_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(f"{DATA_LINE}\n\n{EOF_LINE}\n"))
    assert main(["-i", "-o"]) == 0
    assert capsys.readouterr().out == f"{DATA_LINE}\n{EOF_LINE}\n"


def test_main_reports_parse_error(tmp_path, capsys):
    path = tmp_path / "bad.hex"
    path.write_text(f"{DATA_LINE}\nnot hex\n")
    assert main([str(path)]) == -1
    assert "Error 'Malformed' while parsing line 2: 'not hex'" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.hex")]) == errno.ENOENT
    assert "while opening file" in capsys.readouterr().err


def test_main_overwrite_outside_data(hex_path, capsys):
    assert main(["-a", "0", "-d", "1", str(hex_path)]) == -1
    assert "Data address 0 could not be overwritten." in capsys.readouterr().err


def test_main_without_address_leaves_data(hex_path, capsys):
    assert main(["-d", "1", "-o", str(hex_path)]) == 0
    assert capsys.readouterr().out == f"{DATA_LINE}\n{EOF_LINE}\n"


def test_main_help_and_version(capsys):
    assert main(["-h"]) == 0
    assert capsys.readouterr().out == help_text() + "\n"
    assert main(["--version"]) == 0
    assert capsys.readouterr().out == version_text() + "\n"


def test_main_missing_address_value_prints_help(capsys):
    assert main(["-a"]) == -1
    out = capsys.readouterr().out
    assert out.startswith("Address switch must have a hexadecimal value")
    assert help_text() in out
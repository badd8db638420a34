"""
Unit tests for the command line entry point.
"""

import io
import logging
import sys
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from polydump.__main__ import run_module
from polydump.line_driver.line_driver import main


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop the handlers main() installs on the package logger"""
    yield
    logger = logging.getLogger("polydump")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def hello_file(tmp_path):
    path = tmp_path / "hello.bin"
    path.write_bytes(b"Hello, world!")
    return path


class TestMain:
    """Tests for main() exit codes and output"""

    def test_dump_file(self, hello_file, capsys):
        assert main(["-f", str(hello_file), "-C", "--hex"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "position  " + "hex".ljust(23) + "  ",
            "-" * 35,
            "       0  48,65,6c,6c,6f,2c,20,77",
            "       8  " + "6f,72,6c,64,21".ljust(23),
        ]

    def test_colors_by_default(self, hello_file, capsys):
        assert main(["-f", str(hello_file), "--hex"]) == 0
        out = capsys.readouterr().out
        assert "\x1b[1;31m48" in out
        assert out.splitlines()[2].endswith("\x1b[0m")

    def test_stdin(self, capsys):
        stdin = SimpleNamespace(buffer=io.BytesIO(b"AB"))
        with patch.object(sys, "stdin", stdin):
            assert main(["-C", "--ascii", "-P"]) == 0
        assert capsys.readouterr().out.splitlines()[2] == "AB      "

    def test_invalid_width(self, capsys):
        assert main(["-w", "0"]) == 1
        assert "width must be >0" in capsys.readouterr().err

    def test_missing_input_file(self, tmp_path, capsys):
        assert main(["-f", str(tmp_path / "missing.bin")]) == 1
        assert "Error opening" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["-c", str(tmp_path / "missing.json")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_read_error(self, hello_file, capsys):
        with patch("polydump.line_driver.line_driver.dump_stream", side_effect=OSError("boom")):
            assert main(["-f", str(hello_file)]) == 1
        assert "error reading input: boom" in capsys.readouterr().err

    def test_interrupted(self, hello_file):
        with patch("polydump.line_driver.line_driver.dump_stream", side_effect=KeyboardInterrupt):
            assert main(["-f", str(hello_file)]) == 130

    def test_config_file_with_override(self, tmp_path, hello_file, capsys):
        config_path = tmp_path / "polydump.yaml"
        config_path.write_text("encodings: [u8]\ncolors: false\nwidth: 16\n", encoding="utf-8")
        assert main(["-c", str(config_path), "-f", str(hello_file), "-w", "4"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[2] == "       0   72,101,108,108"
        assert len(lines) == 6

    def test_verbose_logs_to_stderr(self, hello_file, capsys):
        assert main(["-v", "-C", "-f", str(hello_file)]) == 0
        captured = capsys.readouterr()
        assert "DEBUG: Enabled encodings: u8, hex, utf8" in captured.err
        assert "DEBUG" not in captured.out

    def test_list_encodings(self, capsys):
        assert main(["--list-encodings"]) == 0
        out = capsys.readouterr().out
        assert "utf8h" in out
        assert "var" in out

    def test_create_config(self, tmp_path, capsys):
        path = tmp_path / "polydump.json"
        assert main(["--create-config", str(path)]) == 0
        assert path.exists()
        assert str(path) in capsys.readouterr().out

    def test_create_config_in_unwritable_place(self, hello_file, capsys):
        """Test a sample config path below a regular file is an error, not a crash"""
        assert main(["--create-config", str(hello_file / "polydump.json")]) == 1
        assert "Error writing sample configuration" in capsys.readouterr().err

    def test_config_file_with_numeric_encoding(self, tmp_path, hello_file, capsys):
        config_path = tmp_path / "polydump.yaml"
        config_path.write_text("encodings: [1]\n", encoding="utf-8")
        assert main(["-c", str(config_path), "-f", str(hello_file)]) == 1
        assert "Unknown encodings: 1" in capsys.readouterr().err

    def test_config_file_with_quoted_switch(self, tmp_path, hello_file, capsys):
        config_path = tmp_path / "polydump.yaml"
        config_path.write_text('colors: "false"\n', encoding="utf-8")
        assert main(["-c", str(config_path), "-f", str(hello_file)]) == 1
        captured = capsys.readouterr()
        assert "colors must be true or false" in captured.err
        assert captured.out == ""

    def test_run_module(self, capsys):
        with patch.object(sys, "argv", ["polydump", "--list-encodings"]):
            assert run_module() == 0
        assert capsys.readouterr().out.startswith("i8")

from __future__ import annotations

import io
import logging
import sys

import pytest

import bfi


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("bfi")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def stdin(monkeypatch):
    def feed(data: bytes = b""):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))
    feed()
    return feed


@pytest.fixture
def source(tmp_path):
    def write(code: str):
        path = tmp_path / "program.b"
        path.write_text(code)
        return str(path)
    return write


def test_runs_program(source, stdin, capsysbinary):
    stdin(b"A")
    assert bfi.main([source(",.")]) == 0
    assert capsysbinary.readouterr().out == b"A"


def test_unbalanced_source(source, stdin, capsysbinary):
    assert bfi.main([source("+.[[]")]) == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    assert captured.err == b"bfi: error: parens don't match\n"


def test_unreadable_file(tmp_path, stdin, capsys):
    missing = tmp_path / "missing.b"
    assert bfi.main([str(missing)]) == 1
    assert capsys.readouterr().err == f"bfi: error: can't read file {missing}\n"


def test_no_input_file(stdin, capsys):
    assert bfi.main([]) == 1
    assert capsys.readouterr().err == "bfi: error: no input file\n"


def test_warnings_flag(source, stdin, capsys):
    assert bfi.main(["-w", source("<-,")]) == 0
    assert capsys.readouterr().err.splitlines() == [
        "bfi: warning: you reached a 'negative' memory cell",
        "bfi: warning: value of cell #-1 is negative",
        "bfi: warning: encountered EOF while reading input",
    ]


def test_warnings_are_off_by_default(source, stdin, capsys):
    assert bfi.main([source("<-,")]) == 0
    assert capsys.readouterr().err == ""


def test_eof_option(source, stdin, capsysbinary):
    assert bfi.main(["--eof", "66", source(",.")]) == 0
    assert capsysbinary.readouterr().out == b"B"


def test_dump_option(source, stdin, capsys):
    assert bfi.main(["-d", "#", source("+++>#")]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "cell no | data (int) | data (char)"
    assert len(out.splitlines()) == 3


def test_dump_requires_single_character(source, stdin, capsys):
    with pytest.raises(SystemExit) as exc:
        bfi.main(["--dump", "ab", source("+")])
    assert exc.value.code == 2
    assert "missing <char> after -d (--dump)" in capsys.readouterr().err


@pytest.mark.parametrize("flag", ["-h", "--help"])
def test_help(flag, capsys):
    with pytest.raises(SystemExit) as exc:
        bfi.main([flag])
    assert exc.value.code == 0
    assert "Dump memory when <char> is met" in capsys.readouterr().out


@pytest.mark.parametrize("flag", ["-v", "--version"])
def test_version(flag, capsys):
    with pytest.raises(SystemExit) as exc:
        bfi.main([flag])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("bfi 0.2\n")


def test_memory_failure_is_reported(source, stdin, capsys, monkeypatch):
    def exhausted(self):
        raise MemoryError

    monkeypatch.setattr("tape.Tape.move_right", exhausted)
    assert bfi.main([source("+>+")]) == 1
    assert capsys.readouterr().err == "bfi: error: memory allocation failure\n"


def test_deeply_nested_program(source, stdin, capsysbinary):
    assert bfi.main([source("+" + "[" * 1500 + "-" + "]" * 1500 + "+.")]) == 0
    captured = capsysbinary.readouterr()
    assert captured.out == b"\x01"
    assert captured.err == b""

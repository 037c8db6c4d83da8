#!/usr/bin/env python3
"""bfi - a brainfuck interpreter

Usage: bfi [options] file
"""
from __future__ import annotations

import argparse
import logging
import sys

from brainfuck import BrainfuckProgram, Interpreter, MismatchedParentheses, Options

PRG_NAME = "bfi"
VERSION = "0.2"

logger = logging.getLogger(PRG_NAME)


class DiagnosticFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return f"{PRG_NAME}: {record.levelname.lower()}: {record.getMessage()}"


def setup_logging(warnings: bool, stream=None):
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(DiagnosticFormatter())
    logger.handlers[:] = [handler]
    logger.setLevel(logging.WARNING if warnings else logging.ERROR)
    logger.propagate = False


def single_char(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError("missing <char> after -d (--dump)")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PRG_NAME,
        description=f"{PRG_NAME} - a brainfuck interpreter",
        epilog=f"A man page should have come with {PRG_NAME}, see\n  man {PRG_NAME}\nfor more info and examples",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", nargs="?", help="brainfuck source file")
    parser.add_argument("-d", "--dump", metavar="<char>", type=single_char,
                        help="Dump memory when <char> is met")
    parser.add_argument("-e", "--eof", metavar="<num>", type=int,
                        help="Replace EOF with <num> if such is encountered (default is no change)")
    parser.add_argument("-v", "--version", action="version",
                        version=f"{PRG_NAME} {VERSION}\n\n"
                                "For license and copyright information see the LICENSE file, which should\n"
                                "have been distributed with the software.",
                        help="Display program name and version number")
    parser.add_argument("-w", "--warnings", action="store_true", help="Print warnings")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.warnings)
    options = Options(dump=args.dump, eof=args.eof, warnings=args.warnings)

    if args.file is None:
        logger.error("no input file")
        return 1
    try:
        program = BrainfuckProgram.from_file(args.file)
    except OSError:
        logger.error("can't read file %s", args.file)
        return 1

    try:
        Interpreter(program, options, sys.stdin.buffer, sys.stdout.buffer).run()
    except MismatchedParentheses as e:
        logger.error("%s", e)
        return 1
    except MemoryError:
        logger.error("memory allocation failure")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

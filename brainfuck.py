from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import BinaryIO, Optional

from tape import Tape

logger = logging.getLogger("bfi")


class BrainfuckError(ValueError):
    pass


class MismatchedParentheses(BrainfuckError):
    def __init__(self, opening: int, closing: int):
        self.opening = opening
        self.closing = closing
        super(MismatchedParentheses, self).__init__("parens don't match")


@dataclass(frozen=True)
class Options:
    dump: Optional[str] = None
    eof: Optional[int] = None
    warnings: bool = False


@dataclass(frozen=True)
class BrainfuckProgram:
    code: str

    @classmethod
    def from_file(cls, path: str | Path) -> BrainfuckProgram:
        # latin-1 maps every byte to exactly one character
        return cls(Path(path).read_bytes().decode("latin-1"))

    @cached_property
    def is_balanced(self) -> bool:
        return SourceReader(self.code).validate_balance()

    def check(self):
        if not self.is_balanced:
            raise MismatchedParentheses(self.code.count("["), self.code.count("]"))


class SourceReader:
    """Sequential cursor over the program text.

    The whole program is held in memory, so a mark is just the cursor value
    and loop bodies are replayed by resetting to it.
    """

    def __init__(self, code: str):
        self.code = code
        self.pc = 0

    def next(self) -> Optional[str]:
        if self.pc >= len(self.code):
            return None
        c = self.code[self.pc]
        self.pc += 1
        return c

    def mark(self) -> int:
        return self.pc

    def reset(self, mark: int):
        self.pc = mark

    def skip_balanced(self):
        depth = 0
        while (c := self.next()) is not None:
            if c == "[":
                depth += 1
            elif c == "]":
                if depth == 0:
                    break
                depth -= 1

    def validate_balance(self) -> bool:
        start = self.mark()
        self.reset(0)
        opening = closing = 0
        while (c := self.next()) is not None:
            if c == "[":
                opening += 1
            elif c == "]":
                closing += 1
        self.reset(start)
        return opening == closing


class Interpreter:
    def __init__(self, program: BrainfuckProgram, options: Options = Options(),
                 stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None):
        self.program = program
        self.options = options
        self.stdin = stdin if stdin is not None else io.BytesIO()
        self.stdout = stdout if stdout is not None else io.BytesIO()
        self.source = SourceReader(program.code)
        self.tape = Tape(warnings=options.warnings)
        # marks of the loops currently iterating, innermost last
        self.loops: list[int] = []

    def run(self) -> Tape:
        self.program.check()
        while True:
            c = self.source.next()
            if c is None:
                if not self.loops:
                    break
                # the stream ended inside a loop body, which ends that pass
                self.end_pass()
            else:
                self.interpret(c)
        self.stdout.flush()
        return self.tape

    def interpret(self, c: str):
        if c == self.options.dump:
            self.stdout.write(self.tape.dump().encode("ascii"))
        match c:
            case ">":
                self.tape.move_right()
            case "<":
                self.tape.move_left()
            case "+":
                self.tape.increment()
            case "-":
                self.tape.decrement()
            case ".":
                self.stdout.write(bytes((self.tape.read() & 0xFF,)))
            case ",":
                self.read_input()
            case "[":
                self.enter_loop()
            case "]":
                self.end_pass()

    def read_input(self):
        data = self.stdin.read(1)
        if not data:
            if self.options.warnings:
                logger.warning("encountered EOF while reading input")
            if self.options.eof is not None:
                self.tape.write(self.options.eof)
        else:
            self.tape.write(data[0])

    def enter_loop(self):
        if self.tape.read() <= 0:
            self.source.skip_balanced()
        else:
            self.loops.append(self.source.mark())

    def end_pass(self):
        """Re-test the innermost loop after one pass over its body.

        The body is read again from its start while the cell stays positive.
        A ``]`` with no loop running is ignored.
        """
        if not self.loops:
            return
        if self.tape.read() > 0:
            self.source.reset(self.loops[-1])
        else:
            self.loops.pop()


def run(code: str, input: bytes = b"", options: Optional[Options] = None) -> bytes:
    stdout = io.BytesIO()
    interpreter = Interpreter(BrainfuckProgram(code), options or Options(), io.BytesIO(input), stdout)
    interpreter.run()
    return stdout.getvalue()

from __future__ import annotations

import logging

from frozendict import frozendict

logger = logging.getLogger("bfi")

DUMP_HEADER = "cell no | data (int) | data (char)"


def printable(value: int) -> str:
    # Only ASCII graphic characters, the same set C's isgraph accepts.
    if 33 <= value <= 126:
        return chr(value)
    return " "


class Tape:
    """Bidirectionally growing row of integer cells.

    Cells at index >= 0 live in ``_right`` and cells at index < 0 live in
    ``_left`` (cell -1 at ``_left[0]``), so growing either end is an append.
    A cell only exists once the head has visited it.
    """

    def __init__(self, warnings: bool = False):
        self.warnings = warnings
        self._right: list[int] = [0]
        self._left: list[int] = []
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def lowest(self) -> int:
        return -len(self._left)

    @property
    def highest(self) -> int:
        return len(self._right) - 1

    def __len__(self) -> int:
        return len(self._left) + len(self._right)

    def __getitem__(self, index: int) -> int:
        if not self.lowest <= index <= self.highest:
            raise IndexError(f"cell #{index} has not been visited")
        if index >= 0:
            return self._right[index]
        return self._left[-index - 1]

    def move_right(self):
        self._position += 1
        if self._position > self.highest:
            self._right.append(0)

    def move_left(self):
        self._position -= 1
        if self._position < self.lowest:
            self._left.append(0)
            if self._position == -1 and self.warnings:
                logger.warning("you reached a 'negative' memory cell")

    def read(self) -> int:
        if self._position >= 0:
            return self._right[self._position]
        return self._left[-self._position - 1]

    def write(self, value: int):
        if self._position >= 0:
            self._right[self._position] = value
        else:
            self._left[-self._position - 1] = value

    def increment(self):
        self.write(self.read() + 1)

    def decrement(self):
        value = self.read() - 1
        self.write(value)
        if value == -1 and self.warnings:
            logger.warning("value of cell #%d is negative", self._position)

    def snapshot(self) -> frozendict[int, int]:
        return frozendict((i, self[i]) for i in range(self.lowest, self.highest + 1))

    def dump(self) -> str:
        lines = [DUMP_HEADER]
        for cell, data in self.snapshot().items():
            lines.append(f"{cell:7d} | {data:10d} | {printable(data):>11}")
        return "\n".join(lines) + "\n"

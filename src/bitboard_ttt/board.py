"""
Board: two disjoint bit masks, one per mark, plus the win-line table.
Teaching notes:
- Cell 0 is the top-left corner; cells count left-to-right, then top-to-bottom.
- Cell i is bit i of a mark's mask. X owns marks_a, O owns marks_b.
- The only way to add a mark is place_for_a / place_for_b, which refuse an
  occupied cell, so marks_a & marks_b stays empty.
- Board strings use the 0/1/2 digit format: 0=empty, 1=X, 2=O.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .bitboard import CELL_COUNT, BitMask

EMPTY_BOARD = BitMask.with_bits(0)
FILLED_BOARD = BitMask.with_bits(0b111111111)

# The table is its own image under bit reversal, so these literals cover the
# rows, columns and diagonals whichever end of the mask is called cell 0.
WIN_LINES: Tuple[BitMask, ...] = (
    BitMask.with_bits(0b111000000),  # row
    BitMask.with_bits(0b000111000),  # row
    BitMask.with_bits(0b000000111),  # row
    BitMask.with_bits(0b100100100),  # column
    BitMask.with_bits(0b010010010),  # column
    BitMask.with_bits(0b001001001),  # column
    BitMask.with_bits(0b100010001),  # diagonal
    BitMask.with_bits(0b001010100),  # anti-diagonal
)

MARK_X = "X"
MARK_O = "O"


def winning_line(marks: BitMask) -> Optional[BitMask]:
    for line in WIN_LINES:
        if (marks & line) == line:
            return line
    return None


def has_line(marks: BitMask) -> bool:
    return winning_line(marks) is not None


@dataclass(frozen=True)
class Board:
    marks_a: BitMask = EMPTY_BOARD
    marks_b: BitMask = EMPTY_BOARD

    def __post_init__(self) -> None:
        overlap = self.marks_a & self.marks_b
        if overlap != EMPTY_BOARD:
            raise ValueError(f"Cells claimed by both X and O: {list(overlap.bits())}")

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    def occupied(self) -> BitMask:
        return self.marks_a | self.marks_b

    def is_empty(self) -> bool:
        return self.occupied() == EMPTY_BOARD

    def is_full(self) -> bool:
        return self.occupied() == FILLED_BOARD

    def is_occupied(self, cell: int) -> bool:
        return (self.occupied() & BitMask.from_bit(cell)) != EMPTY_BOARD

    def place_for_a(self, cell: int) -> Optional["Board"]:
        """Return a new board with X on ``cell``, or None if the cell is taken."""
        if self.is_occupied(cell):
            return None
        return Board(self.marks_a | BitMask.from_bit(cell), self.marks_b)

    def place_for_b(self, cell: int) -> Optional["Board"]:
        """Return a new board with O on ``cell``, or None if the cell is taken."""
        if self.is_occupied(cell):
            return None
        return Board(self.marks_a, self.marks_b | BitMask.from_bit(cell))

    def bit_boards(self) -> Tuple[BitMask, BitMask]:
        return self.marks_a, self.marks_b

    def cell(self, index: int) -> Optional[str]:
        if self.marks_a.test_bit(index):
            return MARK_X
        if self.marks_b.test_bit(index):
            return MARK_O
        return None

    def free_cells(self) -> List[int]:
        free = FILLED_BOARD ^ self.occupied()
        return list(free.bits())

    def serialize(self) -> str:
        return ''.join(
            '1' if self.marks_a.test_bit(i) else '2' if self.marks_b.test_bit(i) else '0'
            for i in range(CELL_COUNT)
        )

    @classmethod
    def from_string(cls, raw: str) -> "Board":
        raw = raw.strip()
        if len(raw) != CELL_COUNT or any(c not in "012" for c in raw):
            raise ValueError(f"Invalid board string {raw!r}. Must be 9 chars of 0/1/2.")
        board = cls()
        for i, c in enumerate(raw):
            if c == '1':
                board = board.place_for_a(i)  # type: ignore[union-attr]
            elif c == '2':
                board = board.place_for_b(i)  # type: ignore[union-attr]
        return board

    def to_array(self) -> np.ndarray:
        """3x3 int8 grid with 0=empty, 1=X, 2=O."""
        flat = np.zeros(CELL_COUNT, dtype=np.int8)
        flat[list(self.marks_a.bits())] = 1
        flat[list(self.marks_b.bits())] = 2
        return flat.reshape(3, 3)

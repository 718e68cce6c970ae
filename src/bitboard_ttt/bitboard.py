"""
Bit-mask container: a set of cell indices 0..8 packed into one integer.
Teaching notes:
- Cell i is bit i (1 << i). Set algebra is plain bitwise arithmetic.
- Masks are values: every operator returns a new BitMask, nothing mutates.
- Operators accept another BitMask or a plain int on either side.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

CELL_COUNT = 9

Bits = Union["BitMask", int]


def _raw(other: Bits) -> int:
    if isinstance(other, BitMask):
        return other.value
    if isinstance(other, int):
        return other
    return NotImplemented  # type: ignore[return-value]


@dataclass(frozen=True, eq=False)
class BitMask:
    value: int = 0

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"BitMask value must be non-negative, got {self.value}")

    @classmethod
    def empty(cls) -> "BitMask":
        return cls(0)

    @classmethod
    def with_bits(cls, value: int) -> "BitMask":
        return cls(value)

    @classmethod
    def from_bit(cls, index: int) -> "BitMask":
        if not 0 <= index < CELL_COUNT:
            raise ValueError(f"Bit index out of range 0..{CELL_COUNT - 1}: {index}")
        return cls(1 << index)

    def test_bit(self, index: int) -> bool:
        return (self.value >> index) & 1 == 1

    def bits(self) -> Iterator[int]:
        """Yield the indices of set bits, lowest first."""
        v = self.value
        i = 0
        while v:
            if v & 1:
                yield i
            v >>= 1
            i += 1

    def popcount(self) -> int:
        return bin(self.value).count("1")

    def __and__(self, other: Bits) -> "BitMask":
        raw = _raw(other)
        if raw is NotImplemented:
            return NotImplemented
        return BitMask(self.value & raw)

    def __or__(self, other: Bits) -> "BitMask":
        raw = _raw(other)
        if raw is NotImplemented:
            return NotImplemented
        return BitMask(self.value | raw)

    def __xor__(self, other: Bits) -> "BitMask":
        raw = _raw(other)
        if raw is NotImplemented:
            return NotImplemented
        return BitMask(self.value ^ raw)

    __rand__ = __and__
    __ror__ = __or__
    __rxor__ = __xor__

    def __lshift__(self, shift: int) -> "BitMask":
        return BitMask(self.value << shift)

    def __rshift__(self, shift: int) -> "BitMask":
        return BitMask(self.value >> shift)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BitMask):
            return self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __bool__(self) -> bool:
        return self.value != 0

    def __str__(self) -> str:
        return format(self.value, "b")

    def __repr__(self) -> str:
        return f"BitMask(0b{self.value:09b})"

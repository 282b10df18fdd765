"""
Three-digit number: the value type of every memory cell and of the accumulator.

Values live in 0..=999. Construction from anything outside that range raises
RangeError; arithmetic never raises and wraps modulo 1000 instead, the way the
machine's adder does.
"""

from __future__ import annotations
import operator
from typing import Tuple

from .errors import RangeError

__all__ = ['ThreeDigitNumber', 'ZERO', 'MAX_VALUE', 'MODULUS']

MAX_VALUE = 999
MODULUS = 1000


class ThreeDigitNumber(int):
    """An int restricted to 0..=999 with wraparound addition.

    Usage:
        n = ThreeDigitNumber(998)
        n + 3               # ThreeDigitNumber(1)
        n.subtract(999)     # (ThreeDigitNumber(999), True)
    """

    __slots__ = ()

    def __new__(cls, value: int = 0) -> 'ThreeDigitNumber':
        value = operator.index(value)
        if not 0 <= value <= MAX_VALUE:
            raise RangeError(value, MAX_VALUE)
        return super().__new__(cls, value)

    @classmethod
    def from_byte(cls, value: int) -> 'ThreeDigitNumber':
        """Widen a byte (0..=255); every byte fits."""
        value = operator.index(value)
        if not 0 <= value <= 0xFF:
            raise RangeError(value, 0xFF)
        return cls(value)

    def __add__(self, other):
        if not isinstance(other, int):
            return NotImplemented
        return ThreeDigitNumber((int(self) + int(ThreeDigitNumber(other))) % MODULUS)

    __radd__ = __add__

    def subtract(self, other: int) -> Tuple['ThreeDigitNumber', bool]:
        """Return (self - other) mod 1000 and whether the true result was negative."""
        other = int(ThreeDigitNumber(other))
        result = (int(self) + MODULUS - other) % MODULUS
        return ThreeDigitNumber(result), int(self) < other

    def is_two_digit(self) -> bool:
        """True when the value is usable as a memory address (< 100)."""
        return int(self) < 100

    def __repr__(self) -> str:
        return f"ThreeDigitNumber({int(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)


ZERO = ThreeDigitNumber(0)

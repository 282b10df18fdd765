"""
Memory image: exactly 100 three-digit words, addressed 00-99.

Every access is bounds-checked; an address outside 0..=99 raises
MemoryAddressError (an IndexError) instead of wrapping.
"""

from __future__ import annotations
from typing import Iterable, Iterator, List, Union

from .errors import MemoryAddressError
from .num3 import ThreeDigitNumber, ZERO

__all__ = ['MEMORY_SIZE', 'Memory']

MEMORY_SIZE = 100


class Memory:
    """Fixed-size word-addressable memory.

    Usage:
        mem = Memory([901, 902, 0])    # missing words are zero
        mem[1]                         # ThreeDigitNumber(902)
        mem[1] = 500
        mem.dump()
    """

    __slots__ = ('_words',)

    def __init__(self, words: Iterable[int] = ()):
        cells = [ThreeDigitNumber(word) for word in words]
        if len(cells) > MEMORY_SIZE:
            raise MemoryAddressError(len(cells) - 1)
        self._words: List[ThreeDigitNumber] = cells + [ZERO] * (MEMORY_SIZE - len(cells))

    @staticmethod
    def _check(address) -> int:
        if isinstance(address, bool) or not isinstance(address, int):
            raise MemoryAddressError(address)
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAddressError(address)
        return int(address)

    def __getitem__(self, address: Union[int, slice]):
        if isinstance(address, slice):
            return self._words[address]
        return self._words[self._check(address)]

    def __setitem__(self, address: int, value: int):
        self._words[self._check(address)] = ThreeDigitNumber(value)

    def __len__(self) -> int:
        return MEMORY_SIZE

    def __iter__(self) -> Iterator[ThreeDigitNumber]:
        return iter(self._words)

    def __eq__(self, other) -> bool:
        if isinstance(other, Memory):
            return self._words == other._words
        if isinstance(other, (list, tuple)):
            return self._words == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        used = self.used()
        return f"Memory({self.to_list()[:used]!r})"

    def used(self) -> int:
        """Number of words up to and including the last non-zero one."""
        for address in range(MEMORY_SIZE - 1, -1, -1):
            if self._words[address]:
                return address + 1
        return 0

    def to_list(self) -> List[int]:
        return [int(word) for word in self._words]

    def copy(self) -> 'Memory':
        return Memory(self._words)

    def dump(self, columns: int = 10) -> str:
        """Format the image as rows of words prefixed with their start address."""
        rows = []
        for start in range(0, MEMORY_SIZE, columns):
            cells = ' '.join(f'{int(w):03d}' for w in self._words[start:start + columns])
            rows.append(f"{start:02d}: {cells}")
        return '\n'.join(rows)

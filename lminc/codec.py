"""
Binary format for memory images.

Each of the 100 words is stored as a 10-bit big-endian field, packed back to
back with no padding: 1000 bits, 125 bytes. Four words fill exactly five
bytes, so the layout repeats every five bytes:

    byte   0        1        2        3        4
          AAAAAAAA AABBBBBB BBBBCCCC CCCCCCDD DDDDDDDD

A BitCursor walks the buffer one word at a time. At ``offset`` n the word's
high 10-n bits sit in the low bits of byte ``index`` and its low n bits in
the high bits of byte ``index + 1``. Offsets cycle 2, 4, 6, 8; after an
offset-8 word the next word starts on a fresh byte.

Packed images have their trailing zero bytes trimmed, so an all-zero image
packs to b"". Unpacking treats missing bytes as zero.
"""

from __future__ import annotations
import logging

from .errors import LoadError, LoadErrorKind
from .memory import MEMORY_SIZE, Memory
from .num3 import MAX_VALUE

__all__ = ['WORD_BITS', 'MAX_PACKED_SIZE', 'BitCursor', 'pack', 'unpack']

log = logging.getLogger(__name__)

WORD_BITS = 10
MAX_PACKED_SIZE = MEMORY_SIZE * WORD_BITS // 8    # 125 bytes
WORD_MASK = (1 << WORD_BITS) - 1


class BitCursor:
    """Position of the next 10-bit word in a packed buffer."""

    def __init__(self, buffer: bytearray, index: int = 0, offset: int = 2):
        self.buffer = buffer
        self.index = index
        self.offset = offset

    def write(self, word: int):
        """OR ``word`` into the buffer at the cursor and advance."""
        self.buffer[self.index] |= (word >> self.offset) & 0xFF
        self.buffer[self.index + 1] |= (word << (8 - self.offset)) & 0xFF
        self._advance()

    def read(self) -> int:
        """Read the word at the cursor and advance."""
        high = (self.buffer[self.index] << self.offset) & WORD_MASK
        low = self.buffer[self.index + 1] >> (8 - self.offset)
        self._advance()
        return high | low

    def _advance(self):
        self.index += 1
        self.offset += 2
        if self.offset == WORD_BITS:
            self.index += 1
            self.offset = 2


def pack(memory: Memory) -> bytes:
    """Pack a memory image into at most 125 bytes."""
    buffer = bytearray(MAX_PACKED_SIZE)
    cursor = BitCursor(buffer)
    for word in memory:
        cursor.write(int(word))
    packed = bytes(buffer).rstrip(b'\x00')
    log.debug("Packed memory into %d bytes", len(packed))
    return packed


def unpack(data: bytes) -> Memory:
    """Unpack a buffer produced by pack() back into a memory image."""
    if len(data) > MAX_PACKED_SIZE:
        raise LoadError(LoadErrorKind.BUFFER_TOO_LARGE, size=len(data), limit=MAX_PACKED_SIZE)

    buffer = bytearray(MAX_PACKED_SIZE)
    buffer[:len(data)] = data
    cursor = BitCursor(buffer)
    words = [cursor.read() for _ in range(MEMORY_SIZE)]

    for index, value in enumerate(words):
        if value > MAX_VALUE:
            raise LoadError(LoadErrorKind.INVALID_NUMBER, index=index, value=value)

    log.debug("Unpacked %d bytes", len(data))
    return Memory(words)

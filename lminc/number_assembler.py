"""
Number assembler: builds a memory image from a plain list of words.

One decimal number (0-999) per line, written to consecutive addresses from
00. Comments ('#' or ';') and blank lines are ignored.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from .errors import NumberAssemblerError, NumberAssemblerErrorKind as Kind
from .memory import MEMORY_SIZE, Memory
from .num3 import MAX_VALUE, ThreeDigitNumber
from .parser import strip_comment

__all__ = ['NumberAssembler', 'assemble_numbers']

log = logging.getLogger(__name__)


class NumberAssembler:
    def __init__(self):
        self.words: List[ThreeDigitNumber] = []

    def assemble_line(self, line: str, line_num: int = 0) -> Optional[ThreeDigitNumber]:
        text = strip_comment(line).strip()
        if not text:
            return None
        if not (text.isascii() and text.isdigit()):
            raise NumberAssemblerError(Kind.INVALID_NUMBER, line_num, text)
        if int(text) > MAX_VALUE:
            raise NumberAssemblerError(Kind.NUMBER_TOO_LARGE, line_num, text)
        if len(self.words) >= MEMORY_SIZE:
            raise NumberAssemblerError(Kind.TOO_MANY_NUMBERS, line_num)
        word = ThreeDigitNumber(int(text))
        self.words.append(word)
        return word

    def assemble(self, text: str) -> Memory:
        for line_num, line in enumerate(text.splitlines(), 1):
            self.assemble_line(line, line_num)
        log.info("Assembled %d numbers", len(self.words))
        return Memory(self.words)


def assemble_numbers(text: str) -> Memory:
    """Assemble a number listing into a memory image."""
    return NumberAssembler().assemble(text)

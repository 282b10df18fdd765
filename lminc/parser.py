"""
Line parser for LMC assembly.

Source format, one instruction per line:

    [label] MNEMONIC [operand]    ; comment
    [label] MNEMONIC [operand]    # comment

Everything from the first '#' or ';' to the end of the line is a comment.
A line holds at most three whitespace-separated words. Mnemonics are matched
case-insensitively, labels case-sensitively. A decimal word is a numeric
operand and can never be a label. Blank and comment-only lines produce no
instruction and do not count towards the 100-instruction limit.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .assembly import Instruction, Opcode, Operand, lookup_mnemonic
from .errors import ParseError, ParseErrorKind as Kind
from .memory import MEMORY_SIZE

__all__ = ['COMMENT_CHARS', 'MAX_WORDS', 'ParsedLine', 'Parser',
           'strip_comment', 'tokenize', 'parse_text']

COMMENT_CHARS = '#;'
MAX_WORDS = 3


@dataclass(frozen=True)
class ParsedLine:
    """One instruction line of a program."""
    instruction: Instruction
    label: Optional[str] = None
    line_num: int = 0          # 1-based source line
    instruction_num: int = 0   # 1-based position in the program (address + 1)
    raw: str = ""


def strip_comment(line: str) -> str:
    for i, ch in enumerate(line):
        if ch in COMMENT_CHARS:
            return line[:i]
    return line


def tokenize(line: str) -> List[str]:
    """Split a source line into words, comments removed."""
    return strip_comment(line).split()


def _is_number(word: str) -> bool:
    return word.isascii() and word.isdigit()


def _operand(word: str) -> Operand:
    return int(word) if _is_number(word) else word


class Parser:
    """Accumulates ParsedLines from source text.

    Usage:
        parser = Parser()
        lines = parser.parse_text(source)
    """

    def __init__(self, extended: bool = False):
        self.extended = extended
        self.lines: List[ParsedLine] = []

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[ParsedLine]:
        return iter(self.lines)

    def parse_line(self, line: str, line_num: int = 0) -> Optional[ParsedLine]:
        """Parse one source line and append it to the program.

        Returns the ParsedLine, or None for a blank / comment-only line.
        """
        words = tokenize(line)
        if not words:
            return None
        if len(words) > MAX_WORDS:
            raise ParseError(Kind.TOO_MANY_WORDS, line_num, words[MAX_WORDS])
        if len(self.lines) >= MEMORY_SIZE:
            raise ParseError(Kind.TOO_MANY_INSTRUCTIONS, line_num)

        label: Optional[str] = None
        opcode: Optional[Opcode] = None
        operand_word: Optional[str] = None

        first = lookup_mnemonic(words[0], self.extended)
        if first is not None:
            opcode = first
        elif _is_number(words[0]):
            raise ParseError(Kind.UNEXPECTED_NUMBER, line_num, words[0])
        else:
            label = words[0]

        # Second word: mnemonic or operand
        if len(words) > 1:
            second = lookup_mnemonic(words[1], self.extended)
            if second is None:
                operand_word = words[1]
            elif opcode is not None:
                raise ParseError(Kind.MULTIPLE_INSTRUCTIONS, line_num, words[1])
            else:
                opcode = second

        # Third word: operand only
        if len(words) > 2:
            if lookup_mnemonic(words[2], self.extended) is not None:
                raise ParseError(Kind.MULTIPLE_INSTRUCTIONS, line_num, words[2])
            if operand_word is not None:
                raise ParseError(Kind.TOO_MANY_WORDS, line_num, words[2])
            operand_word = words[2]

        if opcode is None:
            raise ParseError(Kind.NO_INSTRUCTION, line_num)
        if opcode.takes_operand and operand_word is None:
            raise ParseError(Kind.EXPECTED_DATA, line_num, opcode.name)
        if not opcode.takes_operand and operand_word is not None:
            raise ParseError(Kind.UNEXPECTED_DATA, line_num, operand_word)

        operand = None if operand_word is None else _operand(operand_word)
        parsed = ParsedLine(
            instruction=Instruction(opcode, operand),
            label=label,
            line_num=line_num,
            instruction_num=len(self.lines) + 1,
            raw=line.strip(),
        )
        self.lines.append(parsed)
        return parsed

    def parse_text(self, text: str) -> List[ParsedLine]:
        """Parse every line of ``text``; the first error wins."""
        for line_num, line in enumerate(text.splitlines(), 1):
            self.parse_line(line, line_num)
        return list(self.lines)


def parse_text(text: str, extended: bool = False) -> List[ParsedLine]:
    """Parse source text into a list of ParsedLines."""
    return Parser(extended=extended).parse_text(text)

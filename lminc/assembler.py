"""
Two-pass LMC assembler.

Input:  Assembly text (see parser.py for the line format)
Output: A 100-word Memory image

How the two-pass algorithm works:
  Pass 1: Walk the parsed lines and give every label the address of the line
          it sits on (instruction N lives at address N - 1).
  Pass 2: Encode each instruction. Labels are all known now, so forward
          references resolve the same way as backward ones.

Encoding: word = base code of the opcode + operand. Address operands must be
two-digit (0-99); DAT takes any value 0-999. A label operand resolves to the
label's address for every opcode, DAT included.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Sequence

from .assembly import Opcode
from .errors import AssemblerError, AssemblerErrorKind as Kind
from .memory import MEMORY_SIZE, Memory
from .num3 import MAX_VALUE, ThreeDigitNumber
from .parser import ParsedLine, Parser

__all__ = ['Assembler', 'assemble', 'assemble_lines']

log = logging.getLogger(__name__)


class Assembler:
    """Two-pass LMC assembler.

    Usage:
        asm = Assembler()
        memory = asm.assemble(source_text)
        print(asm.get_listing())
    """

    def __init__(self, extended: bool = False):
        self.extended = extended
        self.symbols: Dict[str, int] = {}     # Label -> address
        self.memory: Memory = Memory()        # Last assembled image
        self._lines: List[ParsedLine] = []

    def assemble(self, source: str) -> Memory:
        """Parse and assemble source text into a memory image."""
        lines = Parser(extended=self.extended).parse_text(source)
        return self.assemble_lines(lines)

    def assemble_lines(self, lines: Sequence[ParsedLine]) -> Memory:
        """Assemble already-parsed lines into a memory image."""
        if len(lines) > MEMORY_SIZE:
            extra = lines[MEMORY_SIZE]
            raise AssemblerError(Kind.TOO_MANY_INSTRUCTIONS, extra.line_num, MEMORY_SIZE + 1)

        self.symbols = {}
        self._lines = list(lines)

        self._pass1()
        self.memory = self._pass2()

        log.info("Assembled %d instructions, %d labels", len(self._lines), len(self.symbols))
        return self.memory

    def _pass1(self):
        """Pass 1: register every label at the address of its line."""
        for address, line in enumerate(self._lines):
            if line.label is None:
                continue
            if line.label in self.symbols:
                raise AssemblerError(Kind.MULTIPLE_ASSIGNMENT, line.line_num,
                                     line.instruction_num, line.label)
            self.symbols[line.label] = address
            log.debug("Label %r = %02d", line.label, address)

    def _pass2(self) -> Memory:
        """Pass 2: encode each line into its word."""
        return Memory(self._encode(line) for line in self._lines)

    def _encode(self, line: ParsedLine) -> ThreeDigitNumber:
        opcode = line.instruction.opcode
        if not opcode.takes_operand:
            return opcode.base_code
        return opcode.base_code + self._resolve(line)

    def _resolve(self, line: ParsedLine) -> int:
        """Turn an operand (label or literal) into its numeric value."""
        opcode = line.instruction.opcode
        operand = line.instruction.operand

        if isinstance(operand, str):
            address = self.symbols.get(operand)
            if address is None:
                raise AssemblerError(Kind.UNKNOWN_LABEL, line.line_num,
                                     line.instruction_num, operand)
            return address

        if opcode is Opcode.DAT:
            if operand > MAX_VALUE:
                raise AssemblerError(Kind.NUMBER_TOO_LARGE, line.line_num,
                                     line.instruction_num, str(operand))
        elif operand >= MEMORY_SIZE:
            raise AssemblerError(Kind.ADDRESS_TOO_LARGE, line.line_num,
                                 line.instruction_num, str(operand))
        return operand

    def get_listing(self) -> str:
        """Return a human-readable listing showing address, word, and source."""
        lines = [f"{'ADDR':>4}  {'WORD':>4}  SOURCE", "-" * 48]
        for address, line in enumerate(self._lines):
            raw = line.raw if len(line.raw) <= 36 else line.raw[:36]
            lines.append(f"{address:>4}   {int(self.memory[address]):03d}  {raw}")
        return '\n'.join(lines)


# ──────────────────────────────────────────────
# Convenience functions
# ──────────────────────────────────────────────

def assemble(source: str, extended: bool = False) -> Memory:
    """Assemble source text, return the memory image."""
    return Assembler(extended=extended).assemble(source)


def assemble_lines(lines: Sequence[ParsedLine]) -> Memory:
    """Assemble parsed lines, return the memory image."""
    return Assembler().assemble_lines(lines)

"""
Instruction model: opcodes, mnemonics and instructions.

Every opcode carries the base code it encodes to. An instruction that takes an
operand encodes as ``base + operand``; the others encode as the base alone.

    Mnemonic   Base   Operand      Meaning
    ADD        100    address      ACC += [address]
    SUB        200    address      ACC -= [address], sets the negative flag
    STO/STA    300    address      [address] = ACC
    LDA        500    address      ACC = [address]
    BR/BRA     600    address      jump
    BRZ        700    address      jump if ACC == 0
    BRP        800    address      jump if the negative flag is clear
    IN/INP     901    -            read a number into ACC
    OUT        902    -            write ACC as a number
    HLT        000    -            stop
    DAT        000    value        raw data word

  Extended instruction set (only recognised when extended mode is enabled):
    INA        911    -            read a character into ACC
    OTA        912    -            write ACC as a character
    EXT        010    -            switch the running program into extended mode

HLT and "DAT 0" encode to the same word. The enum tags them differently
(HLT = 1, DAT = 0) so the model can still tell them apart.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .num3 import ThreeDigitNumber

__all__ = ['Opcode', 'Instruction', 'Operand', 'MNEMONICS', 'lookup_mnemonic', 'disassemble']

Operand = Union[None, int, str]


class Opcode(enum.IntEnum):
    DAT = 0
    HLT = 1
    EXT = 10
    ADD = 100
    SUB = 200
    STO = 300
    LDA = 500
    BR = 600
    BRZ = 700
    BRP = 800
    IN = 901
    OUT = 902
    INA = 911
    OTA = 912

    @property
    def base_code(self) -> ThreeDigitNumber:
        """The word this opcode encodes to before its operand is added."""
        if self is Opcode.HLT:
            return ThreeDigitNumber(0)
        return ThreeDigitNumber(int(self))

    @property
    def takes_operand(self) -> bool:
        return self in _OPERAND_OPCODES

    @property
    def takes_address(self) -> bool:
        """Operand is a two-digit address rather than a full data word."""
        return self in _OPERAND_OPCODES and self is not Opcode.DAT

    @property
    def is_extended(self) -> bool:
        return self in _EXTENDED_OPCODES


_OPERAND_OPCODES = frozenset({
    Opcode.ADD, Opcode.SUB, Opcode.STO, Opcode.LDA,
    Opcode.BR, Opcode.BRZ, Opcode.BRP, Opcode.DAT,
})

_EXTENDED_OPCODES = frozenset({Opcode.INA, Opcode.OTA, Opcode.EXT})


# Accepted spellings, upper case. Lookup is case-insensitive.
MNEMONICS: Dict[str, Opcode] = {
    'ADD': Opcode.ADD,
    'SUB': Opcode.SUB,
    'STO': Opcode.STO,
    'STA': Opcode.STO,
    'LDA': Opcode.LDA,
    'BR':  Opcode.BR,
    'BRA': Opcode.BR,
    'BRZ': Opcode.BRZ,
    'BRP': Opcode.BRP,
    'IN':  Opcode.IN,
    'INP': Opcode.IN,
    'OUT': Opcode.OUT,
    'HLT': Opcode.HLT,
    'DAT': Opcode.DAT,
    'INA': Opcode.INA,
    'OTA': Opcode.OTA,
    'EXT': Opcode.EXT,
}


def lookup_mnemonic(word: str, extended: bool = False) -> Optional[Opcode]:
    """Return the opcode spelled by ``word``, or None if it is not a mnemonic.

    Extended mnemonics are only mnemonics when ``extended`` is set; otherwise
    they are ordinary words (and so may be used as labels).
    """
    opcode = MNEMONICS.get(word.upper())
    if opcode is None or (opcode.is_extended and not extended):
        return None
    return opcode


@dataclass(frozen=True)
class Instruction:
    """One instruction before label resolution.

    operand is None, a decimal literal (int) or a label name (str).
    """
    opcode: Opcode
    operand: Operand = None

    def __str__(self) -> str:
        if self.operand is None:
            return self.opcode.name
        return f"{self.opcode.name} {self.operand}"


# Decode table for listings and traces: first digit -> mnemonic of the
# address-taking instructions.
_ADDRESS_MNEMONICS = {1: 'ADD', 2: 'SUB', 3: 'STO', 5: 'LDA', 6: 'BR', 7: 'BRZ', 8: 'BRP'}


def disassemble(word: int, extended: bool = False) -> str:
    """Render a memory word as the instruction the computer would execute."""
    op, address = divmod(int(word), 100)
    if op in _ADDRESS_MNEMONICS:
        return f"{_ADDRESS_MNEMONICS[op]} {address:02d}"
    if word == 901:
        return 'IN'
    if word == 902:
        return 'OUT'
    if extended and word == 911:
        return 'INA'
    if extended and word == 912:
        return 'OTA'
    if extended and word == 10:
        return 'EXT'
    if word == 0:
        return 'HLT'
    return f"DAT {int(word):03d}"

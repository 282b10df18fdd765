"""
LMinC: Little Minion Computer toolkit
======================================
An assembler, virtual machine, binary image format and test harness for the
Little Man Computer, a 100-word decimal teaching machine.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌───────────┐    ┌──────────┐    ┌──────────┐
    │ Assembly │───>│  Parser  │───>│ Assembler │───>│  Memory  │───>│ Computer │
    │ (.txt)   │    │ (lines)  │    │ (2-pass)  │    │ (100 w)  │    │ (states) │
    └──────────┘    └──────────┘    └───────────┘    └──────────┘    └──────────┘
                                                          │  ^              │
                                                     pack │  │ unpack       │ I/O
                                                          v  │              v
                                                     ┌──────────┐    ┌────────────┐
                                                     │  .bin    │    │ Tester /   │
                                                     │ (125 B)  │    │ StdioRunner│
                                                     └──────────┘    └────────────┘

    - num3.py:             ThreeDigitNumber, the 0-999 wraparound value type
    - assembly.py:         Opcodes, mnemonics, instructions
    - parser.py:           Line tokenizer / parser ('#' and ';' comments)
    - assembler.py:        Two-pass label resolver -> Memory
    - number_assembler.py: One number per line -> Memory
    - computer.py:         Fetch-execute state machine with cooperative I/O
    - codec.py / file.py:  10-bit packed binary format
    - tester.py:           Scripted I/O tests under a cycle budget
    - runner.py:           Interactive console runner
"""

__version__ = "1.2.0"

from .num3 import ThreeDigitNumber, ZERO
from .memory import MEMORY_SIZE, Memory
from .assembly import Opcode, Instruction, disassemble
from .parser import Parser, ParsedLine, parse_text
from .assembler import Assembler, assemble
from .number_assembler import NumberAssembler, assemble_numbers
from .computer import Computer, State
from .codec import MAX_PACKED_SIZE, pack, unpack
from .tester import TestCase, TestReport, run_tests
from .runner import StdioRunner
from .errors import *

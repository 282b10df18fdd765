"""
Assembler Tests for LMinC.

Tests the two-pass mnemonic assembler and the number assembler against
known-good memory images of the bundled example programs.
"""
from pathlib import Path

import pytest

from lminc.assembler import Assembler, assemble
from lminc.errors import (
    AssemblerError, AssemblerErrorKind, NumberAssemblerError, NumberAssemblerErrorKind, ParseError,
)
from lminc.memory import MEMORY_SIZE
from lminc.number_assembler import assemble_numbers

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

FIB_IMAGE = [512, 113, 902, 314, 513, 312, 514, 313, 515, 214, 800, 0, 0, 1, 0, 100]
FIB_NUM_IMAGE = [605, 0, 1, 0, 100, 501, 102, 902, 303, 502, 301, 503, 302, 204, 816, 605]
ABS_ADDR_IMAGE = [509, 398, 109, 399, 598, 902, 599, 902, 0, 1]


def _padded(words):
    return list(words) + [0] * (MEMORY_SIZE - len(words))


def _asm_kind(source: str) -> AssemblerErrorKind:
    with pytest.raises(AssemblerError) as exc:
        assemble(source)
    return exc.value.kind


class TestExamplePrograms:
    def test_fibonacci(self):
        memory = assemble((EXAMPLES / "fib.txt").read_text())
        assert memory == _padded(FIB_IMAGE), f"got {memory.to_list()[:16]}"

    def test_absolute_addressing(self):
        memory = assemble((EXAMPLES / "abs_addr.txt").read_text())
        assert memory == _padded(ABS_ADDR_IMAGE)

    def test_fibonacci_numbers(self):
        memory = assemble_numbers((EXAMPLES / "fib_num.txt").read_text())
        assert memory == _padded(FIB_NUM_IMAGE)

    def test_extended_program_needs_extended(self):
        source = (EXAMPLES / "hello.txt").read_text()
        memory = assemble(source, extended=True)
        assert memory[:8] == [10, 508, 912, 509, 912, 510, 912, 0]
        with pytest.raises(ParseError):
            assemble(source)


class TestEncoding:
    def test_empty_source(self):
        assert assemble("") == [0] * MEMORY_SIZE
        assert assemble("; nothing\n\n  \n") == [0] * MEMORY_SIZE

    def test_full_memory(self):
        memory = assemble("OUT\n" * 100)
        assert memory == [902] * MEMORY_SIZE

    def test_each_opcode(self):
        cases = [
            ("ADD 5", 105), ("SUB 99", 299), ("STO 0", 300), ("STA 1", 301),
            ("LDA 42", 542), ("BR 7", 607), ("BRA 7", 607), ("BRZ 8", 708),
            ("BRP 9", 809), ("IN", 901), ("INP", 901), ("OUT", 902),
            ("HLT", 0), ("DAT 999", 999), ("DAT 0", 0),
        ]
        for source, word in cases:
            memory = assemble(source)
            assert memory[0] == word, f"{source}: expected {word}, got {memory[0]}"

    def test_extended_opcodes(self):
        memory = assemble("EXT\nINA\nOTA", extended=True)
        assert memory[:3] == [10, 911, 912]

    def test_forward_and_backward_labels(self):
        source = "start BR end\nmid BR start\nend BR mid"
        assert assemble(source)[:3] == [602, 600, 601]

    def test_dat_label_is_address(self):
        memory = assemble("LDA ptr\nHLT\nptr DAT ptr")
        assert memory[:3] == [502, 0, 2]

    def test_symbols(self):
        asm = Assembler()
        asm.assemble("loop IN\nOUT\nBR loop\nend HLT")
        assert asm.symbols == {"loop": 0, "end": 3}

    def test_listing(self):
        asm = Assembler()
        asm.assemble("loop IN ; read\nOUT\nBR loop")
        listing = asm.get_listing()
        assert "   0   901  loop IN ; read" in listing
        assert "   2   600  BR loop" in listing


class TestAssemblerErrors:
    def test_unknown_label(self):
        with pytest.raises(AssemblerError) as exc:
            assemble("IN\nBR nowhere")
        assert exc.value.kind is AssemblerErrorKind.UNKNOWN_LABEL
        assert exc.value.token == "nowhere"
        assert exc.value.line_num == 2

    def test_labels_are_case_sensitive(self):
        assert _asm_kind("Loop IN\nBR loop") is AssemblerErrorKind.UNKNOWN_LABEL

    def test_address_too_large(self):
        assert _asm_kind("LDA 100") is AssemblerErrorKind.ADDRESS_TOO_LARGE
        assert _asm_kind("BR 5000") is AssemblerErrorKind.ADDRESS_TOO_LARGE

    def test_dat_too_large(self):
        assert _asm_kind("DAT 1000") is AssemblerErrorKind.NUMBER_TOO_LARGE

    def test_duplicate_label(self):
        assert _asm_kind("x IN\nx OUT") is AssemblerErrorKind.MULTIPLE_ASSIGNMENT

    def test_too_many_lines(self):
        with pytest.raises(ParseError):
            assemble("OUT\n" * 101)


class TestNumberAssembler:
    def test_basic(self):
        memory = assemble_numbers("901\n902\n0\n")
        assert memory[:3] == [901, 902, 0]
        assert memory[3:] == [0] * 97

    def test_comments_and_blank_lines(self):
        memory = assemble_numbers("# header\n901 # in\n\n   \n902 ; out\n")
        assert memory[:2] == [901, 902]

    def test_invalid_number(self):
        with pytest.raises(NumberAssemblerError) as exc:
            assemble_numbers("901\nLDA\n")
        assert exc.value.kind is NumberAssemblerErrorKind.INVALID_NUMBER
        assert exc.value.line_num == 2

    def test_two_numbers_on_a_line(self):
        with pytest.raises(NumberAssemblerError) as exc:
            assemble_numbers("1 2")
        assert exc.value.kind is NumberAssemblerErrorKind.INVALID_NUMBER

    def test_number_too_large(self):
        with pytest.raises(NumberAssemblerError) as exc:
            assemble_numbers("1000")
        assert exc.value.kind is NumberAssemblerErrorKind.NUMBER_TOO_LARGE

    def test_too_many_numbers(self):
        assert assemble_numbers("1\n" * 100) == [1] * MEMORY_SIZE
        with pytest.raises(NumberAssemblerError) as exc:
            assemble_numbers("1\n" * 101)
        assert exc.value.kind is NumberAssemblerErrorKind.TOO_MANY_NUMBERS
        assert exc.value.line_num == 101

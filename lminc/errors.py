"""
Error types for LMinC.

Every error raised by the package derives from LMincError. Each concrete
error carries a ``kind`` (an Enum whose value is the message template) plus
the context needed to report it: the offending token or value, the source
line or instruction number, the test name and cycle count.

Messages are formatted once in the constructor, in the same "Line N: message"
style used throughout the toolchain, so ``str(error)`` is always ready to
print.
"""

from __future__ import annotations
import enum
from typing import Optional

__all__ = [
    'LMincError', 'RangeError', 'MemoryAddressError',
    'ParseErrorKind', 'ParseError',
    'AssemblerErrorKind', 'AssemblerError',
    'NumberAssemblerErrorKind', 'NumberAssemblerError',
    'LoadErrorKind', 'LoadError',
    'ComputerErrorKind', 'ComputerError',
    'TestErrorKind', 'TestError',
    'CSVErrorKind', 'CSVError',
    'RunnerErrorKind', 'RunnerError',
]


def _located(message: str, line_num: int = 0, instruction_num: int = 0) -> str:
    if line_num:
        return f"Line {line_num}: {message}"
    if instruction_num:
        return f"Instruction {instruction_num}: {message}"
    return message


class LMincError(Exception):
    """Base class for every error raised by lminc."""


class RangeError(LMincError, ValueError):
    """A value does not fit in its numeric domain (0..=999 by default)."""

    def __init__(self, value: int, limit: int = 999):
        self.value = value
        self.limit = limit
        super().__init__(f"Number is out of range ({value} is not within 0..={limit})")


class MemoryAddressError(LMincError, IndexError):
    """A memory access outside of the 100 addressable cells."""

    def __init__(self, address):
        self.address = address
        super().__init__(f"Memory address out of range: {address!r} (valid: 0..=99)")


# ──────────────────────────────────────────────
# Parsing and assembling
# ──────────────────────────────────────────────

class ParseErrorKind(enum.Enum):
    TOO_MANY_WORDS = "Too many words"
    TOO_MANY_INSTRUCTIONS = "Too many instructions (maximum of 100)"
    MULTIPLE_INSTRUCTIONS = "Multiple instructions on one line"
    UNEXPECTED_NUMBER = "Expected a label not a number"
    NO_INSTRUCTION = "Missing instruction"
    EXPECTED_DATA = "Expected label / number"
    UNEXPECTED_DATA = "Unexpected label / number"


class ParseError(LMincError):
    """Raised when a line of assembly cannot be parsed."""

    def __init__(self, kind: ParseErrorKind, line_num: int = 0, token: Optional[str] = None):
        self.kind = kind
        self.line_num = line_num
        self.token = token
        message = kind.value if token is None else f"{kind.value}: {token!r}"
        super().__init__(_located(message, line_num))


class AssemblerErrorKind(enum.Enum):
    UNKNOWN_LABEL = "Unknown label"
    MULTIPLE_ASSIGNMENT = "Label is defined more than once"
    ADDRESS_TOO_LARGE = "Address is too large (> 99)"
    NUMBER_TOO_LARGE = "Number is too large (> 999)"
    TOO_MANY_INSTRUCTIONS = "Too many instructions (maximum of 100)"


class AssemblerError(LMincError):
    """Raised when parsed assembly cannot be turned into memory."""

    def __init__(self, kind: AssemblerErrorKind, line_num: int = 0,
                 instruction_num: int = 0, token: Optional[str] = None):
        self.kind = kind
        self.line_num = line_num
        self.instruction_num = instruction_num
        self.token = token
        message = kind.value if token is None else f"{kind.value}: {token!r}"
        super().__init__(_located(message, line_num, instruction_num))


class NumberAssemblerErrorKind(enum.Enum):
    TOO_MANY_NUMBERS = "Too many numbers (maximum of 100)"
    INVALID_NUMBER = "Invalid number"
    NUMBER_TOO_LARGE = "Number is too large (> 999)"


class NumberAssemblerError(LMincError):
    """Raised when a number listing cannot be turned into memory."""

    def __init__(self, kind: NumberAssemblerErrorKind, line_num: int = 0,
                 token: Optional[str] = None):
        self.kind = kind
        self.line_num = line_num
        self.token = token
        message = kind.value if token is None else f"{kind.value}: {token!r}"
        super().__init__(_located(message, line_num))


# ──────────────────────────────────────────────
# Binary format
# ──────────────────────────────────────────────

class LoadErrorKind(enum.Enum):
    BUFFER_TOO_LARGE = "The buffer is too large ({size} bytes > {limit} bytes)"
    FILE_TOO_LARGE = "The file is too large ({size} bytes > {limit} bytes)"
    INVALID_NUMBER = "A number in the decoded buffer is too large (index {index}, {value} > 999)"


class LoadError(LMincError):
    """Raised when a packed memory image cannot be decoded."""

    def __init__(self, kind: LoadErrorKind, size: int = 0, limit: int = 0,
                 index: int = 0, value: int = 0):
        self.kind = kind
        self.size = size
        self.limit = limit
        self.index = index
        self.value = value
        super().__init__(kind.value.format(size=size, limit=limit, index=index, value=value))


# ──────────────────────────────────────────────
# Running
# ──────────────────────────────────────────────

class ComputerErrorKind(enum.Enum):
    UNEXPECTED_INPUT = "The computer was not waiting for an input, but received one"
    NO_OUTPUT = "The computer was not waiting to output, but one was requested"
    UNEXPECTED_CHAR_INPUT = "The computer was not waiting for a char input, but received one"
    NO_CHAR_OUTPUT = "The computer was not waiting to output a char, but one was requested"


class ComputerError(LMincError):
    """Raised when a caller drives the computer's I/O out of turn."""

    def __init__(self, kind: ComputerErrorKind, state=None):
        self.kind = kind
        self.state = state
        message = kind.value if state is None else f"{kind.value} (computer {state})"
        super().__init__(message)


class RunnerErrorKind(enum.Enum):
    INVALID_NUMBER = "Invalid number inputted"
    NUMBER_TOO_LARGE = "Inputted number is too large (> 999)"
    MULTIPLE_CHARACTERS = "Multiple characters inputted"
    INVALID_INPUT_CHARACTER = "Invalid input character"
    END_OF_INPUT = "Input ended while the computer was waiting for a value"


class RunnerError(LMincError):
    """Raised by the interactive runner on bad console input."""

    def __init__(self, kind: RunnerErrorKind, token: Optional[str] = None):
        self.kind = kind
        self.token = token
        message = kind.value if token is None else f"{kind.value}: {token!r}"
        super().__init__(message)


# ──────────────────────────────────────────────
# Test scripts
# ──────────────────────────────────────────────

class TestErrorKind(enum.Enum):
    __test__ = False

    RUN_OUT_OF_CYCLES = "Ran out of cycles"
    RUN_OUT_OF_INPUTS = "Requested more inputs than expected"
    RUN_OUT_OF_OUTPUTS = "Gave more outputs than expected (output: {got})"
    RUN_OUT_OF_CHAR_INPUTS = "Requested more char inputs than expected"
    RUN_OUT_OF_CHAR_OUTPUTS = "Gave more char outputs than expected (output: {got}{got_char})"
    DIFFERENT_OUTPUT = "Different output than expected (expected {expected}, got {got})"
    DIFFERENT_CHAR_OUTPUT = ("Different char output than expected "
                             "(expected {expected}{expected_char}, got {got}{got_char})")
    EXPECTED_MORE_INPUTS = "Expected more inputs"
    EXPECTED_MORE_OUTPUTS = "Expected more outputs"
    EXPECTED_MORE_CHAR_INPUTS = "Expected more char inputs"
    EXPECTED_MORE_CHAR_OUTPUTS = "Expected more char outputs"
    COMPUTER_ERROR = "Computer error: the computer {state}"


def _char_suffix(value: Optional[int], is_char: bool) -> str:
    if value is None or not is_char:
        return ""
    return f" = {chr(value)!r}"


class TestError(LMincError):
    """Raised when a program diverges from its test script."""

    __test__ = False

    def __init__(self, kind: TestErrorKind, test_name: Optional[str] = None, cycles: int = 0,
                 expected: Optional[int] = None, got: Optional[int] = None, state=None):
        self.kind = kind
        self.test_name = test_name
        self.cycles = cycles
        self.expected = expected
        self.got = got
        self.state = state
        is_char = kind in (TestErrorKind.RUN_OUT_OF_CHAR_OUTPUTS, TestErrorKind.DIFFERENT_CHAR_OUTPUT)
        message = kind.value.format(
            expected=expected, got=got, state=state,
            expected_char=_char_suffix(expected, is_char),
            got_char=_char_suffix(got, is_char),
        )
        where = f"after {cycles} cycles"
        if test_name:
            where = f"test {test_name!r}, {where}"
        super().__init__(f"{message} ({where})")


class CSVErrorKind(enum.Enum):
    NUMBER_OF_SECTIONS = "Wrong number of sections ({count}, should be {expected})"
    INVALID_MAX_CYCLES = "Invalid maximum number of cycles: {token!r}"
    INVALID_INPUT_NUMBER = "Invalid input number: {token!r}"
    INPUT_TOO_LARGE = "Input number too large ({token} should be < 1000)"
    INVALID_OUTPUT_NUMBER = "Invalid output number: {token!r}"
    OUTPUT_TOO_LARGE = "Output number too large ({token} should be < 1000)"
    INVALID_CHAR_INPUT = "Invalid input character ({token!r})"
    INVALID_CHAR_OUTPUT = "Invalid output character ({token!r})"


class CSVError(LMincError):
    """Raised when a line of a test script cannot be read."""

    def __init__(self, kind: CSVErrorKind, line_num: int = 0, token: Optional[str] = None,
                 count: int = 0, expected: str = ""):
        self.kind = kind
        self.line_num = line_num
        self.token = token
        self.count = count
        super().__init__(_located(kind.value.format(token=token, count=count, expected=expected),
                                  line_num))

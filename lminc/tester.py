"""
Scripted I/O test harness.

A TestCase lists the inputs a program should be fed, the outputs it should
produce and a cycle budget. TestCase.run() drives a Computer one step at a
time, feeding inputs and checking outputs as the program asks for them, and
raises TestError at the first divergence.

Test script format (one test per line, ';'-separated):

    name;inputs;outputs;max_cycles
    name;inputs;outputs;char_inputs;char_outputs;max_cycles     (extended only)

inputs and outputs are ','-separated decimal numbers (0-999), empty entries
ignored. char_inputs and char_outputs are literal strings, one character per
value. An empty name means the test is unnamed. Blank lines are skipped.

    fibonacci;;1,2,3,5,8,13,21,34,55,89,144;1000
    add;4,5;9;10
"""

from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, Iterator, List, Optional

from .computer import Computer, State
from .errors import (
    CSVError, CSVErrorKind, TestError, TestErrorKind as Kind,
)
from .num3 import MAX_VALUE, ThreeDigitNumber

__all__ = ['TestCase', 'TestReport', 'run_tests']

log = logging.getLogger(__name__)

SECTION_SEPARATOR = ';'
VALUE_SEPARATOR = ','


@dataclass
class TestCase:
    """One scripted run of a program. Each TestCase is consumed by run()."""

    __test__ = False

    name: Optional[str] = None
    max_cycles: int = 0
    inputs: Deque[ThreeDigitNumber] = field(default_factory=deque)
    outputs: Deque[ThreeDigitNumber] = field(default_factory=deque)
    char_inputs: Deque[ThreeDigitNumber] = field(default_factory=deque)
    char_outputs: Deque[ThreeDigitNumber] = field(default_factory=deque)

    @classmethod
    def create(cls, name: Optional[str], inputs: Iterable[int], outputs: Iterable[int],
               max_cycles: int, char_inputs: str = "", char_outputs: str = "") -> 'TestCase':
        """Build a TestCase from plain values; chars are given as strings."""
        return cls(
            name=name,
            max_cycles=max_cycles,
            inputs=deque(ThreeDigitNumber(v) for v in inputs),
            outputs=deque(ThreeDigitNumber(v) for v in outputs),
            char_inputs=deque(ThreeDigitNumber(ord(c)) for c in char_inputs),
            char_outputs=deque(ThreeDigitNumber(ord(c)) for c in char_outputs),
        )

    # ──────────────────────────────────────────────
    # Running
    # ──────────────────────────────────────────────

    def _error(self, kind: Kind, cycles: int, **context) -> TestError:
        return TestError(kind, self.name, cycles, **context)

    def step(self, computer: Computer, cycles: int) -> bool:
        """Run one step of the computer against the script.

        Returns True when the program has finished (halted or ran off the end).
        """
        if cycles == self.max_cycles:
            raise self._error(Kind.RUN_OUT_OF_CYCLES, cycles)

        state = computer.step()

        if state is State.RUNNING:
            return False

        if state is State.AWAITING_INPUT:
            if not self.inputs:
                raise self._error(Kind.RUN_OUT_OF_INPUTS, cycles)
            computer.input(self.inputs.popleft())
            return False

        if state is State.AWAITING_OUTPUT:
            output = computer.output()
            if not self.outputs:
                raise self._error(Kind.RUN_OUT_OF_OUTPUTS, cycles, got=int(output))
            expected = self.outputs.popleft()
            if output != expected:
                raise self._error(Kind.DIFFERENT_OUTPUT, cycles,
                                  expected=int(expected), got=int(output))
            return False

        if state is State.AWAITING_CHAR_INPUT:
            if not self.char_inputs:
                raise self._error(Kind.RUN_OUT_OF_CHAR_INPUTS, cycles)
            computer.input_char(self.char_inputs.popleft())
            return False

        if state is State.AWAITING_CHAR_OUTPUT:
            output = computer.output_char()
            if not self.char_outputs:
                raise self._error(Kind.RUN_OUT_OF_CHAR_OUTPUTS, cycles, got=int(output))
            expected = self.char_outputs.popleft()
            if output != expected:
                raise self._error(Kind.DIFFERENT_CHAR_OUTPUT, cycles,
                                  expected=int(expected), got=int(output))
            return False

        if state in (State.HALTED, State.REACHED_END):
            return True

        raise self._error(Kind.COMPUTER_ERROR, cycles, state=state)

    def run(self, computer: Computer) -> int:
        """Run the program to completion against the script.

        Returns the number of cycles used. Raises TestError on any divergence,
        including inputs or outputs the program never consumed.
        """
        cycles = 0
        done = False
        while not done:
            done = self.step(computer, cycles)
            cycles += 1

        if self.inputs:
            raise self._error(Kind.EXPECTED_MORE_INPUTS, cycles)
        if self.outputs:
            raise self._error(Kind.EXPECTED_MORE_OUTPUTS, cycles)
        if self.char_inputs:
            raise self._error(Kind.EXPECTED_MORE_CHAR_INPUTS, cycles)
        if self.char_outputs:
            raise self._error(Kind.EXPECTED_MORE_CHAR_OUTPUTS, cycles)
        return cycles

    # ──────────────────────────────────────────────
    # Test scripts
    # ──────────────────────────────────────────────

    @classmethod
    def from_csv_line(cls, line: str, extended: bool = False, line_num: int = 0) -> 'TestCase':
        """Parse one line of a test script."""
        sections = line.rstrip('\r\n').split(SECTION_SEPARATOR)
        allowed = (4, 6) if extended else (4,)
        if len(sections) not in allowed:
            raise CSVError(CSVErrorKind.NUMBER_OF_SECTIONS, line_num, count=len(sections),
                           expected=" or ".join(str(n) for n in allowed))

        name = sections[0] or None
        inputs = _numbers(sections[1], CSVErrorKind.INVALID_INPUT_NUMBER,
                          CSVErrorKind.INPUT_TOO_LARGE, line_num)
        outputs = _numbers(sections[2], CSVErrorKind.INVALID_OUTPUT_NUMBER,
                           CSVErrorKind.OUTPUT_TOO_LARGE, line_num)
        if len(sections) == 6:
            char_inputs = _chars(sections[3], CSVErrorKind.INVALID_CHAR_INPUT, line_num)
            char_outputs = _chars(sections[4], CSVErrorKind.INVALID_CHAR_OUTPUT, line_num)
        else:
            char_inputs, char_outputs = deque(), deque()

        max_text = sections[-1].strip()
        if not (max_text.isascii() and max_text.isdigit()):
            raise CSVError(CSVErrorKind.INVALID_MAX_CYCLES, line_num, token=sections[-1])

        return cls(name=name, max_cycles=int(max_text), inputs=inputs, outputs=outputs,
                   char_inputs=char_inputs, char_outputs=char_outputs)

    @classmethod
    def from_csv(cls, text: str, extended: bool = False) -> Iterator['TestCase']:
        """Yield one TestCase per non-blank line of a test script."""
        for line_num, line in enumerate(text.splitlines(), 1):
            if not line.strip():
                continue
            yield cls.from_csv_line(line, extended=extended, line_num=line_num)


def _numbers(section: str, invalid: CSVErrorKind, too_large: CSVErrorKind,
             line_num: int) -> Deque[ThreeDigitNumber]:
    values: Deque[ThreeDigitNumber] = deque()
    for entry in section.split(VALUE_SEPARATOR):
        entry = entry.strip()
        if not entry:
            continue
        if not (entry.isascii() and entry.isdigit()):
            raise CSVError(invalid, line_num, token=entry)
        if int(entry) > MAX_VALUE:
            raise CSVError(too_large, line_num, token=entry)
        values.append(ThreeDigitNumber(int(entry)))
    return values


def _chars(section: str, invalid: CSVErrorKind, line_num: int) -> Deque[ThreeDigitNumber]:
    values: Deque[ThreeDigitNumber] = deque()
    for char in section:
        if ord(char) > MAX_VALUE:
            raise CSVError(invalid, line_num, token=char)
        values.append(ThreeDigitNumber(ord(char)))
    return values


# ──────────────────────────────────────────────
# Running a whole script
# ──────────────────────────────────────────────

@dataclass
class TestReport:
    """Outcome of one TestCase."""

    __test__ = False

    name: Optional[str]
    passed: bool
    cycles: int
    state: State
    error: Optional[TestError] = None


def run_tests(tests: Iterable[TestCase], computer: Computer) -> List[TestReport]:
    """Run every test against the same program.

    The computer is reset and its memory restored to the starting image before
    each test, so programs that store into memory see the same image every run.
    """
    image = computer.memory.copy()
    reports: List[TestReport] = []
    for test in tests:
        computer.load(image.copy())
        try:
            cycles = test.run(computer)
        except TestError as e:
            log.info("Test %r failed: %s", test.name, e)
            reports.append(TestReport(test.name, False, e.cycles, computer.state, e))
        else:
            log.info("Test %r passed in %d cycles", test.name, cycles)
            reports.append(TestReport(test.name, True, cycles, computer.state))
    return reports

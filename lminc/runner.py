"""
Interactive console runner.

Drives a Computer from a text stream: numbers are read one per line at a
"> " prompt ("(i) > " when the extended instruction set is enabled), chars
at a "(c) > " prompt. Numeric outputs are printed one per line; char outputs
are printed inline, and an open char line is ended with a newline before the
next prompt or numeric output.
"""

from __future__ import annotations
import logging
import sys
from typing import Optional, TextIO

from .computer import Computer, State
from .errors import RunnerError, RunnerErrorKind as Kind
from .num3 import MAX_VALUE

__all__ = ['StdioRunner']

log = logging.getLogger(__name__)

NUMBER_PROMPT = "> "
EXTENDED_NUMBER_PROMPT = "(i) > "
CHAR_PROMPT = "(c) > "


class StdioRunner:
    """Run a Computer against a pair of text streams (stdin / stdout by default).

    Usage:
        runner = StdioRunner(Computer(memory))
        final_state = runner.run()
    """

    def __init__(self, computer: Computer, stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None, extended: Optional[bool] = None):
        self.computer = computer
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.extended = computer.extended if extended is None else extended
        self._mid_char_line = False

    def _write(self, text: str):
        self.stdout.write(text)
        self.stdout.flush()

    def _end_char_line(self):
        if self._mid_char_line:
            self._write("\n")
            self._mid_char_line = False

    def _prompt(self, prompt: str) -> str:
        self._write(prompt)
        line = self.stdin.readline()
        if not line:
            raise RunnerError(Kind.END_OF_INPUT)
        return line

    def _read_number(self) -> int:
        prompt = EXTENDED_NUMBER_PROMPT if self.extended else NUMBER_PROMPT
        text = self._prompt(prompt).strip()
        if not (text.isascii() and text.isdigit()):
            raise RunnerError(Kind.INVALID_NUMBER, text)
        if int(text) > MAX_VALUE:
            raise RunnerError(Kind.NUMBER_TOO_LARGE, text)
        return int(text)

    def _read_char(self) -> int:
        line = self._prompt(CHAR_PROMPT)
        # A bare newline inputs the newline character itself.
        char, rest = line[0], line[1:]
        if rest.strip():
            raise RunnerError(Kind.MULTIPLE_CHARACTERS, line.rstrip('\r\n'))
        if ord(char) > MAX_VALUE:
            raise RunnerError(Kind.INVALID_INPUT_CHARACTER, char)
        return ord(char)

    def step(self) -> State:
        """Step the computer once, servicing any I/O request on the console."""
        state = self.computer.step()

        if state is State.AWAITING_INPUT:
            self._end_char_line()
            self.computer.input(self._read_number())
        elif state is State.AWAITING_OUTPUT:
            self._end_char_line()
            self._write(f"{int(self.computer.output())}\n")
        elif state is State.AWAITING_CHAR_INPUT:
            self._end_char_line()
            self.computer.input_char(self._read_char())
        elif state is State.AWAITING_CHAR_OUTPUT:
            char = chr(self.computer.output_char())
            self._write(char)
            self._mid_char_line = char != "\n"

        return self.computer.state

    def run(self) -> State:
        """Run until the computer halts, runs off the end or hits an invalid word."""
        while self.step() is State.RUNNING:
            pass
        self._end_char_line()
        log.info("Program %s after %d cycles", self.computer.state, self.computer.cycles)
        return self.computer.state

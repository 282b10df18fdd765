"""
LMC virtual machine: a fetch-execute state machine over a 100-word memory.

Execution model (one call to step()):
  1. If the computer is not RUNNING, return the current state unchanged
  2. If the program counter has run off the end (== 100) -> REACHED_END
  3. Fetch the word at the program counter, split it into opcode and address
  4. Execute: arithmetic, load/store, branch, or an I/O request
  5. Advance the program counter unless a branch was taken or the
     instruction was invalid

I/O is cooperative. An IN / OUT (or INA / OTA) instruction only moves the
computer into an AWAITING_* state; the caller then supplies the value with
input() / input_char() or collects it with output() / output_char(), which
puts the computer back into RUNNING.

States:
  RUNNING              - ready to execute the next instruction
  AWAITING_INPUT       - waiting for input()
  AWAITING_OUTPUT      - waiting for output()
  AWAITING_CHAR_INPUT  - waiting for input_char()   (extended mode)
  AWAITING_CHAR_OUTPUT - waiting for output_char()  (extended mode)
  HALTED               - executed HLT              (terminal)
  REACHED_END          - ran past address 99       (terminal)
  INVALID_INSTRUCTION  - fetched an undefined word (terminal)
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Union

from .assembly import disassemble
from .errors import ComputerError, ComputerErrorKind
from .memory import MEMORY_SIZE, Memory
from .num3 import ThreeDigitNumber, ZERO

__all__ = ['State', 'Computer']

log = logging.getLogger(__name__)


class State(Enum):
    RUNNING = 'is running'
    AWAITING_INPUT = 'is awaiting input'
    AWAITING_OUTPUT = 'is awaiting output'
    AWAITING_CHAR_INPUT = 'is awaiting char input'
    AWAITING_CHAR_OUTPUT = 'is awaiting char output'
    HALTED = 'has halted'
    REACHED_END = 'has reached the end of memory'
    INVALID_INSTRUCTION = 'has reached an invalid instruction'

    def __str__(self) -> str:
        return self.value

    @property
    def is_terminal(self) -> bool:
        return self in (State.HALTED, State.REACHED_END, State.INVALID_INSTRUCTION)


# I/O sub-codes of the 9xx instructions
IO_INPUT = 1
IO_OUTPUT = 2
IO_CHAR_INPUT = 11
IO_CHAR_OUTPUT = 12
EXTENDED_MODE_WORD = 10


class Computer:
    """Little Man Computer.

    Usage:
        computer = Computer(assemble(source))
        while computer.step() is not State.HALTED:
            if computer.state is State.AWAITING_OUTPUT:
                print(computer.output())

    ``extended`` enables the extended instruction set (EXT / INA / OTA). It is a
    capability of the machine; a program still has to execute EXT before the
    char I/O instructions become valid.
    """

    def __init__(self, memory: Union[Memory, Iterable[int], None] = None, extended: bool = False):
        if memory is None:
            memory = Memory()
        elif not isinstance(memory, Memory):
            memory = Memory(memory)
        self.memory: Memory = memory
        self.extended = extended

        self.state = State.RUNNING
        self.counter = 0                    # Program counter, 0..=100
        self.register: ThreeDigitNumber = ZERO
        self.negative_flag = False
        self.extended_mode_flag = False
        self.cycles = 0                     # Instructions fetched since reset

        # Trace output
        self._trace = False
        self._trace_output: List[str] = []

        # Instruction dispatch table keyed by the first digit of the word
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> State:
        """Execute one instruction and return the resulting state."""
        if self.state is not State.RUNNING:
            return self.state

        if self.counter == MEMORY_SIZE:
            self.state = State.REACHED_END
            log.debug("Reached the end of memory")
            return self.state

        pc = self.counter
        word = self.memory[pc]
        opcode, address = divmod(int(word), 100)
        self.cycles += 1

        if self._trace:
            self._trace_output.append(
                f"{pc:02d}: {int(word):03d}  {disassemble(word, self.extended_mode_flag):<7} "
                f"ACC={int(self.register):03d} NEG={int(self.negative_flag)}"
            )
        if log.isEnabledFor(logging.DEBUG):
            log.debug("%02d: %03d %s", pc, word, disassemble(word, self.extended_mode_flag))

        handler = self._dispatch.get(opcode)
        if handler is None:
            self.state = State.INVALID_INSTRUCTION
        elif handler(address):
            self.counter += 1

        if self.state.is_terminal:
            log.debug("Computer %s at %02d", self.state, pc)
        return self.state

    def run(self) -> State:
        """Step until the computer leaves the RUNNING state."""
        while self.step() is State.RUNNING:
            pass
        return self.state

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    #
    # Handler signature: handler(address) -> advance
    # A handler returns True when the program counter should move on to the
    # next word, False when it has set the counter itself (taken branch) or
    # the instruction was invalid.

    def _build_dispatch(self) -> Dict[int, Callable[[int], bool]]:
        return {
            0: self._op_halt,
            1: self._op_add,
            2: self._op_sub,
            3: self._op_store,
            5: self._op_load,
            6: self._op_branch,
            7: self._op_branch_zero,
            8: self._op_branch_positive,
            9: self._op_io,
        }

    def _op_halt(self, address: int) -> bool:
        if self.extended and address == EXTENDED_MODE_WORD:
            self.extended_mode_flag = True
        else:
            self.state = State.HALTED
        return True

    def _op_add(self, address: int) -> bool:
        self.register = self.register + self.memory[address]
        return True

    def _op_sub(self, address: int) -> bool:
        self.register, self.negative_flag = self.register.subtract(self.memory[address])
        return True

    def _op_store(self, address: int) -> bool:
        self.memory[address] = self.register
        return True

    def _op_load(self, address: int) -> bool:
        self.register = self.memory[address]
        return True

    def _op_branch(self, address: int) -> bool:
        self.counter = address
        return False

    def _op_branch_zero(self, address: int) -> bool:
        if self.register == 0:
            return self._op_branch(address)
        return True

    def _op_branch_positive(self, address: int) -> bool:
        if not self.negative_flag:
            return self._op_branch(address)
        return True

    def _op_io(self, address: int) -> bool:
        if address == IO_INPUT:
            self.state = State.AWAITING_INPUT
        elif address == IO_OUTPUT:
            self.state = State.AWAITING_OUTPUT
        elif address == IO_CHAR_INPUT and self.extended_mode_flag:
            self.state = State.AWAITING_CHAR_INPUT
        elif address == IO_CHAR_OUTPUT and self.extended_mode_flag:
            self.state = State.AWAITING_CHAR_OUTPUT
        else:
            self.state = State.INVALID_INSTRUCTION
            return False
        return True

    # ══════════════════════════════════════════════
    # I/O
    # ══════════════════════════════════════════════

    def input(self, value: int):
        """Supply the number an IN instruction is waiting for."""
        if self.state is not State.AWAITING_INPUT:
            raise ComputerError(ComputerErrorKind.UNEXPECTED_INPUT, self.state)
        self.register = ThreeDigitNumber(value)
        self.state = State.RUNNING

    def output(self) -> ThreeDigitNumber:
        """Collect the number an OUT instruction is offering."""
        if self.state is not State.AWAITING_OUTPUT:
            raise ComputerError(ComputerErrorKind.NO_OUTPUT, self.state)
        self.state = State.RUNNING
        return self.register

    def input_char(self, value: int):
        """Supply the character code an INA instruction is waiting for."""
        if self.state is not State.AWAITING_CHAR_INPUT:
            raise ComputerError(ComputerErrorKind.UNEXPECTED_CHAR_INPUT, self.state)
        self.register = ThreeDigitNumber(value)
        self.state = State.RUNNING

    def output_char(self) -> ThreeDigitNumber:
        """Collect the character code an OTA instruction is offering."""
        if self.state is not State.AWAITING_CHAR_OUTPUT:
            raise ComputerError(ComputerErrorKind.NO_CHAR_OUTPUT, self.state)
        self.state = State.RUNNING
        return self.register

    # ══════════════════════════════════════════════
    # Loading / Reset
    # ══════════════════════════════════════════════

    def load(self, memory: Union[Memory, Iterable[int]]):
        """Replace the memory image and reset the computer."""
        self.memory = memory if isinstance(memory, Memory) else Memory(memory)
        self.reset()

    def reset(self):
        """Reset the counter, register, flags and state. Memory is kept."""
        self.state = State.RUNNING
        self.counter = 0
        self.register = ZERO
        self.negative_flag = False
        self.extended_mode_flag = False
        self.cycles = 0
        self._trace_output.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Enable the per-instruction trace."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def __repr__(self) -> str:
        return (f"Computer(state={self.state.name}, counter={self.counter}, "
                f"register={int(self.register)}, negative={self.negative_flag})")


#!/usr/bin/env python3
"""
lmc - Little Minion Computer toolkit
=====================================

One CLI for everything:
    lmc assemble          - Assemble LMC assembly into a binary image
    lmc assemble-numbers  - Build a binary image from a list of numbers
    lmc run               - Run a binary image
    lmc run-assembly      - Assemble and run an assembly file
    lmc run-numbers       - Build and run a number file
    lmc mem-dump          - Print the memory held in a binary image
    lmc test              - Run the tests in a test script against a binary image

Usage:
    python lmc.py <command> [options]
    python lmc.py --help
    python lmc.py <command> --help

Examples:
    python lmc.py assemble examples/fib.txt fib.bin
    python lmc.py run fib.bin
    python lmc.py --extended run-assembly examples/hello.txt
    python lmc.py mem-dump fib.bin --disassemble
    python lmc.py test examples/fib_test.csv fib.bin
"""

import argparse
import logging
import sys
from pathlib import Path

from lminc import __version__
from lminc.assembler import Assembler
from lminc.assembly import disassemble
from lminc.computer import Computer
from lminc.errors import LMincError
from lminc.file import load, read_text, save
from lminc.log import setup_logging
from lminc.memory import Memory
from lminc.number_assembler import assemble_numbers
from lminc.runner import StdioRunner
from lminc.tester import TestCase, run_tests


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lmc",
        description="Little Minion Computer toolkit - assemble, run, dump and test LMC programs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  assemble          Assemble LMC assembly into a binary image
  assemble-numbers  Build a binary image from one number per line
  run               Run a binary image on the console
  run-assembly      Assemble an assembly file and run it
  run-numbers       Build a number file and run it
  mem-dump          Print the memory held in a binary image
  test              Run a test script against a binary image
""",
    )
    parser.add_argument("--version", action="version", version=f"lmc {__version__}")
    parser.add_argument("--extended", action="store_true",
                        help="Enable the extended instruction set (EXT, INA, OTA)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress (-v) or every executed instruction (-vv)")
    parser.add_argument("--log-file", default=None, help="Also write a DEBUG log to this file")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── assemble ─────────────────────────────────────────────────────────
    p_asm = sub.add_parser("assemble", help="Assemble LMC assembly into a binary image")
    p_asm.add_argument("input", help="Input assembly file")
    p_asm.add_argument("output", help="Output binary file")
    p_asm.add_argument("--listing", action="store_true", help="Print listing to stdout")

    # ── assemble-numbers ─────────────────────────────────────────────────
    p_num = sub.add_parser("assemble-numbers", help="Build a binary image from a number file")
    p_num.add_argument("input", help="Input number file")
    p_num.add_argument("output", help="Output binary file")

    # ── run / run-assembly / run-numbers ─────────────────────────────────
    for name, what in (("run", "binary image"), ("run-assembly", "assembly file"),
                       ("run-numbers", "number file")):
        p_run = sub.add_parser(name, help=f"Run a {what} on the console")
        p_run.add_argument("input", help=f"Input {what}")
        p_run.add_argument("--trace", action="store_true",
                           help="Print an instruction trace to stderr when the program stops")

    # ── mem-dump ─────────────────────────────────────────────────────────
    p_dump = sub.add_parser("mem-dump", help="Print the memory held in a binary image")
    p_dump.add_argument("input", help="Input binary file")
    p_dump.add_argument("--disassemble", action="store_true",
                        help="Print one instruction per used address instead of a word grid")

    # ── test ─────────────────────────────────────────────────────────────
    p_test = sub.add_parser("test", help="Run a test script against a binary image")
    p_test.add_argument("tests", help="Test script (name;inputs;outputs;max_cycles per line)")
    p_test.add_argument("input", help="Binary image to test")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    setup_logging(level=level, log_file=args.log_file)

    handler = COMMANDS[args.command]
    try:
        return handler(args) or 0
    except LMincError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 1


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

def _check_distinct(args, what: str) -> bool:
    if Path(args.input).resolve() == Path(args.output).resolve():
        print(f"Error: cannot overwrite input {what} with output binary", file=sys.stderr)
        return False
    return True


def _run(memory: Memory, args) -> int:
    computer = Computer(memory, extended=args.extended)
    computer.enable_trace(args.trace)
    try:
        StdioRunner(computer).run()
    finally:
        if args.trace:
            print(computer.get_trace(), file=sys.stderr)
    return 0


# ── assemble ─────────────────────────────────────────────────────────────
def cmd_assemble(args):
    if not _check_distinct(args, "assembly"):
        return 1
    asm = Assembler(extended=args.extended)
    memory = asm.assemble(read_text(args.input))
    size = save(args.output, memory)
    if args.listing:
        print(asm.get_listing())
    print(f"Assembled {memory.used()} words -> {args.output} ({size} bytes)")
    return 0


# ── assemble-numbers ─────────────────────────────────────────────────────
def cmd_assemble_numbers(args):
    if not _check_distinct(args, "numbers"):
        return 1
    memory = assemble_numbers(read_text(args.input))
    size = save(args.output, memory)
    print(f"Assembled {memory.used()} words -> {args.output} ({size} bytes)")
    return 0


# ── run ──────────────────────────────────────────────────────────────────
def cmd_run(args):
    return _run(load(args.input), args)


def cmd_run_assembly(args):
    memory = Assembler(extended=args.extended).assemble(read_text(args.input))
    return _run(memory, args)


def cmd_run_numbers(args):
    return _run(assemble_numbers(read_text(args.input)), args)


# ── mem-dump ─────────────────────────────────────────────────────────────
def cmd_mem_dump(args):
    memory = load(args.input)
    if not args.disassemble:
        print(memory.dump())
        return 0
    for address in range(memory.used()):
        word = memory[address]
        print(f"{address:02d}: {int(word):03d}  {disassemble(word, args.extended)}")
    return 0


# ── test ─────────────────────────────────────────────────────────────────
def cmd_test(args):
    tests = list(TestCase.from_csv(read_text(args.tests), extended=args.extended))
    computer = Computer(load(args.input), extended=args.extended)

    failed = 0
    for report in run_tests(tests, computer):
        print(f"Running test '{report.name}':" if report.name else "Running test:")
        if report.passed:
            print(f"  Test ran successfully.\n  Program {report.state}")
        else:
            failed += 1
            print(f"  Error: {report.error}")
        print(f"  Program stopped after {report.cycles} fetch-execute cycles.\n")

    print(f"{len(tests) - failed} tests ran successfully.\n{failed} tests failed.")
    if failed:
        print("Some tests failed!")
        return 1
    print("All tests run successfully!")
    return 0


COMMANDS = {
    "assemble": cmd_assemble,
    "assemble-numbers": cmd_assemble_numbers,
    "run": cmd_run,
    "run-assembly": cmd_run_assembly,
    "run-numbers": cmd_run_numbers,
    "mem-dump": cmd_mem_dump,
    "test": cmd_test,
}


if __name__ == "__main__":
    sys.exit(main())

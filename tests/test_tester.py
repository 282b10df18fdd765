"""
Test harness tests: scripted runs, every TestError kind, and the CSV format.
"""
from pathlib import Path

import pytest

from lminc.assembler import assemble
from lminc.computer import Computer, State
from lminc.errors import CSVError, CSVErrorKind, TestError, TestErrorKind
from lminc.tester import TestCase, run_tests

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

FIB_OUTPUTS = [1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144]


def _example(name: str, extended: bool = False) -> Computer:
    source = (EXAMPLES / name).read_text()
    return Computer(assemble(source, extended=extended), extended=extended)


def _fails(test: TestCase, computer: Computer) -> TestError:
    with pytest.raises(TestError) as exc:
        test.run(computer)
    return exc.value


class TestRun:
    def test_fibonacci_passes(self):
        test = TestCase.create("fib", [], FIB_OUTPUTS, 1000)
        assert test.run(_example("fib.txt")) == 122

    def test_exact_cycle_budget(self):
        test = TestCase.create("fib", [], FIB_OUTPUTS, 122)
        assert test.run(_example("fib.txt")) == 122

    def test_run_out_of_cycles(self):
        test = TestCase.create("fib", [], FIB_OUTPUTS, 121)
        error = _fails(test, _example("fib.txt"))
        assert error.kind is TestErrorKind.RUN_OUT_OF_CYCLES
        assert error.cycles == 121
        assert error.test_name == "fib"

    def test_different_output(self):
        outputs = list(FIB_OUTPUTS)
        outputs[3] = 4
        error = _fails(TestCase.create("fib", [], outputs, 1000), _example("fib.txt"))
        assert error.kind is TestErrorKind.DIFFERENT_OUTPUT
        assert error.expected == 4
        assert error.got == 5
        assert "expected 4, got 5" in str(error)

    def test_run_out_of_outputs(self):
        error = _fails(TestCase.create(None, [], FIB_OUTPUTS[:2], 1000), _example("fib.txt"))
        assert error.kind is TestErrorKind.RUN_OUT_OF_OUTPUTS
        assert error.got == 3
        assert error.test_name is None

    def test_expected_more_outputs(self):
        error = _fails(TestCase.create("x", [], FIB_OUTPUTS + [233], 1000), _example("fib.txt"))
        assert error.kind is TestErrorKind.EXPECTED_MORE_OUTPUTS
        assert error.cycles == 122

    def test_add(self):
        assert TestCase.create("add", [1, 2], [3], 10).run(_example("add.txt")) == 6

    def test_run_out_of_inputs(self):
        error = _fails(TestCase.create("add", [1], [3], 10), _example("add.txt"))
        assert error.kind is TestErrorKind.RUN_OUT_OF_INPUTS
        assert error.cycles == 2

    def test_expected_more_inputs(self):
        error = _fails(TestCase.create("add", [1, 2, 3], [3], 10), _example("add.txt"))
        assert error.kind is TestErrorKind.EXPECTED_MORE_INPUTS

    def test_computer_error(self):
        error = _fails(TestCase.create("bad", [], [], 10), Computer([400]))
        assert error.kind is TestErrorKind.COMPUTER_ERROR
        assert error.state is State.INVALID_INSTRUCTION
        assert error.cycles == 0

    def test_reached_end_finishes(self):
        test = TestCase.create("end", [], [], 1000)
        assert test.run(Computer([599] * 100)) == 101

    def test_zero_budget(self):
        error = _fails(TestCase.create("none", [], [], 0), Computer())
        assert error.kind is TestErrorKind.RUN_OUT_OF_CYCLES
        assert error.cycles == 0


class TestCharIO:
    def test_hello(self):
        test = TestCase.create("hello", [], [], 100, char_outputs="Hi!")
        assert test.run(_example("hello.txt", extended=True)) == 8

    def test_different_char_output(self):
        test = TestCase.create("hello", [], [], 100, char_outputs="Ho!")
        error = _fails(test, _example("hello.txt", extended=True))
        assert error.kind is TestErrorKind.DIFFERENT_CHAR_OUTPUT
        assert error.expected == ord("o")
        assert error.got == ord("i")
        assert "'i'" in str(error)

    def test_run_out_of_char_outputs(self):
        test = TestCase.create("hello", [], [], 100, char_outputs="H")
        error = _fails(test, _example("hello.txt", extended=True))
        assert error.kind is TestErrorKind.RUN_OUT_OF_CHAR_OUTPUTS
        assert error.got == ord("i")

    def test_expected_more_char_outputs(self):
        test = TestCase.create("hello", [], [], 100, char_outputs="Hi!!")
        error = _fails(test, _example("hello.txt", extended=True))
        assert error.kind is TestErrorKind.EXPECTED_MORE_CHAR_OUTPUTS

    def test_echo(self):
        test = TestCase.create("echo", [], [], 100, char_inputs="ok.", char_outputs="ok.")
        assert test.run(_example("echo.txt", extended=True)) == 16

    def test_run_out_of_char_inputs(self):
        test = TestCase.create("echo", [], [], 100, char_inputs="ok", char_outputs="ok")
        error = _fails(test, _example("echo.txt", extended=True))
        assert error.kind is TestErrorKind.RUN_OUT_OF_CHAR_INPUTS

    def test_expected_more_char_inputs(self):
        test = TestCase.create("echo", [], [], 100, char_inputs="a.b", char_outputs="a.")
        error = _fails(test, _example("echo.txt", extended=True))
        assert error.kind is TestErrorKind.EXPECTED_MORE_CHAR_INPUTS


class TestCSV:
    def test_basic_line(self):
        test = TestCase.from_csv_line("add;1,2;3;10")
        assert test.name == "add"
        assert list(test.inputs) == [1, 2]
        assert list(test.outputs) == [3]
        assert test.max_cycles == 10

    def test_empty_line(self):
        test = TestCase.from_csv_line(";;;1")
        assert test.name is None
        assert not test.inputs and not test.outputs
        assert not test.char_inputs and not test.char_outputs
        assert test.max_cycles == 1

    def test_empty_entries_ignored(self):
        test = TestCase.from_csv_line("x;1,,2,;,3;5")
        assert list(test.inputs) == [1, 2]
        assert list(test.outputs) == [3]

    def test_extended_line(self):
        test = TestCase.from_csv_line("greet;;;ab;Hi!;100", extended=True)
        assert list(test.char_inputs) == [ord("a"), ord("b")]
        assert list(test.char_outputs) == [72, 105, 33]

    def test_extended_accepts_plain_line(self):
        test = TestCase.from_csv_line("add;1,2;3;10", extended=True)
        assert not test.char_outputs

    def _kind(self, line: str, extended: bool = False) -> CSVErrorKind:
        with pytest.raises(CSVError) as exc:
            TestCase.from_csv_line(line, extended=extended)
        return exc.value.kind

    def test_number_of_sections(self):
        assert self._kind("a;1;2") is CSVErrorKind.NUMBER_OF_SECTIONS
        assert self._kind("a;;;;;1") is CSVErrorKind.NUMBER_OF_SECTIONS
        assert self._kind("a;;;;1", extended=True) is CSVErrorKind.NUMBER_OF_SECTIONS

    def test_invalid_values(self):
        assert self._kind("a;x;;1") is CSVErrorKind.INVALID_INPUT_NUMBER
        assert self._kind("a;1000;;1") is CSVErrorKind.INPUT_TOO_LARGE
        assert self._kind("a;;-1;1") is CSVErrorKind.INVALID_OUTPUT_NUMBER
        assert self._kind("a;;1000;1") is CSVErrorKind.OUTPUT_TOO_LARGE
        assert self._kind("a;;;many") is CSVErrorKind.INVALID_MAX_CYCLES
        assert self._kind("a;;;") is CSVErrorKind.INVALID_MAX_CYCLES

    def test_invalid_chars(self):
        assert self._kind("a;;;世;;1", extended=True) is CSVErrorKind.INVALID_CHAR_INPUT
        assert self._kind("a;;;;世;1", extended=True) is CSVErrorKind.INVALID_CHAR_OUTPUT

    def test_from_csv_line_numbers(self):
        text = "a;;;1\n\nb;;;2\nc;x;;3\n"
        tests = TestCase.from_csv(text)
        assert next(tests).name == "a"
        assert next(tests).name == "b"
        with pytest.raises(CSVError) as exc:
            next(tests)
        assert exc.value.line_num == 4
        assert str(exc.value).startswith("Line 4: ")

    def test_example_scripts(self):
        tests = list(TestCase.from_csv((EXAMPLES / "add_test.csv").read_text()))
        assert [t.name for t in tests] == ["small", "wraps", None]


class TestRunTests:
    def test_van_eck_script(self):
        tests = TestCase.from_csv((EXAMPLES / "van_eck_test.csv").read_text())
        reports = run_tests(tests, _example("van_eck.txt"))
        assert reports[0].passed, f"{reports[0].error}"
        assert reports[0].cycles == 860

    def test_fibonacci_script(self):
        tests = TestCase.from_csv((EXAMPLES / "fib_test.csv").read_text())
        reports = run_tests(tests, _example("fib.txt"))
        assert len(reports) == 1
        assert reports[0].passed
        assert reports[0].cycles == 122
        assert reports[0].state is State.HALTED

    def test_memory_restored_between_tests(self):
        text = "first;;1,2,3,5,8,13,21,34,55,89,144;1000\nsecond;;1,2,3,5,8,13,21,34,55,89,144;1000"
        reports = run_tests(TestCase.from_csv(text), _example("fib.txt"))
        assert [r.passed for r in reports] == [True, True]

    def test_mixed_results(self):
        text = (EXAMPLES / "add_test.csv").read_text() + "broken;1,2;4;10\n"
        reports = run_tests(TestCase.from_csv(text), _example("add.txt"))
        assert [r.passed for r in reports] == [True, True, True, False]
        failed = reports[-1]
        assert failed.error.kind is TestErrorKind.DIFFERENT_OUTPUT
        assert failed.cycles == 4

    def test_extended_script(self):
        tests = TestCase.from_csv((EXAMPLES / "hello_test.csv").read_text(), extended=True)
        reports = run_tests(tests, _example("hello.txt", extended=True))
        assert reports[0].passed

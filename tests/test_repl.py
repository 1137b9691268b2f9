"""Test class InteractiveShell."""
import io

from postfix_calculator.common.settings import CalculatorSettings
from postfix_calculator.shell.repl import InteractiveShell


def run_shell(text: str, shell: InteractiveShell = None) -> tuple:
    shell = shell or InteractiveShell()
    out = io.StringIO()
    count = shell.run(io.StringIO(text), out)
    return count, out.getvalue()


def test_shell_prints_postfix_and_result() -> None:
    count, output = run_shell("2+3*4\n")
    assert count == 1
    assert output == "postfix: 2.0 3.0 4.0 * +\nresult: 14.0\n"


def test_shell_continues_after_errors() -> None:
    """A failing expression is reported and the next line is still evaluated."""
    count, output = run_shell("2@3\n3/0\n\n(2+3)*4\n")
    lines = output.splitlines()
    assert count == 3
    assert lines[0].startswith("error: UnknownOperator")
    assert lines[1] == "postfix: 3.0 0.0 /"
    assert lines[2].startswith("error: DivisionByZero")
    assert lines[-1] == "result: 20.0"


def test_shell_stops_on_quit() -> None:
    count, output = run_shell("1+1\nquit\n2+2\n")
    assert count == 1
    assert "4.0" not in output


def test_shell_prints_terminal_results() -> None:
    _, output = run_shell("factor(12)\n")
    assert output.splitlines()[-1] == "result: [2^2] * 3"


def test_shell_lenient_settings() -> None:
    shell = InteractiveShell(settings=CalculatorSettings(strict_terminal=False))
    _, output = run_shell("pify(pi) + 2\n", shell)
    assert output.splitlines()[-1] == "result: π"


def test_handle_line_skips_blank_lines() -> None:
    assert InteractiveShell().handle_line("   \n") is None

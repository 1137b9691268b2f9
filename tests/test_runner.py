"""Test class BatchRunner."""
from multiprocessing import Pipe, Process
from pathlib import Path

import pytest

from postfix_calculator.batch.runner import BatchRunner
from postfix_calculator.common.settings import CalculatorSettings


@pytest.fixture
def tmp_output_file(tmp_path: Path) -> Path:
    """Create a temporary output file path."""
    return tmp_path / "results.txt"


def dummy_run() -> None:
    pass


def test_spawn_worker_returns_process_and_pipe(tmp_output_file: Path) -> None:
    """_spawn_worker returns a started Process and the receiving end of its Pipe."""
    runner = BatchRunner(output_file=tmp_output_file)
    proc, parent_conn, line_number, expr = runner._spawn_worker("1 + 1", 1)
    payload = parent_conn.recv()
    proc.join()
    assert (line_number, expr) == (1, "1 + 1")
    assert payload["result"] == 2.0


def test_receive_reports_worker_without_payload(tmp_output_file: Path) -> None:
    """A worker that exits without sending anything is reported as an error."""
    parent_conn, child_conn = Pipe(duplex=False)
    proc = Process(target=dummy_run)
    proc.start()
    proc.join()
    child_conn.close()

    result = BatchRunner._receive((proc, parent_conn, 4, "1+1"))
    assert result.line_number == 4
    assert not result.ok
    assert "without a result" in result.error


def test_collect_finished_workers(tmp_output_file: Path) -> None:
    """_collect_finished_workers moves reported results out of the active list."""
    runner = BatchRunner(output_file=tmp_output_file)

    parent_conn, child_conn = Pipe(duplex=False)
    child_conn.send({"line_number": 1, "expression": "2 + 3", "postfix": "2.0 3.0 +", "result": 5.0, "error": None})
    child_conn.close()
    proc = Process(target=dummy_run)
    proc.start()
    proc.join()

    active_workers = [(proc, parent_conn, 1, "2 + 3")]
    finished = {}
    runner._collect_finished_workers(active_workers, finished)

    assert active_workers == []
    assert finished[1].result == 5.0


@pytest.mark.parametrize(
    "lines, expected_output",
    [
        (["2 + 3", "4 * 5"], ["2 + 3 = 5.0", "4 * 5 = 20.0"]),
        (["2 +", "3 / 0"], ["2 + -> ERROR: MissingOperand", "3 / 0 -> ERROR: DivisionByZero"]),
        (["pify(pi/2)", "2^3^2", "-3+5"], ["pify(pi/2) = (1/2)π", "2^3^2 = 64.0", "-3+5 = 2.0"]),
    ],
)
def test_run_writes_results_in_input_order(tmp_output_file: Path, lines, expected_output) -> None:
    """Run evaluates every expression and writes one line per expression, in order."""
    runner = BatchRunner(output_file=tmp_output_file, settings=CalculatorSettings(max_workers=2))
    results = runner.run(lines)

    assert [result.line_number for result in results] == list(range(1, len(lines) + 1))
    content = tmp_output_file.read_text(encoding="utf-8").splitlines()
    assert len(content) == len(expected_output)
    for line, expected in zip(content, expected_output):
        assert line.startswith(expected)


def test_run_with_no_expressions(tmp_output_file: Path) -> None:
    """An empty batch still produces an (empty) results file."""
    assert BatchRunner(output_file=tmp_output_file).run([]) == []
    assert tmp_output_file.read_text() == ""

"""Evaluate a batch of expressions using worker processes."""
from multiprocessing import Pipe, Process, cpu_count
from multiprocessing.connection import Connection, wait
from pathlib import Path
from typing import Dict, List, TextIO, Tuple

from pydantic import BaseModel, ConfigDict, Field

from postfix_calculator.batch.worker import WorkerProcess
from postfix_calculator.common.logger import logger
from postfix_calculator.common.operations import OperationResult
from postfix_calculator.common.settings import CalculatorSettings

ActiveWorker = Tuple[Process, Connection, int, str]


class BatchRunner(BaseModel):
    """
    Evaluate many expressions, one worker process per expression.

    Features:
        - Each expression gets its own process and evaluator.
        - Runs at most settings.max_workers (default: CPU count) workers at a time.
        - Writes results to disk as soon as every earlier line is done, in input order.
        - Ensures each worker is joined immediately after finishing.
    """

    model_config = ConfigDict(frozen=True)

    output_file: Path = Field(..., description="Path to write evaluation results")
    settings: CalculatorSettings = Field(default_factory=CalculatorSettings)

    def _spawn_worker(self, expr: str, line_number: int) -> ActiveWorker:
        """
        Spawn a WorkerProcess for the given expression.

        :param str expr: Expression
        :param int line_number: Line number of expression in input

        :return: Tuple of (Process, parent connection, line number, expression)
        :rtype: ActiveWorker
        """
        parent_conn, child_conn = Pipe(duplex=False)
        worker = WorkerProcess(
            conn=child_conn, expression=expr, line_number=line_number, settings=self.settings
        )
        process = Process(target=worker.run)
        process.start()
        # The child owns its end now
        child_conn.close()
        return process, parent_conn, line_number, expr

    @staticmethod
    def _receive(worker: ActiveWorker) -> OperationResult:
        proc, pipe_conn, line_number, expr = worker
        try:
            payload = pipe_conn.recv()
            result = OperationResult.model_validate(payload)
        except EOFError:
            result = OperationResult(
                expression=expr,
                line_number=line_number,
                error=f"Worker exited with code {proc.exitcode} without a result",
            )
        finally:
            pipe_conn.close()
            proc.join()
        return result

    def _collect_finished_workers(
        self, active_workers: List[ActiveWorker], finished: Dict[int, OperationResult]
    ) -> None:
        """
        Block until at least one worker has reported, then collect every finished one.

        Finished workers are removed from active_workers and their results stored
        in finished, keyed by line number.

        :param list active_workers: Running workers
        :param dict finished: Results not yet written
        """
        ready = wait([conn for _, conn, _, _ in active_workers])
        # Iterate in reverse to safely remove finished workers while iterating
        for i in reversed(range(len(active_workers))):
            if active_workers[i][1] in ready:
                result = self._receive(active_workers.pop(i))
                finished[result.line_number] = result

    @staticmethod
    def _flush_in_order(
        finished: Dict[int, OperationResult], next_line: int, f_out: TextIO, results: List[OperationResult]
    ) -> int:
        """Write every consecutive finished result starting at next_line; return the new next_line."""
        while next_line in finished:
            result = finished.pop(next_line)
            f_out.write(result.format_line() + "\n")
            results.append(result)
            next_line += 1
        f_out.flush()
        return next_line

    def run(self, expressions: List[str]) -> List[OperationResult]:
        """
        Evaluate the expressions and write one result line per expression.

        Steps:
            1. Spawn worker processes, respecting the worker limit.
            2. Collect payloads from finished workers.
            3. Write results in input order as they become available.

        :param List[str] expressions: Non-empty expressions, in input order

        :return: Results in input order
        :rtype: List[OperationResult]
        """
        results: List[OperationResult] = []
        if not expressions:
            self.output_file.write_text("", encoding="utf-8")
            return results

        max_workers = min(self.settings.max_workers or cpu_count(), len(expressions))
        logger.info(f"🚀 Evaluating {len(expressions)} expression(s) with up to {max_workers} worker(s)")

        active_workers: List[ActiveWorker] = []
        finished: Dict[int, OperationResult] = {}
        next_line = 1

        with self.output_file.open("w", encoding="utf-8") as f_out:
            for line_number, expr in enumerate(expressions, start=1):
                # Wait until a worker slot is available
                while len(active_workers) >= max_workers:
                    self._collect_finished_workers(active_workers, finished)
                    next_line = self._flush_in_order(finished, next_line, f_out, results)

                active_workers.append(self._spawn_worker(expr, line_number))

            # Collect remaining active workers
            while active_workers:
                self._collect_finished_workers(active_workers, finished)
                next_line = self._flush_in_order(finished, next_line, f_out, results)

        logger.info(f"📝 Results written to {self.output_file}")
        return results

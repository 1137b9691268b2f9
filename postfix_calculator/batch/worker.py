"""Worker process for evaluating a single expression."""
from multiprocessing.connection import Connection

from pydantic import BaseModel, ConfigDict, Field, field_validator

from postfix_calculator.common.logger import logger
from postfix_calculator.common.operations import OperationRequest, OperationResult, run_operation
from postfix_calculator.common.settings import CalculatorSettings


class WorkerProcess(BaseModel):
    """
    Worker process responsible for evaluating a single expression.

    Lifecycle:
        - Spawned by the batch runner
        - Receives one expression only, with its own evaluator
        - Sends an OperationResult payload (as a dict) through a Pipe
        - Terminates immediately after computation
    """

    # Make the Pydantic instance immutable (read-only)
    # Allow arbitrary types like multiprocessing.Connection
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    conn: Connection = Field(..., description="Connection object for sending results back to the runner")
    expression: str = Field(..., description="Single expression to evaluate")
    line_number: int = Field(..., ge=1, description="Line number in the input file")
    settings: CalculatorSettings = Field(default_factory=CalculatorSettings)

    @field_validator("expression")
    def expression_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the expression is not empty."""
        if not v.strip():
            raise ValueError("Expression cannot be empty")
        return v

    def run(self) -> None:
        """
        Evaluate the expression and send the result or error through the pipe.

        :return: None
        """
        logger.info(f"👷🏁 Worker started on line {self.line_number}: {self.expression}")

        request = OperationRequest(expression=self.expression, line_number=self.line_number)
        try:
            result = run_operation(request, self.settings)
        except Exception as exc:
            # Anything that escaped the calculator's own error kinds
            result = OperationResult(
                expression=self.expression,
                line_number=self.line_number,
                error=f"{type(exc).__name__}: {exc}",
            )

        try:
            self.conn.send(result.model_dump())
        finally:
            # Always close the connection
            self.conn.close()

        if result.ok:
            logger.info(f"👷✅ Worker finished on line {self.line_number}: {result.result}")
        else:
            logger.error(
                f"👷❌ Worker failed on line {self.line_number}: {result.error}\n"
                f"Could not evaluate: {self.expression!r}"
            )

"""Interactive read-evaluate-print loop."""
import sys
from typing import Optional, TextIO

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from postfix_calculator.common.logger import logger
from postfix_calculator.common.operations import OperationRequest, OperationResult, run_operation
from postfix_calculator.common.settings import CalculatorSettings

QUIT_COMMANDS = frozenset({"quit", "exit"})


class InteractiveShell(BaseModel):
    """
    Line-oriented front end: one expression per line.

    For every line the shell prints the postfix form and the result, or the
    error message, then reads the next line. A failing expression never ends
    the loop; end of input or "quit"/"exit" does.
    """

    model_config = ConfigDict(frozen=True)

    settings: CalculatorSettings = Field(default_factory=CalculatorSettings)
    prompt: str = Field(default="> ", description="Prompt shown when reading from a terminal")

    def handle_line(self, line: str, line_number: int = 1) -> Optional[OperationResult]:
        """
        Evaluate one input line.

        :param str line: Raw input line
        :param int line_number: Position of the line in the session

        :return: Evaluation outcome, or None for a blank line
        :rtype: Optional[OperationResult]
        """
        try:
            request = OperationRequest(expression=line.strip(), line_number=line_number)
        except ValidationError:
            return None
        return run_operation(request, self.settings)

    @staticmethod
    def render(result: OperationResult) -> str:
        lines = []
        if result.postfix is not None:
            lines.append(f"postfix: {result.postfix}")
        if result.ok:
            lines.append(f"result: {result.result}")
        else:
            lines.append(f"error: {result.error}")
        return "\n".join(lines)

    def run(self, input_stream: Optional[TextIO] = None, output_stream: Optional[TextIO] = None) -> int:
        """
        Read and evaluate lines until end of input.

        :param TextIO input_stream: Source of expressions, stdin by default
        :param TextIO output_stream: Destination of results, stdout by default

        :return: Number of expressions evaluated
        :rtype: int
        """
        input_stream = sys.stdin if input_stream is None else input_stream
        output_stream = sys.stdout if output_stream is None else output_stream
        show_prompt = input_stream.isatty()
        evaluated = 0

        while True:
            if show_prompt:
                output_stream.write(self.prompt)
                output_stream.flush()
            line = input_stream.readline()
            if not line or line.strip() in QUIT_COMMANDS:
                break

            result = self.handle_line(line, evaluated + 1)
            if result is None:
                continue
            evaluated += 1
            if not result.ok:
                logger.debug(f"❌ line {result.line_number}: {result.error}")
            output_stream.write(self.render(result) + "\n")
            output_stream.flush()

        return evaluated

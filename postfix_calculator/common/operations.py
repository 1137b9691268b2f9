"""Pydantic models for expression evaluation requests and results."""
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from postfix_calculator.common.errors import CalculatorError
from postfix_calculator.common.evaluator import NumericResult, PostfixEvaluator
from postfix_calculator.common.parser import ExpressionParser
from postfix_calculator.common.settings import CalculatorSettings
from postfix_calculator.common.tokens import format_postfix


class OperationRequest(BaseModel):
    """Represents a single expression to evaluate."""

    expression: str = Field(..., description="Expression as a string")
    line_number: int = Field(default=1, ge=1, description="Line number in the input")

    @field_validator("expression")
    def expression_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the expression is not empty."""
        if not v.strip():
            raise ValueError("Expression cannot be empty")
        return v


class OperationResult(BaseModel):
    """Represents the outcome of an evaluated expression: a result or an error."""

    expression: str = Field(..., description="Original expression")
    line_number: int = Field(default=1, ge=1, description="Line number in the input")
    postfix: Optional[str] = Field(default=None, description="Postfix form, when conversion succeeded")
    result: Optional[Union[float, str]] = Field(default=None, description="Numeric or terminal result")
    error: Optional[str] = Field(default=None, description="Failure message")

    @model_validator(mode="after")
    def result_xor_error(self) -> "OperationResult":
        """Exactly one of result and error must be set."""
        if (self.result is None) == (self.error is None):
            raise ValueError("Exactly one of 'result' and 'error' must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def format_line(self) -> str:
        """
        Format the outcome as one line of a results file.

        :return: "<expr> = <result>" or "<expr> -> ERROR: <error>"
        :rtype: str
        """
        if self.ok:
            return f"{self.expression} = {self.result}"
        return f"{self.expression} -> ERROR: {self.error}"


def run_operation(request: OperationRequest, settings: Optional[CalculatorSettings] = None) -> OperationResult:
    """
    Parse and evaluate one request, turning calculator failures into an error result.

    :param OperationRequest request: Expression to evaluate
    :param CalculatorSettings settings: Evaluation settings, defaults if omitted

    :return: Result carrying either the value or the error message
    :rtype: OperationResult
    """
    postfix: Optional[str] = None
    try:
        tokens = ExpressionParser.parse(request.expression)
        postfix = format_postfix(tokens)
        outcome = PostfixEvaluator(settings).evaluate(tokens)
    except CalculatorError as exc:
        return OperationResult(
            expression=request.expression,
            line_number=request.line_number,
            postfix=postfix,
            error=str(exc),
        )

    value = outcome.value if isinstance(outcome, NumericResult) else outcome.text
    return OperationResult(
        expression=request.expression,
        line_number=request.line_number,
        postfix=postfix,
        result=value,
    )

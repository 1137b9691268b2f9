"""Test classes OperationRequest and OperationResult."""
from pydantic import ValidationError
import pytest

from postfix_calculator.common.operations import OperationRequest, OperationResult, run_operation
from postfix_calculator.common.settings import CalculatorSettings


def test_operation_request_valid() -> None:
    """Test that a valid OperationRequest can be created."""
    req = OperationRequest(expression="2 + 2 * 3")
    assert req.expression == "2 + 2 * 3"
    assert req.line_number == 1


def test_operation_request_invalid_type() -> None:
    """Test that non-string expressions raise a validation error."""
    with pytest.raises(ValidationError):
        # int instead of str
        OperationRequest(expression=123)


def test_operation_request_empty() -> None:
    """Test that blank expressions are rejected."""
    with pytest.raises(ValidationError):
        OperationRequest(expression="   ")


def test_operation_result_valid() -> None:
    """Test that a valid OperationResult can be created."""
    res = OperationResult(expression="2 + 2 * 3", result=8.0)
    assert res.result == 8.0
    assert res.ok
    assert res.format_line() == "2 + 2 * 3 = 8.0"


def test_operation_result_keeps_text() -> None:
    """Terminal results stay strings."""
    res = OperationResult(expression="frac(0.5)", result="1/2")
    assert res.result == "1/2"


def test_operation_result_error_line() -> None:
    res = OperationResult(expression="3/0", error="DivisionByZero: cannot compute 3.0 / 0.0")
    assert not res.ok
    assert res.format_line() == "3/0 -> ERROR: DivisionByZero: cannot compute 3.0 / 0.0"


@pytest.mark.parametrize("fields", [
    {},
    {"result": 1.0, "error": "boom"},
])
def test_operation_result_needs_result_xor_error(fields) -> None:
    """Test that exactly one of result and error is accepted."""
    with pytest.raises(ValidationError):
        OperationResult(expression="1", **fields)


def test_run_operation_success() -> None:
    result = run_operation(OperationRequest(expression="2+3*4", line_number=3))
    assert result.line_number == 3
    assert result.postfix == "2.0 3.0 4.0 * +"
    assert result.result == 14.0
    assert result.error is None


def test_run_operation_eval_error_keeps_postfix() -> None:
    """An evaluation failure still reports the postfix form."""
    result = run_operation(OperationRequest(expression="3/0"))
    assert result.postfix == "3.0 0.0 /"
    assert result.error.startswith("DivisionByZero")


def test_run_operation_parse_error() -> None:
    result = run_operation(OperationRequest(expression="(2+3"))
    assert result.postfix is None
    assert result.error.startswith("MissingCloseParen")


def test_run_operation_lenient_settings() -> None:
    settings = CalculatorSettings(strict_terminal=False)
    result = run_operation(OperationRequest(expression="frac(0.25)+1"), settings)
    assert result.result == "1/4"

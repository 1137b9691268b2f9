"""Error kinds raised while parsing and evaluating expressions."""


class CalculatorError(ValueError):
    """Base class for every failure reported by the calculator core."""

    kind: str = "CalculatorError"

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.kind}: {message}" if message else self.kind


class ParseError(CalculatorError):
    """The input text could not be turned into a postfix sequence."""

    kind = "ParseError"


class UnknownOperator(ParseError):
    kind = "UnknownOperator"


class InvalidNumber(ParseError):
    kind = "InvalidNumber"


class MissingOpenParen(ParseError):
    kind = "MissingOpenParen"


class MissingCloseParen(ParseError):
    kind = "MissingCloseParen"


class EvalError(CalculatorError):
    """The postfix sequence could not be evaluated."""

    kind = "EvalError"


class MissingOperand(EvalError):
    kind = "MissingOperand"


class MissingArgument(EvalError):
    kind = "MissingArgument"


class DivisionByZero(EvalError):
    kind = "DivisionByZero"


class ModuloByZero(EvalError):
    kind = "ModuloByZero"


class UnknownFunction(EvalError):
    kind = "UnknownFunction"


class NegativeFactorial(EvalError):
    kind = "NegativeFactorial"


class InvalidArgument(EvalError):
    """A NaN or infinite value was given where an integer is required."""

    kind = "InvalidArgument"


class UnboundVariable(EvalError):
    kind = "UnboundVariable"


class NonTerminalPosition(EvalError):
    """A string-valued function was called before the end of the expression."""

    kind = "NonTerminalPosition"


class InvalidExpression(EvalError):
    kind = "InvalidExpression"

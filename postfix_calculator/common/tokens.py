"""Token variants produced by the tokenizer and consumed by the converter and evaluator."""
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from postfix_calculator.common.symbols import operator_arity


class ConstantKind(str, Enum):
    PI = "pi"
    E = "e"


class _Token(BaseModel):
    # Tokens are values: immutable and comparable by content
    model_config = ConfigDict(frozen=True)


class Number(_Token):
    value: float

    def __str__(self) -> str:
        return repr(self.value)


class Variable(_Token):
    letter: str

    def __str__(self) -> str:
        return self.letter


class Constant(_Token):
    kind: ConstantKind

    def __str__(self) -> str:
        return "\N{GREEK SMALL LETTER PI}" if self.kind is ConstantKind.PI else "e"


class Operator(_Token):
    symbol: Literal["+", "-", "*", "/", "%", "^", "!", "~"]

    @property
    def arity(self) -> int:
        return operator_arity(self.symbol)

    def __str__(self) -> str:
        return self.symbol


class FunctionName(_Token):
    name: str

    def __str__(self) -> str:
        return self.name


class LeftParen(_Token):
    def __str__(self) -> str:
        return "("


class RightParen(_Token):
    def __str__(self) -> str:
        return ")"


Token = Union[Number, Variable, Constant, Operator, FunctionName, LeftParen, RightParen]

# Tokens that can appear in a postfix sequence
PostfixToken = Union[Number, Variable, Constant, Operator, FunctionName]


def format_postfix(postfix: list) -> str:
    """
    Render a postfix sequence as space-separated tokens.

    :param list postfix: Postfix sequence

    :return: Printable form, e.g. "2.0 3.0 4.0 * +"
    :rtype: str
    """
    return " ".join(str(token) for token in postfix)

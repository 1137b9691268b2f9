"""Stack machine evaluating postfix sequences."""
from functools import partial
import math
import sys
from typing import Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from postfix_calculator.common import mathlib
from postfix_calculator.common.errors import (
    DivisionByZero,
    InvalidArgument,
    InvalidExpression,
    MissingArgument,
    MissingOperand,
    ModuloByZero,
    NonTerminalPosition,
    UnboundVariable,
    UnknownFunction,
)
from postfix_calculator.common.settings import CalculatorSettings
from postfix_calculator.common.symbols import FUNCTION_ARITY, TERMINAL_FUNCTIONS
from postfix_calculator.common.tokens import (
    Constant,
    ConstantKind,
    FunctionName,
    Number,
    Operator,
    PostfixToken,
    Variable,
)

# Largest n whose factorial is a finite float
MAX_FLOAT_FACTORIAL: int = 170

# Natural log of the largest finite float
LOG_FLOAT_MAX: float = math.log(sys.float_info.max)


class NumericResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float

    def __str__(self) -> str:
        return repr(self.value)


class TerminalResult(BaseModel):
    """Final answer produced directly as text by pify, frac, prime or factor."""

    model_config = ConfigDict(frozen=True)

    text: str

    def __str__(self) -> str:
        return self.text


EvalResult = Union[NumericResult, TerminalResult]


# IEEE-754 flavoured wrappers: Python's math module raises where a double would
# give NaN or infinity.

def _to_int(x: float, what: str) -> int:
    """Truncate toward zero, rejecting NaN and infinities."""
    if not math.isfinite(x):
        raise InvalidArgument(f"{what} needs an integer, got {x}")
    return int(x)


def _to_float(n: int) -> float:
    try:
        return float(n)
    except OverflowError:
        return math.inf if n > 0 else -math.inf


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _power(base: float, exponent: float) -> float:
    odd = exponent.is_integer() and exponent % 2 == 1
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return -math.inf if base < 0 and odd else math.inf
    except ValueError:
        # 0 ** negative, or negative ** non-integer
        if base == 0:
            # The pole keeps the sign of -0.0 for odd exponents
            return math.copysign(math.inf, base) if odd else math.inf
        return math.nan


def _log(x: float, log: Callable[[float], float] = math.log) -> float:
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return log(x)


def _sqrt(x: float) -> float:
    return math.nan if x < 0 else math.sqrt(x)


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _sinh(x: float) -> float:
    try:
        return math.sinh(x)
    except OverflowError:
        return math.copysign(math.inf, x)


def _cosh(x: float) -> float:
    try:
        return math.cosh(x)
    except OverflowError:
        return math.inf


def _periodic(fn: Callable[[float], float], x: float) -> float:
    # sin/cos/tan of an infinity is NaN
    return fn(x) if math.isfinite(x) else math.nan


def _bounded(fn: Callable[[float], float], x: float) -> float:
    # asin/acos are only defined on [-1, 1]
    return fn(x) if -1 <= x <= 1 else math.nan


def _rounding(fn: Callable[[float], int], x: float) -> float:
    return float(fn(x)) if math.isfinite(x) else x


def _round_half_up(x: float) -> float:
    return math.floor(x + 0.5)


def _extremum(pick: Callable[[float, float], float], a: float, b: float) -> float:
    # NaN wins whichever side it is on
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return pick(a, b)


def _integer_function(fn: Callable[[int, int], int], name: str) -> Callable[[float, float], float]:
    def wrapper(a: float, b: float) -> float:
        return _to_float(fn(_to_int(a, name), _to_int(b, name)))
    return wrapper


def _selection_size(n: int, k: int, ordered: bool) -> float:
    """
    Lower bound of ln(perm(n, k)), or of ln(comb(n, k)) when not ordered.

    Only meaningful for 0 <= k <= n.
    """
    if ordered:
        # perm(n, k) >= (n - k + 1) ** k and perm(n, k) >= k!
        return max(k * math.log(n - k + 1), math.lgamma(min(k, MAX_FLOAT_FACTORIAL + 1) + 1))
    # comb(n, k) >= (n / m) ** m with m = min(k, n - k)
    m = min(k, n - k)
    return m * math.log(n / m) if m else 0.0


def _selection_function(fn: Callable[[int, int], int], name: str, ordered: bool) -> Callable[[float, float], float]:
    """Wrap perm/comb so results too large for a float give inf without being computed."""
    def wrapper(a: float, b: float) -> float:
        n, k = _to_int(a, name), _to_int(b, name)
        if 0 <= k <= n and _selection_size(n, k, ordered) > LOG_FLOAT_MAX:
            return math.inf
        return _to_float(fn(n, k))
    return wrapper


# Function name -> callable taking the arguments in declared order
NUMERIC_FUNCTIONS: Dict[str, Callable[..., float]] = {
    "sh": _sinh,
    "ch": _cosh,
    "th": math.tanh,
    "lg": partial(_log, log=math.log10),
    "ln": _log,
    "sin": partial(_periodic, math.sin),
    "cos": partial(_periodic, math.cos),
    "tan": partial(_periodic, math.tan),
    "sec": lambda x: _divide(1.0, _periodic(math.cos, x)),
    "csc": lambda x: _divide(1.0, _periodic(math.sin, x)),
    "cot": lambda x: _divide(1.0, _periodic(math.tan, x)),
    "exp": _exp,
    "gcd": _integer_function(mathlib.gcd, "gcd"),
    "lcm": _integer_function(mathlib.lcm, "lcm"),
    "log": lambda base, x: _divide(_log(x), _log(base)),
    "abs": abs,
    "max": partial(_extremum, max),
    "min": partial(_extremum, min),
    "perm": _selection_function(mathlib.permutation, "perm", ordered=True),
    "comb": _selection_function(mathlib.combination, "comb", ordered=False),
    "sqrt": _sqrt,
    "arsh": mathlib.arsh,
    "arch": mathlib.arch,
    "arth": mathlib.arth,
    "ceil": partial(_rounding, math.ceil),
    "floor": partial(_rounding, math.floor),
    "round": partial(_rounding, _round_half_up),
    "arcsin": partial(_bounded, math.asin),
    "arccos": partial(_bounded, math.acos),
    "arctan": math.atan,
}


class PostfixEvaluator:
    """
    Evaluate postfix sequences on a value stack of floats.

    The value stack lives only for the duration of one evaluate() call, so one
    evaluator may be reused, but concurrent evaluations must not share one.

    Terminal functions (pify, frac, prime, factor) turn the whole evaluation into
    a string result. With settings.strict_terminal they must be the last token
    and consume the last value; otherwise the call simply ends the evaluation
    and whatever else is on the stack or still to come is discarded.
    """

    def __init__(self, settings: Optional[CalculatorSettings] = None):
        self.settings = settings or CalculatorSettings()

    def evaluate(self, postfix: List[PostfixToken]) -> EvalResult:
        """
        Evaluate a postfix sequence.

        :param List[PostfixToken] postfix: Sequence produced by ExpressionParser.to_postfix()

        :return: NumericResult, or TerminalResult for pify/frac/prime/factor
        :rtype: EvalResult
        :raises EvalError: If the sequence cannot be evaluated
        """
        values: List[float] = []
        last_position = len(postfix) - 1

        for position, token in enumerate(postfix):
            if isinstance(token, Number):
                values.append(token.value)
            elif isinstance(token, Constant):
                values.append(math.pi if token.kind is ConstantKind.PI else math.e)
            elif isinstance(token, Variable):
                raise UnboundVariable(f"variable {token.letter!r} has no value")
            elif isinstance(token, Operator):
                values.append(self._apply_operator(token, values))
            elif isinstance(token, FunctionName):
                args = self._pop_arguments(token.name, values)
                if token.name not in TERMINAL_FUNCTIONS:
                    values.append(NUMERIC_FUNCTIONS[token.name](*args))
                    continue
                if self.settings.strict_terminal:
                    if position != last_position:
                        raise NonTerminalPosition(
                            f"{token.name}() must be the last operation of the expression"
                        )
                    if values:
                        raise InvalidExpression(f"{len(values)} value(s) left unused")
                return TerminalResult(text=self._call_terminal(token.name, args[0]))
            else:
                raise TypeError(f"Unexpected postfix token: {token!r}")

        if not values:
            raise InvalidExpression("empty expression")
        if len(values) > 1:
            raise InvalidExpression(f"{len(values) - 1} value(s) left unused")
        return NumericResult(value=values[0])

    @staticmethod
    def _pop_operand(op: Operator, values: List[float]) -> float:
        if not values:
            raise MissingOperand(f"operator {op.symbol!r} is missing an operand")
        return values.pop()

    def _apply_operator(self, op: Operator, values: List[float]) -> float:
        if op.arity == 1:
            value = self._pop_operand(op, values)
            if op.symbol == "~":
                return -value
            n = _to_int(value, "!")
            if n > MAX_FLOAT_FACTORIAL:
                return math.inf
            return float(mathlib.factorial(n))

        right = self._pop_operand(op, values)
        left = self._pop_operand(op, values)

        if op.symbol == "+":
            return left + right
        if op.symbol == "-":
            return left - right
        if op.symbol == "*":
            return left * right
        if op.symbol == "/":
            if right == 0:
                raise DivisionByZero(f"cannot compute {left} / {right}")
            return left / right
        if op.symbol == "%":
            dividend, divisor = _to_int(left, "%"), _to_int(right, "%")
            if divisor == 0:
                raise ModuloByZero(f"cannot compute {dividend} % {divisor}")
            # Remainder takes the sign of the dividend
            remainder = abs(dividend) % abs(divisor)
            return _to_float(-remainder if dividend < 0 else remainder)
        return _power(left, right)

    @staticmethod
    def _pop_arguments(name: str, values: List[float]) -> List[float]:
        arity = FUNCTION_ARITY.get(name)
        if arity is None:
            raise UnknownFunction(f"unknown function {name!r}")
        if len(values) < arity:
            raise MissingArgument(f"function {name!r} expects {arity} argument(s)")
        args = values[-arity:]
        del values[-arity:]
        return args

    def _call_terminal(self, name: str, arg: float) -> str:
        if name == "pify":
            return mathlib.pify(arg, self.settings.max_denominator)
        if name == "frac":
            return mathlib.to_fraction(arg, self.settings.max_denominator)
        if name == "prime":
            return "true" if mathlib.is_prime(_to_int(arg, name)) else "false"
        return mathlib.prime_factors(_to_int(arg, name))

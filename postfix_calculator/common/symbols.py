"""Read-only symbol tables shared by the tokenizer, converter and evaluator."""
from types import MappingProxyType
from typing import Mapping

# Operator symbol -> precedence level. "(" sits at 0 so that no operator ever pops it.
PRECEDENCE: Mapping[str, int] = MappingProxyType({
    "(": 0,
    "+": 2,
    "-": 2,
    "*": 3,
    "/": 3,
    "%": 3,
    "^": 4,
    "!": 5,
    "~": 6,
})

PREFIX_OPERATORS: frozenset = frozenset({"~"})
POSTFIX_OPERATORS: frozenset = frozenset({"!"})
BINARY_OPERATORS: frozenset = frozenset({"+", "-", "*", "/", "%", "^"})

# Function name -> number of arguments
FUNCTION_ARITY: Mapping[str, int] = MappingProxyType({
    "sh": 1,
    "ch": 1,
    "th": 1,
    "lg": 1,
    "ln": 1,
    "sin": 1,
    "cos": 1,
    "tan": 1,
    "sec": 1,
    "csc": 1,
    "cot": 1,
    "exp": 1,
    "gcd": 2,
    "lcm": 2,
    "log": 2,
    "abs": 1,
    "max": 2,
    "min": 2,
    "perm": 2,
    "comb": 2,
    "pify": 1,
    "frac": 1,
    "sqrt": 1,
    "arsh": 1,
    "arch": 1,
    "arth": 1,
    "ceil": 1,
    "floor": 1,
    "round": 1,
    "prime": 1,
    "arcsin": 1,
    "arccos": 1,
    "arctan": 1,
    "factor": 1,
})

# Functions whose string result ends the evaluation
TERMINAL_FUNCTIONS: frozenset = frozenset({"pify", "frac", "prime", "factor"})

# Spellings of the two built-in constants
CONSTANT_NAMES: Mapping[str, str] = MappingProxyType({
    "PI": "pi",
    "pi": "pi",
    "\N{GREEK SMALL LETTER PI}": "pi",
    "Eu": "e",
})

# Alternate bracket glyphs accepted in the input
BRACKET_TRANSLATION: Mapping[int, str] = MappingProxyType(str.maketrans({
    "\N{FULLWIDTH LEFT PARENTHESIS}": "(",
    "[": "(",
    "\N{FULLWIDTH RIGHT PARENTHESIS}": ")",
    "]": ")",
}))


def operator_arity(symbol: str) -> int:
    """
    Return the number of operands consumed by an operator.

    :param str symbol: Operator symbol

    :return: 1 for prefix/postfix operators, 2 for binary operators
    :rtype: int
    """
    if symbol in PREFIX_OPERATORS or symbol in POSTFIX_OPERATORS:
        return 1
    return 2

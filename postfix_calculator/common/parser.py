"""Convert infix expressions to postfix and evaluate them."""
from typing import List, Optional, Union

from postfix_calculator.common.errors import MissingCloseParen, MissingOpenParen
from postfix_calculator.common.evaluator import EvalResult, PostfixEvaluator
from postfix_calculator.common.logger import logger
from postfix_calculator.common.settings import CalculatorSettings
from postfix_calculator.common.symbols import PRECEDENCE
from postfix_calculator.common.tokenizer import Tokenizer
from postfix_calculator.common.tokens import (
    Constant,
    FunctionName,
    LeftParen,
    Number,
    Operator,
    PostfixToken,
    RightParen,
    Token,
    Variable,
    format_postfix,
)

StackEntry = Union[Operator, FunctionName, LeftParen]


def _level(entry: Union[Operator, LeftParen]) -> int:
    """Precedence level of an operator or "(" on the stack."""
    if isinstance(entry, LeftParen):
        return PRECEDENCE["("]
    return PRECEDENCE[entry.symbol]


class ExpressionParser:
    """
    Parse and evaluate arithmetic/scientific expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Safe, deterministic computation

    Algorithm:
        1. Tokenize (numbers, constants, variables, operators, function names, brackets)
        2. Convert to Reverse Polish Notation (RPN) using Shunting-yard
        3. Evaluate RPN using a stack

    Every operator is left-associative: an incoming operator first pops every
    stacked operator of higher *or equal* level, so "2^3^2" is "(2^3)^2".

    Function names are pushed without comparison and no operator ever pops
    one: the ")" closing its argument list moves it to the output, so
    "max(sqrt(4), 1)" becomes "4 sqrt 1 max".

    Examples:
        - Infix expression: 2 + max(3, 7) * 4
        - Corresponding RPN: 2.0 3.0 7.0 max 4.0 * +
    """

    @staticmethod
    def tokenize(expr: str) -> List[Token]:
        """
        Split an expression into tokens.

        :param str expr: Expression string

        :return: List of tokens
        :rtype: List[Token]
        """
        return Tokenizer.tokenize(expr)

    @staticmethod
    def to_postfix(tokens: List[Token]) -> List[PostfixToken]:
        """
        Convert a list of tokens into postfix order using the Shunting-yard algorithm.

        :param List[Token] tokens: Tokens as produced by tokenize()

        :return: Tokens in postfix order, without parentheses
        :rtype: List[PostfixToken]
        :raises MissingOpenParen: If a ")" has no matching "("
        :raises MissingCloseParen: If a "(" is never closed
        """
        output: List[PostfixToken] = []
        stack: List[StackEntry] = []

        for token in tokens:
            if isinstance(token, (Number, Variable, Constant)):
                output.append(token)
            elif isinstance(token, (LeftParen, FunctionName)):
                stack.append(token)
            elif isinstance(token, RightParen):
                while stack and not isinstance(stack[-1], LeftParen):
                    output.append(stack.pop())
                if not stack:
                    raise MissingOpenParen("unmatched ')'")
                stack.pop()
                if stack and isinstance(stack[-1], FunctionName):
                    output.append(stack.pop())
            elif isinstance(token, Operator):
                level = PRECEDENCE[token.symbol]
                while stack and not isinstance(stack[-1], FunctionName) and _level(stack[-1]) >= level:
                    output.append(stack.pop())
                stack.append(token)
            else:
                raise TypeError(f"Unexpected token: {token!r}")

        # Pop the remaining entries, stack top first
        while stack:
            entry = stack.pop()
            if isinstance(entry, LeftParen):
                raise MissingCloseParen("unmatched '('")
            output.append(entry)

        return output

    @staticmethod
    def parse(expr: str) -> List[PostfixToken]:
        """
        Tokenize an expression and convert it to postfix.

        :param str expr: Expression string

        :return: Postfix sequence
        :rtype: List[PostfixToken]
        :raises ParseError: If the expression cannot be tokenized or converted
        """
        postfix = ExpressionParser.to_postfix(ExpressionParser.tokenize(expr))
        logger.debug(f"🔁 {expr!r} -> {format_postfix(postfix)}")
        return postfix

    @staticmethod
    def evaluate(expr: str, settings: Optional[CalculatorSettings] = None) -> EvalResult:
        """
        Evaluate an expression safely.

        :param str expr: Expression string
        :param CalculatorSettings settings: Evaluation settings, defaults if omitted

        :return: Numeric or terminal (string) result
        :rtype: EvalResult
        :raises CalculatorError: If the expression is invalid or cannot be evaluated
        """
        postfix = ExpressionParser.parse(expr)
        return PostfixEvaluator(settings or CalculatorSettings()).evaluate(postfix)

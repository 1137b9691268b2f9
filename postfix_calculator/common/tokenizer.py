"""Scan expression text into a flat token sequence."""
from typing import List, Tuple

from postfix_calculator.common.errors import InvalidNumber, UnknownOperator
from postfix_calculator.common.symbols import BRACKET_TRANSLATION, CONSTANT_NAMES, PRECEDENCE
from postfix_calculator.common.tokens import (
    Constant,
    ConstantKind,
    FunctionName,
    LeftParen,
    Number,
    Operator,
    RightParen,
    Token,
    Variable,
)


class Tokenizer:
    """
    Turn an infix expression into tokens.

    Scanning rules:
        - Whitespace is removed and "（" "[" / "）" "]" are read as "(" / ")"
        - A run of letters is one identifier: a constant name, a one-letter
          variable, or a function name
        - A run of digits and dots starting with a digit is one number
        - Commas separate function arguments and produce no token
        - Any other character must be an operator

    A "-" in operand position (start of input, after "(", "," or an operator
    other than "!") is a negation and becomes "~"; a "+" there is dropped.
    """

    @staticmethod
    def normalize(text: str) -> str:
        """
        Remove whitespace and map alternate bracket glyphs onto ASCII parentheses.

        :param str text: Raw expression

        :return: Normalized expression
        :rtype: str
        """
        return "".join(text.split()).translate(BRACKET_TRANSLATION)

    @staticmethod
    def _scan_identifier(text: str, start: int) -> Tuple[Token, int]:
        end = start + 1
        while end < len(text) and text[end].isalpha():
            end += 1
        word = text[start:end]

        if word in CONSTANT_NAMES:
            return Constant(kind=ConstantKind(CONSTANT_NAMES[word])), end
        if len(word) == 1:
            return Variable(letter=word), end
        return FunctionName(name=word), end

    @staticmethod
    def _scan_number(text: str, start: int) -> Tuple[Number, int]:
        end = start + 1
        while end < len(text) and (text[end] in "0123456789."):
            end += 1
        literal = text[start:end]
        try:
            return Number(value=float(literal)), end
        except ValueError:
            raise InvalidNumber(f"invalid number literal {literal!r}") from None

    @staticmethod
    def tokenize(text: str) -> List[Token]:
        """
        Split an expression into tokens, left to right.

        :param str text: Expression such as "2 + max(3, -7)!"

        :return: Token sequence
        :rtype: List[Token]
        :raises InvalidNumber: If a digit run is not a valid decimal number
        :raises UnknownOperator: If a character is neither operand, bracket, comma nor operator
        """
        text = Tokenizer.normalize(text)
        tokens: List[Token] = []
        # True while the next token is expected to start an operand
        expect_operand = True
        i = 0

        while i < len(text):
            ch = text[i]

            if ch.isalpha():
                token, i = Tokenizer._scan_identifier(text, i)
                tokens.append(token)
                expect_operand = isinstance(token, FunctionName)
                continue

            if "0" <= ch <= "9":
                token, i = Tokenizer._scan_number(text, i)
                tokens.append(token)
                expect_operand = False
                continue

            i += 1
            if ch == "(":
                tokens.append(LeftParen())
                expect_operand = True
            elif ch == ")":
                tokens.append(RightParen())
                expect_operand = False
            elif ch == ",":
                expect_operand = True
            elif ch not in PRECEDENCE:
                raise UnknownOperator(f"unknown operator {ch!r}")
            elif expect_operand and ch == "+":
                continue
            elif expect_operand and ch == "-":
                tokens.append(Operator(symbol="~"))
            else:
                tokens.append(Operator(symbol=ch))
                expect_operand = ch != "!"

        return tokens

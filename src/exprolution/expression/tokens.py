"""
Tokens for the Exprolution expression language.

This module defines the operator set, the token types produced when a
symbol sequence is scanned, and the tokenizer itself.
"""

from typing import List, Optional, Sequence, Union
from dataclasses import dataclass
from enum import Enum
import math


DIGITS = "0123456789"
MAX_LITERAL_DIGITS = 309


class ExpressionSyntaxError(ValueError):
    """Raised when an expression contains a character outside the alphabet."""


class Operator(Enum):
    """Binary operators understood by the evaluator."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def precedence(self) -> int:
        """Binding strength; higher binds tighter."""
        if self in (Operator.MUL, Operator.DIV):
            return 1
        return 0

    def apply(self, left: float, right: float) -> Optional[float]:
        """Apply the operator, returning None on division by zero."""
        if self is Operator.ADD:
            return left + right
        if self is Operator.SUB:
            return left - right
        if self is Operator.MUL:
            return left * right
        if right == 0:
            return None
        return left / right

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Operator"]:
        try:
            return cls(symbol)
        except ValueError:
            return None


OPERATORS = "".join(op.value for op in Operator)


@dataclass(frozen=True)
class NumberToken:
    """A number literal made of one or more consecutive digits."""
    value: float
    text: str


@dataclass(frozen=True)
class OperatorToken:
    """A single operator symbol."""
    operator: Operator

    @property
    def text(self) -> str:
        return self.operator.value


Token = Union[NumberToken, OperatorToken]


def _literal_value(text: str) -> float:
    """Value of a digit run; literals beyond the float range become infinity."""
    significant = text.lstrip("0")
    if len(significant) > MAX_LITERAL_DIGITS:
        return math.inf
    try:
        return float(int(significant or "0"))
    except OverflowError:
        return math.inf


def tokenize(symbols: Union[str, Sequence[str]]) -> List[Token]:
    """
    Scan a symbol sequence into number and operator tokens.

    Consecutive digits concatenate into one literal, so ``0,7,2`` becomes
    the literal 72. Whitespace between symbols is ignored.

    Args:
        symbols: A string or a sequence of one-character symbols

    Returns:
        Tokens in source order

    Raises:
        ExpressionSyntaxError: If a symbol is neither a digit, an operator
            nor whitespace
    """
    tokens: List[Token] = []
    digits: List[str] = []

    def flush_number() -> None:
        if digits:
            text = "".join(digits)
            tokens.append(NumberToken(value=_literal_value(text), text=text))
            digits.clear()

    for symbol in symbols:
        if symbol in DIGITS and len(symbol) == 1:
            digits.append(symbol)
            continue

        flush_number()
        if symbol.isspace():
            continue

        operator = Operator.from_symbol(symbol)
        if operator is None:
            raise ExpressionSyntaxError(f"Stuck tokenizing at {symbol!r}")
        tokens.append(OperatorToken(operator))

    flush_number()
    return tokens

"""
Expression evaluation for Exprolution chromosomes.

This package scans digit/operator symbol sequences into tokens, repairs
malformed fragments and evaluates the result with two precedence levels and
right-to-left associativity.
"""

from src.exprolution.expression.tokens import (
    DIGITS,
    OPERATORS,
    ExpressionSyntaxError,
    NumberToken,
    Operator,
    OperatorToken,
    Token,
    tokenize
)
from src.exprolution.expression.evaluator import (
    describe,
    evaluate,
    evaluate_tokens,
    render,
    repair
)

__all__ = [
    # Tokens
    "DIGITS",
    "OPERATORS",
    "ExpressionSyntaxError",
    "NumberToken",
    "Operator",
    "OperatorToken",
    "Token",
    "tokenize",

    # Evaluation
    "describe",
    "evaluate",
    "evaluate_tokens",
    "render",
    "repair"
]

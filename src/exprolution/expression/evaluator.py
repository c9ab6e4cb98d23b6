"""
Expression evaluator for chromosome symbol sequences.

Chromosomes are generated and mutated without any syntactic validation, so
the evaluator never rejects a digit/operator sequence. Malformed fragments
are repaired before evaluation:

* a leading operator gets a left operand of 0 (``-5`` is ``0-5``);
* of two adjacent operators the earlier one is dropped (``3+*4`` is ``3*4``);
* of two adjacent literals the earlier one is dropped (``1 2`` is ``2``);
* a trailing operator is dropped (``12+`` is ``12``);
* a sequence without any number literal evaluates to 0.

Multiplication and division bind tighter than addition and subtraction.
Operators of equal precedence associate right-to-left, so ``1/2/3`` is
``1/(2/3)`` and ``1-2-3`` is ``1-(2-3)``.

Division by zero, and any intermediate result that overflows to a
non-finite float, produce the invalid sentinel ``None``.
"""

from typing import List, Optional, Sequence, Tuple, Union
import math

from src.exprolution.expression.tokens import (
    NumberToken,
    Operator,
    OperatorToken,
    Token,
    tokenize
)


Operands = List[float]
Operators = List[Operator]


def repair(tokens: Sequence[Token]) -> Tuple[Operands, Operators]:
    """
    Turn a raw token stream into an alternating operand/operator sequence.

    Returns:
        ``(operands, operators)`` with ``len(operands) == len(operators) + 1``
    """
    operands: Operands = []
    operators: Operators = []
    expecting_operand = True

    for token in tokens:
        if isinstance(token, NumberToken):
            if expecting_operand:
                operands.append(token.value)
                expecting_operand = False
            else:
                # Two literals in a row: the later one wins
                operands[-1] = token.value
            continue

        if not expecting_operand:
            operators.append(token.operator)
            expecting_operand = True
        elif operators:
            # Two operators in a row: the later one wins
            operators[-1] = token.operator
        else:
            operands.append(0.0)
            operators.append(token.operator)

    if expecting_operand and operators:
        operators.pop()

    if not operands:
        operands.append(0.0)

    return operands, operators


def _fold_right(operands: Operands, operators: Operators) -> Optional[float]:
    """Fold ``n0 o1 n1 ... ok nk`` from the right, all at one precedence level."""
    result = operands[-1]
    for index in range(len(operators) - 1, -1, -1):
        result = operators[index].apply(operands[index], result)
        if result is None or not math.isfinite(result):
            return None
    return result


def _split_terms(operands: Operands, operators: Operators) -> Tuple[List[Tuple[Operands, Operators]], Operators]:
    """Split at additive operators into multiplicative terms."""
    terms: List[Tuple[Operands, Operators]] = []
    additive: Operators = []

    current_operands: Operands = [operands[0]]
    current_operators: Operators = []
    for operator, operand in zip(operators, operands[1:]):
        if operator.precedence == 0:
            terms.append((current_operands, current_operators))
            additive.append(operator)
            current_operands, current_operators = [operand], []
        else:
            current_operators.append(operator)
            current_operands.append(operand)
    terms.append((current_operands, current_operators))

    return terms, additive


def evaluate_tokens(tokens: Sequence[Token]) -> Optional[float]:
    """Evaluate an already tokenized expression."""
    operands, operators = repair(tokens)
    if not all(math.isfinite(operand) for operand in operands):
        return None
    terms, additive = _split_terms(operands, operators)

    values: Operands = []
    for term_operands, term_operators in terms:
        value = _fold_right(term_operands, term_operators)
        if value is None:
            return None
        values.append(value)

    return _fold_right(values, additive)


def evaluate(symbols: Union[str, Sequence[str]]) -> Optional[float]:
    """
    Evaluate a symbol sequence.

    Args:
        symbols: A string such as ``"072-22*1"`` or a sequence of symbols

    Returns:
        The finite numeric value, or None when the expression divides by
        zero or overflows

    Raises:
        ExpressionSyntaxError: If the input contains foreign characters
    """
    return evaluate_tokens(tokenize(symbols))


def render(symbols: Union[str, Sequence[str]]) -> str:
    """Render symbols exactly as written, in order."""
    return "".join(symbols)


def describe(symbols: Union[str, Sequence[str]]) -> str:
    """
    Render the repaired expression with explicit right-to-left grouping.

    Useful when reading a reported solution: ``"1/2/3"`` is described as
    ``"1 / (2 / 3)"``.
    """
    operands, operators = repair(tokenize(symbols))
    terms, additive = _split_terms(operands, operators)

    def group(items: List[str], ops: Operators) -> str:
        text = items[-1]
        for index in range(len(ops) - 1, -1, -1):
            if index < len(ops) - 1:
                text = f"({text})"
            text = f"{items[index]} {ops[index].value} {text}"
        return text

    rendered_terms = [
        group([_format_number(n) for n in term_operands], term_operators)
        for term_operands, term_operators in terms
    ]
    return group(rendered_terms, additive)


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)

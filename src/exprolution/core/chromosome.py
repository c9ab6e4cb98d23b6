"""
Chromosome Representation for the Expression Genetic Algorithm.

This module defines the symbol alphabet and the chromosome structure used to
encode candidate arithmetic expressions, including random creation,
decoding and serialization.
"""

from typing import Tuple, Dict, Any, Optional, Iterable
from dataclasses import dataclass, field
import random
import hashlib

from src.exprolution.expression import DIGITS, OPERATORS, evaluate, render


SYMBOLS: Tuple[str, ...] = tuple(DIGITS + OPERATORS)


def random_symbol(rng: random.Random) -> str:
    """Draw one symbol uniformly from the alphabet."""
    return rng.choice(SYMBOLS)


@dataclass(frozen=True)
class ExpressionChromosome:
    """
    A fixed-length sequence of digit and operator symbols.

    Chromosomes are immutable: the genetic operators always build new
    chromosomes. Any symbol may appear at any position; the evaluator
    repairs malformed arrangements.
    """

    symbols: Tuple[str, ...]
    generation: int = field(default=0, compare=False)

    def __post_init__(self):
        symbols = tuple(self.symbols)
        unknown = [s for s in symbols if s not in SYMBOLS]
        if unknown:
            raise ValueError(f"Unknown chromosome symbols: {unknown}")
        object.__setattr__(self, "symbols", symbols)

    @classmethod
    def create_random(cls, length: int, rng: random.Random, generation: int = 0) -> "ExpressionChromosome":
        """Create a chromosome with every symbol drawn uniformly."""
        return cls(tuple(random_symbol(rng) for _ in range(length)), generation=generation)

    @classmethod
    def from_expression(cls, expression: str, generation: int = 0) -> "ExpressionChromosome":
        """Create a chromosome from expression text such as ``"12+5"``."""
        return cls(tuple(expression), generation=generation)

    @property
    def chromosome_id(self) -> str:
        """Content hash identifying the symbol sequence."""
        return hashlib.md5(self.to_expression().encode()).hexdigest()[:12]

    def to_expression(self) -> str:
        """Return the expression text, symbols concatenated in order."""
        return render(self.symbols)

    def value(self) -> Optional[float]:
        """Evaluate the encoded expression; None if it is invalid."""
        return evaluate(self.symbols)

    def replace(self, symbols: Iterable[str], generation: Optional[int] = None) -> "ExpressionChromosome":
        """Return a new chromosome with the given symbols."""
        return ExpressionChromosome(
            tuple(symbols),
            generation=self.generation if generation is None else generation
        )

    def hamming_distance(self, other: "ExpressionChromosome") -> int:
        """Number of positions at which two equal-length chromosomes differ."""
        if len(self) != len(other):
            raise ValueError(
                f"Cannot compare chromosomes of length {len(self)} and {len(other)}"
            )
        return sum(1 for a, b in zip(self.symbols, other.symbols) if a != b)

    def to_dict(self) -> Dict[str, Any]:
        """Convert chromosome to dictionary representation."""
        return {
            "chromosome_id": self.chromosome_id,
            "expression": self.to_expression(),
            "generation": self.generation
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpressionChromosome":
        """Create chromosome from dictionary representation."""
        return cls.from_expression(data["expression"], generation=data.get("generation", 0))

    def __len__(self) -> int:
        return len(self.symbols)

    def __str__(self) -> str:
        return self.to_expression()

    def __repr__(self) -> str:
        return f"ExpressionChromosome({self.to_expression()!r}, generation={self.generation})"


"""
Genetic operators for expression chromosomes.

Selection, crossover and mutation are plain functions. Every function draws
its randomness from the ``random.Random`` instance passed in and returns new
chromosomes; inputs are never modified.
"""

from typing import Sequence, Tuple, TypeVar, Callable, Optional
import random

from src.exprolution.core.chromosome import ExpressionChromosome, random_symbol


T = TypeVar("T")


def roulette_select(
    candidates: Sequence[T],
    fitness_of: Callable[[T], float],
    rng: random.Random,
    total_fitness: Optional[float] = None
) -> T:
    """
    Pick one candidate with probability proportional to its fitness.

    Draws a value in ``[0, total)`` and walks the candidates accumulating
    fitness until the running total exceeds the draw. A zero total falls back
    to a uniform choice.

    Args:
        candidates: Non-empty sequence to choose from
        fitness_of: Returns the (non-negative) fitness of a candidate
        rng: Random source owned by the run
        total_fitness: Precomputed sum of all fitness values, if known

    Returns:
        The selected candidate
    """
    if not candidates:
        raise ValueError("Cannot select from an empty population")

    if total_fitness is None:
        total_fitness = sum(fitness_of(c) for c in candidates)
    if total_fitness <= 0:
        return rng.choice(candidates)

    draw = rng.random() * total_fitness
    running = 0.0
    for candidate in candidates:
        running += fitness_of(candidate)
        if running > draw:
            return candidate

    # Rounding can leave the running total a hair below the draw
    return candidates[-1]


def single_point_crossover(
    parent1: ExpressionChromosome,
    parent2: ExpressionChromosome,
    crossover_rate: float,
    rng: random.Random,
    generation: Optional[int] = None
) -> Tuple[ExpressionChromosome, ExpressionChromosome]:
    """
    Recombine two equal-length parents at a single random point.

    With probability ``crossover_rate`` a point ``k`` is drawn from
    ``[1, L-1]`` and the children are ``p1[:k] + p2[k:]`` and
    ``p2[:k] + p1[k:]``. Otherwise the children copy the parents.
    """
    length = len(parent1)
    if len(parent2) != length:
        raise ValueError(
            f"Parents must have equal length, got {length} and {len(parent2)}"
        )

    if rng.random() >= crossover_rate or length < 2:
        return parent1.replace(parent1.symbols, generation), parent2.replace(parent2.symbols, generation)

    point = rng.randint(1, length - 1)
    child1 = parent1.replace(parent1.symbols[:point] + parent2.symbols[point:], generation)
    child2 = parent2.replace(parent2.symbols[:point] + parent1.symbols[point:], generation)
    return child1, child2


def mutate(
    chromosome: ExpressionChromosome,
    mutation_rate: float,
    rng: random.Random
) -> ExpressionChromosome:
    """
    Replace each symbol independently with probability ``mutation_rate``.

    The replacement is drawn uniformly from the whole alphabet, so it may
    equal the symbol it replaces.
    """
    symbols = tuple(
        random_symbol(rng) if rng.random() < mutation_rate else symbol
        for symbol in chromosome.symbols
    )
    if symbols == chromosome.symbols:
        return chromosome
    return chromosome.replace(symbols)

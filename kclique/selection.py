"""
Selection operators for the hybrid genetic algorithm.

Binary tournament selection of parents and distinct elitism.
"""

from typing import List, Sequence, Tuple

from .data_models import Solution
from .rng_stream import RngStream


def select_two(low: int, high: int, stream: RngStream) -> Tuple[int, int]:
    """
    Draw two different integers uniformly from [low, high].

    Raises:
        ValueError: If the interval holds fewer than two integers
    """
    if high <= low:
        raise ValueError(f"Need at least two values to select from, got [{low}, {high}]")

    first = stream.rand_int(low, high)
    second = stream.rand_int(low, high)
    while first == second:
        second = stream.rand_int(low, high)

    return first, second


def binary_tournament_selection(
    population: Sequence[Solution],
    num_to_select: int,
    stream: RngStream
) -> List[Solution]:
    """
    Select parents for the next generation by binary tournament.

    Each tournament draws two distinct individuals and keeps a copy of the
    one with the strictly lower score (the second one on ties).

    Args:
        population: Scored population
        num_to_select: Number of parents to produce
        stream: Pseudo-random number generator stream

    Returns:
        List of selected parents (deep copies)
    """
    selected = []
    for _ in range(num_to_select):
        i, j = select_two(0, len(population) - 1, stream)
        first, second = population[i], population[j]
        winner = first if first.score < second.score else second
        selected.append(winner.copy())
    return selected


def select_elite(sorted_population: Sequence[Solution], elite_size: int) -> List[Solution]:
    """
    Copy the best `elite_size` distinct individuals.

    Args:
        sorted_population: Population sorted by ascending score
        elite_size: Maximum number of elites

    Returns:
        Up to `elite_size` distinct solutions, best first
    """
    elite = []
    seen = set()
    for solution in sorted_population:
        if len(elite) >= elite_size:
            break
        key = solution.key()
        if key not in seen:
            seen.add(key)
            elite.append(solution.copy())
    return elite

"""
Search primitives shared by every strategy.

Scoring, random initialization and the steepest-descent local search used
both by the hybrid genetic algorithm and by the exact solver.
"""

from typing import List, Sequence, Tuple, Union

import numpy as np

from .data_models import Range, Solution
from .rng_stream import RngStream


def sum_of_pairs_score(
    solution: Union[Solution, Sequence[int]],
    distance_matrix: np.ndarray
) -> float:
    """
    Sum of pairwise distances between all selected objects.

    Every ordered pair (i, j) is counted, including (j, i) and the self
    pair (i, i), so for genes g1, g2 the score is
    d[g1][g1] + d[g1][g2] + d[g2][g1] + d[g2][g2].

    Args:
        solution: Solution (or bare gene sequence) to evaluate
        distance_matrix: Pre-calculated N x N distance matrix

    Returns:
        Sum-of-pairs score
    """
    genes = solution.genes if isinstance(solution, Solution) else list(solution)
    if not genes:
        return 0.0
    return float(distance_matrix[np.ix_(genes, genes)].sum())


def random_assignment(ranges: Sequence[Range], stream: RngStream) -> List[int]:
    """
    Randomly select one gene per range.

    Args:
        ranges: Groups to select from
        stream: Pseudo-random number generator stream

    Returns:
        One uniformly drawn object index per range
    """
    return [stream.rand_int(r.first, r.second - 1) for r in ranges]


def find_best_substitution(
    genes: Sequence[int],
    position: int,
    distance_matrix: np.ndarray,
    ranges: Sequence[Range]
) -> Tuple[int, float]:
    """
    Find the replacement of the gene at `position` that lowers the score most.

    Each candidate of the range at `position` is scored by its contribution
    to the sum-of-pairs score against the other current genes (both
    directions) plus its self distance. Only that contribution is
    recomputed, never the full score.

    Args:
        genes: Current genes (not modified)
        position: Index of the gene to investigate
        distance_matrix: Pre-calculated distance matrix
        ranges: Groups from which each gene is chosen

    Returns:
        Tuple of (best_gene, delta) where delta is the signed change of the
        score if best_gene replaced the current gene. The lowest index wins
        ties.
    """
    current = ranges[position]
    others = [g for i, g in enumerate(genes) if i != position]
    original_gene = genes[position]

    candidates = slice(current.first, current.second)
    contributions = np.diagonal(distance_matrix)[candidates].copy()
    if others:
        contributions += distance_matrix[others, candidates].sum(axis=0)
        contributions += distance_matrix[candidates, others].sum(axis=1)

    best_offset = int(np.argmin(contributions))
    delta = float(contributions[best_offset] - contributions[original_gene - current.first])

    return current.first + best_offset, delta


def steepest_descent(
    solution: Solution,
    distance_matrix: np.ndarray,
    ranges: Sequence[Range],
    max_iterations: int
) -> int:
    """
    Improve a solution in place by greedy single-gene substitutions.

    Each iteration applies only the most improving substitution found over
    all positions. Stops at a local optimum or after `max_iterations`
    iterations, then stores the recomputed score on the solution.

    Args:
        solution: Solution to improve (modified in place)
        distance_matrix: Pre-calculated distance matrix
        ranges: Groups from which each gene is chosen
        max_iterations: Maximum number of substitutions to apply

    Returns:
        Number of substitutions applied
    """
    substitutions = 0

    for _ in range(max_iterations):
        best_position = -1
        best_gene = -1
        best_delta = 0.0

        for position in range(len(solution.genes)):
            gene, delta = find_best_substitution(solution.genes, position, distance_matrix, ranges)
            if delta < best_delta:
                best_position = position
                best_gene = gene
                best_delta = delta

        # local optimum reached
        if best_position == -1:
            break

        solution.genes[best_position] = best_gene
        substitutions += 1

    solution.score = sum_of_pairs_score(solution, distance_matrix)
    return substitutions


def initialize_random_population(
    ranges: Sequence[Range],
    size: int,
    stream: RngStream
) -> List[Solution]:
    """
    Create `size` random solutions with a placeholder score of 0.

    Raises:
        ValueError: If size is not positive
    """
    if size <= 0:
        raise ValueError(f"Population size must be positive, got {size}")

    return [Solution(genes=random_assignment(ranges, stream), score=0.0) for _ in range(size)]

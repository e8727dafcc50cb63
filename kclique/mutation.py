"""
Mutation operators for the hybrid genetic algorithm.

Implements range-respecting uniform mutation and the probability-gated
mutation orchestrator.
"""

from typing import Dict, List, Sequence, Tuple

from .data_models import Range, Solution
from .rng_stream import RngStream


SKIPPED_MUTATION = "no_mutation: skipped (probability)"


def uniform_mutate(
    solution: Solution,
    ranges: Sequence[Range],
    strength: float,
    stream: RngStream
) -> Tuple[Solution, List[str]]:
    """
    Resample genes uniformly within their own range.

    Each gene is independently redrawn with probability `strength`.

    Args:
        solution: Solution to mutate (left untouched)
        ranges: Group of each gene
        strength: Per-gene mutation probability
        stream: Pseudo-random number generator stream

    Returns:
        Tuple of (mutated_solution, operation_log)
    """
    mutated = solution.copy()
    op_log = []

    for index, current in enumerate(ranges):
        if stream.rand_u01() < strength:
            old_gene = mutated.genes[index]
            new_gene = stream.rand_int(current.first, current.second - 1)
            mutated.genes[index] = new_gene
            op_log.append(f"uniform_mutate(position={index}): {old_gene} -> {new_gene}")

    mutated.score = float("inf")
    return mutated, op_log


def mutate(
    solution: Solution,
    ranges: Sequence[Range],
    probability: float,
    strength: float,
    stream: RngStream
) -> Tuple[Solution, List[str]]:
    """
    Apply uniform mutation with probability `probability`.

    The gate and the per-gene draws are two independent layers: the gate
    consumes one draw, then (when open) every gene consumes its own.

    Args:
        solution: Solution to mutate
        ranges: Group of each gene
        probability: Probability that the solution is mutated at all
        strength: Per-gene mutation probability once mutation happens
        stream: Pseudo-random number generator stream

    Returns:
        Tuple of (solution_or_mutated_copy, operation_log)
    """
    if stream.rand_u01() >= probability:
        return solution, [SKIPPED_MUTATION]

    mutated, op_log = uniform_mutate(solution, ranges, strength, stream)
    if not op_log:
        op_log = ["uniform_mutate: no gene selected"]
    return mutated, op_log


def mutation_statistics(original: Solution, mutated: Solution) -> Dict:
    """
    Calculate statistics about a mutation.

    Args:
        original: Solution before mutation
        mutated: Solution after mutation

    Returns:
        Dictionary with mutation statistics
    """
    changed = sum(1 for a, b in zip(original.genes, mutated.genes) if a != b)
    return {
        'total_genes': len(mutated.genes),
        'genes_changed': changed,
        'change_rate': changed / max(len(mutated.genes), 1),
    }

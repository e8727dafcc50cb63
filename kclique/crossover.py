"""
Crossover operators for the hybrid genetic algorithm.

Implements uniform gene-wise crossover between two parent solutions.
"""

from typing import List, Tuple

from .data_models import Solution
from .rng_stream import RngStream


def uniform_crossover(
    parent_1: Solution,
    parent_2: Solution,
    mixing_ratio: float,
    stream: RngStream
) -> Tuple[Solution, List[str]]:
    """
    Combine two parents gene by gene.

    Each position independently takes the gene of parent_2 with probability
    `mixing_ratio`, otherwise keeps the gene of parent_1. One draw is
    consumed per position.

    Args:
        parent_1: First parent (provides the default genes)
        parent_2: Second parent
        mixing_ratio: Probability of inheriting a gene from parent_2
        stream: Pseudo-random number generator stream

    Returns:
        Tuple of (child, crossover_mask)
        where crossover_mask[i] is "A" (parent_1) or "B" (parent_2)

    Note:
        The child is unscored (score = +inf) and owns its genes.
    """
    if len(parent_1.genes) != len(parent_2.genes):
        raise ValueError(
            f"Parents have different lengths: {len(parent_1.genes)} vs {len(parent_2.genes)}"
        )

    child_genes = list(parent_1.genes)
    crossover_mask = []

    for index in range(len(child_genes)):
        if stream.rand_u01() < mixing_ratio:
            child_genes[index] = parent_2.genes[index]
            crossover_mask.append("B")
        else:
            crossover_mask.append("A")

    return Solution(genes=child_genes, score=float("inf")), crossover_mask

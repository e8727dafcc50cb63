"""
k-clique consensus solvers

This package selects one object per group from N objects partitioned into
ordered groups, minimizing the sum of pairwise distances among the
selected objects.

Key Features:
- Two interchangeable strategies behind one interface
- Reproducible randomness (L'Ecuyer MRG32k3a stream, six seeds)
- Shared steepest-descent local search
- Near-optimal solution enumeration within a normalized tolerance

Modules:
- data_models: Core data structures (Range, Problem, Solution, PartialSolution)
- rng_stream: Deterministic MRG32k3a random stream
- search_primitives: Scoring, random initialization, steepest descent
- crossover, mutation, selection, hall_of_fame: Genetic operators
- genetic: Hybrid genetic algorithm
- branch_and_bound: Exact branch-and-bound strategy
- io_utils: Instance parsing, solution and generation log output
- visualization_utils: Convergence plot
- cli: Command-line interface
"""

__version__ = "0.1.0"

from .data_models import Range, Problem, Solution, PartialSolution, ProblemValidationError
from .rng_stream import RngStream
from .strategy import Strategy, ConfigValidationError
from .genetic import GeneticConfig, HybridGeneticAlgorithm
from .branch_and_bound import ExactBranchAndBound

__all__ = [
    "Range",
    "Problem",
    "Solution",
    "PartialSolution",
    "ProblemValidationError",
    "RngStream",
    "Strategy",
    "ConfigValidationError",
    "GeneticConfig",
    "HybridGeneticAlgorithm",
    "ExactBranchAndBound",
]

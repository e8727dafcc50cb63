"""
Strategy interface shared by the consensus solvers.
"""

from abc import ABC, abstractmethod
from typing import List

from .data_models import Problem, Solution


class ConfigValidationError(Exception):
    """Raised when a solver configuration is invalid."""
    pass


class Strategy(ABC):
    """
    Solver capability: turn a validated Problem into near-optimal Solutions.

    Implementations own their configuration and any random stream; the
    shared scoring and local-search routines live in `search_primitives`.
    """

    name = "strategy"

    @abstractmethod
    def solve(self, problem: Problem) -> List[Solution]:
        """
        Solve a consensus problem instance.

        Args:
            problem: Validated problem instance (read-only)

        Returns:
            Distinct best solution(s) found, sorted by ascending score
        """

    @abstractmethod
    def is_verbose(self) -> bool:
        """Whether the solver reports its progress."""


def is_real(value) -> bool:
    """Whether `value` is an int or float (bools excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_probability(name: str, value: float) -> None:
    """Raise ConfigValidationError unless value is a number in [0, 1]."""
    if not is_real(value) or not 0.0 <= value <= 1.0:
        raise ConfigValidationError(f"'{name}' must be a number in [0, 1], got: {value!r}")


def check_tolerance(tolerance: float) -> None:
    """Raise ConfigValidationError for a non-numeric, negative or NaN tolerance."""
    if not is_real(tolerance) or not tolerance >= 0.0:
        raise ConfigValidationError(f"'tolerance' must be a non-negative number, got: {tolerance!r}")

"""
Data models for the k-clique consensus solvers.

Core data structures representing groups of objects (ranges), validated
problem instances, candidate solutions and branch-and-bound search nodes.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

import numpy as np


class ProblemValidationError(ValueError):
    """Raised when a distance matrix and its ranges do not form a valid problem."""
    pass


@dataclass(frozen=True)
class Range:
    """
    Half-open interval [first, second) of object indices forming one group.

    Attributes:
        first: Index of the first object of the group
        second: One past the index of the last object of the group
    """
    first: int
    second: int

    def __post_init__(self):
        """Check that the interval is not reversed."""
        if self.first > self.second:
            raise ProblemValidationError(
                f"First index must be <= second index (first = {self.first}, second = {self.second})"
            )

    @property
    def width(self) -> int:
        """Number of candidate objects in the group."""
        return self.second - self.first

    def __contains__(self, index: int) -> bool:
        return self.first <= index < self.second

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.first, self.second))


class Problem:
    """
    Validated consensus problem instance.

    Holds a square, non-negative distance matrix over N objects and the
    ordered list of ranges partitioning [0, N). The instance is read-only
    once constructed.

    Args:
        distance_matrix: N x N matrix of pairwise distances (any array-like)
        ranges: Ordered ranges covering [0, N) without gaps or overlaps

    Raises:
        ProblemValidationError: If any structural invariant is violated
    """

    def __init__(self, distance_matrix, ranges: Sequence[Range]):
        try:
            matrix = np.array(distance_matrix, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ProblemValidationError(f"Distance matrix is not numeric: {e}")

        ranges = tuple(ranges)

        square_distance_matrix(matrix)
        no_negative_values(matrix)
        correct_ranges(ranges, matrix.shape[0])

        matrix.setflags(write=False)
        self._distance_matrix = matrix
        self._ranges = ranges

    @property
    def distance_matrix(self) -> np.ndarray:
        return self._distance_matrix

    @property
    def ranges(self) -> tuple:
        return self._ranges

    @property
    def num_objects(self) -> int:
        return self._distance_matrix.shape[0]

    @property
    def num_ranges(self) -> int:
        return len(self._ranges)

    @property
    def num_ordered_pairs(self) -> int:
        """Number of ordered off-diagonal pairs of selected objects, k * (k - 1)."""
        k = len(self._ranges)
        return k * (k - 1)

    def summary(self) -> str:
        """Human readable description of the ranges and the distance matrix."""
        lines = ["Ranges"]
        lines.append(" ".join(f"({r.first}, {r.second})" for r in self._ranges))
        for row in self._distance_matrix:
            lines.append(" ".join(str(value) for value in row))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Problem(num_objects={self.num_objects}, num_ranges={self.num_ranges})"


def square_distance_matrix(matrix: np.ndarray) -> None:
    """Check that the matrix is two-dimensional, square and non-empty."""
    if matrix.ndim != 2:
        raise ProblemValidationError(f"Distance matrix must be 2-dimensional, got {matrix.ndim} dimension(s)")
    rows, cols = matrix.shape
    if rows != cols:
        raise ProblemValidationError(f"Distance matrix must be square, got {rows} x {cols}")
    if rows == 0:
        raise ProblemValidationError("Distance matrix is empty")


def no_negative_values(matrix: np.ndarray) -> None:
    """Check that every distance is a non-negative number."""
    if np.isnan(matrix).any():
        raise ProblemValidationError("Distance matrix contains NaN values")
    if (matrix < 0).any():
        i, j = np.argwhere(matrix < 0)[0]
        raise ProblemValidationError(
            f"Distance matrix contains negative values (distance[{i}][{j}] = {matrix[i, j]})"
        )


def correct_ranges(ranges: Sequence[Range], num_objects: int) -> None:
    """
    Verify that ranges are ordered, non-empty, never overlap and cover [0, N).

    Args:
        ranges: [first, second) coordinates of each group of objects
        num_objects: Size N of the distance matrix
    """
    if not ranges:
        raise ProblemValidationError("At least one range is required")

    expected_start = 0
    for index, current in enumerate(ranges):
        if not isinstance(current, Range):
            raise ProblemValidationError(f"Range {index} is not a Range: {current!r}")
        if current.first != expected_start:
            raise ProblemValidationError(
                f"Range {index} starts at {current.first}, expected {expected_start}"
            )
        if current.width == 0:
            raise ProblemValidationError(f"Range {index} [{current.first}, {current.second}) is empty")
        expected_start = current.second

    if expected_start != num_objects:
        raise ProblemValidationError(
            f"Ranges cover [0, {expected_start}) but the distance matrix has {num_objects} objects"
        )


@dataclass(eq=False)
class Solution:
    """
    Candidate selection of one object per range.

    Equality requires the exact same score and gene sequence; ordering
    compares scores only (lower is better).

    Attributes:
        genes: Selected object index for each range, in range order
        score: Sum-of-pairs score of the selection
    """
    genes: list
    score: float = 0.0

    def __post_init__(self):
        """Own a private list of plain ints."""
        self.genes = [int(g) for g in self.genes]
        self.score = float(self.score)

    def copy(self) -> "Solution":
        """Create a deep copy of this solution."""
        return Solution(genes=list(self.genes), score=self.score)

    def key(self) -> tuple:
        """Hashable identity used for deduplication."""
        return (self.score, tuple(self.genes))

    def to_row(self) -> str:
        """Render as `score;gene_1;...;gene_k`."""
        return ";".join([repr(self.score)] + [str(g) for g in self.genes])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return self.score == other.score and self.genes == other.genes

    def __lt__(self, other: "Solution") -> bool:
        return self.score < other.score

    def __len__(self) -> int:
        return len(self.genes)

    def __str__(self) -> str:
        return f"[{' '.join(str(g) for g in self.genes)} : {self.score}]"


@dataclass(eq=False)
class PartialSolution(Solution):
    """
    Branch-and-bound search node: genes for a prefix of the (sorted) ranges
    plus the ranges still to assign.
    """
    remaining_ranges: tuple = field(default_factory=tuple)

    def __post_init__(self):
        super().__post_init__()
        self.remaining_ranges = tuple(self.remaining_ranges)

    def is_complete(self) -> bool:
        """Whether every range has been assigned."""
        return len(self.remaining_ranges) == 0

    def to_solution(self, order: Optional[Sequence[int]] = None) -> Solution:
        """
        Drop the remaining ranges.

        Args:
            order: Optional mapping, for each original range position, of the
                gene position holding its selection

        Returns:
            Plain Solution with genes in original range order
        """
        if order is None:
            return Solution(genes=list(self.genes), score=self.score)
        return Solution(genes=[self.genes[position] for position in order], score=self.score)

    def __str__(self) -> str:
        remaining = ", ".join(f"[{r.first} .. {r.second}]" for r in self.remaining_ranges)
        return f"genes {' '.join(str(g) for g in self.genes)} | score {self.score} | ranges {remaining}"

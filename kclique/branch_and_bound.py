"""
Exact branch-and-bound strategy for the consensus problem.

Best-first search over partial assignments, ranges ordered by increasing
width, pruning every child whose bound exceeds the best complete score
seen so far plus the allowed leeway.
"""

import heapq
import itertools
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .data_models import PartialSolution, Problem, Range, Solution
from .search_primitives import sum_of_pairs_score
from .strategy import Strategy, check_tolerance


def nearest_distances_other_ranges(
    ranges: Sequence[Range],
    distance_matrix: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Distance from every object to its closest object in each range.

    Args:
        ranges: Groups of objects to search for the closest one
        distance_matrix: Matrix of distances to explore

    Returns:
        Tuple of (nearest_to, nearest_from), both N x len(ranges):
        nearest_to[i][r] = min d[i][j] and nearest_from[i][r] = min d[j][i]
        over j in ranges[r]
    """
    nearest_to = np.column_stack(
        [distance_matrix[:, r.first:r.second].min(axis=1) for r in ranges]
    )
    nearest_from = np.column_stack(
        [distance_matrix[r.first:r.second, :].min(axis=0) for r in ranges]
    )
    return nearest_to, nearest_from


def completion_bound(
    genes: List[int],
    nearest_to: np.ndarray,
    nearest_from: np.ndarray,
    min_self: np.ndarray
) -> float:
    """
    Lower bound on what the unassigned ranges add to the score of `genes`.

    Columns of the tables follow the search order of the ranges, so the
    ranges after the first len(genes) are the unassigned ones. Pairs among
    unassigned objects are bounded by 0.
    """
    unassigned = slice(len(genes), nearest_to.shape[1])
    to_rest = nearest_to[genes, unassigned].sum()
    from_rest = nearest_from[genes, unassigned].sum()
    return float(to_rest + from_rest + min_self[unassigned].sum())


class ExactBranchAndBound(Strategy):
    """
    Branch-and-bound enumeration of all assignments within the leeway of
    the optimum.

    By default a child is bounded by its actual partial score. With
    `use_completion_bound` the bound also adds, for each unassigned range,
    the smallest contribution any of its objects could make against the
    assigned genes (a lower bound on every completion).

    Args:
        tolerance: Permitted normalized gap to the best score
        verbose: Print search statistics
        use_completion_bound: Add the nearest-distance completion bound

    Attributes:
        nodes_expanded: Incomplete nodes branched during the last solve
        nodes_pruned: Children discarded by the bound during the last solve
    """

    name = "exact"

    def __init__(self, tolerance: float = 0.0, verbose: bool = False,
                 use_completion_bound: bool = False):
        self.tolerance = tolerance
        self.verbose = verbose
        self.use_completion_bound = use_completion_bound
        self.nodes_expanded = 0
        self.nodes_pruned = 0

    def is_verbose(self) -> bool:
        return self.verbose

    def solve(self, problem: Problem) -> List[Solution]:
        """
        Apply the exact strategy on a problem instance.

        Args:
            problem: Validated problem instance

        Returns:
            All complete assignments with score <= best + leeway, genes in the
            problem's range order, sorted by ascending score. Each score is
            the one compared against the threshold during the search, so
            tied optima carry identical scores.
        """
        check_tolerance(self.tolerance)

        distance_matrix = problem.distance_matrix
        ranges = problem.ranges
        leeway = self.tolerance * problem.num_ordered_pairs

        # narrow ranges first to keep early branching small
        order = sorted(range(len(ranges)), key=lambda index: ranges[index].width)
        sorted_ranges = tuple(ranges[index] for index in order)
        gene_position = [0] * len(ranges)
        for position, range_index in enumerate(order):
            gene_position[range_index] = position

        bound_tables = None
        if self.use_completion_bound:
            nearest_to, nearest_from = nearest_distances_other_ranges(sorted_ranges, distance_matrix)
            diagonal = np.diagonal(distance_matrix)
            min_self = np.array([diagonal[r.first:r.second].min() for r in sorted_ranges])
            bound_tables = (nearest_to, nearest_from, min_self)

        self.nodes_expanded = 0
        self.nodes_pruned = 0
        counter = itertools.count()
        search_space = []
        root = PartialSolution(genes=[], score=float("inf"), remaining_ranges=sorted_ranges)
        heapq.heappush(search_space, (root.score, next(counter), root))

        satisfying = []
        best_score = float("inf")
        start_time = time.time()

        while search_space:
            score_threshold = best_score + leeway
            _, _, current = heapq.heappop(search_space)

            if current.is_complete():
                if current.score <= score_threshold:
                    satisfying.append(current)
                if current.score < best_score:
                    best_score = current.score
            else:
                self._branch(current, distance_matrix, search_space, counter, score_threshold, bound_tables)

        score_threshold = best_score + leeway
        solutions = [
            node.to_solution(gene_position)
            for node in satisfying
            if node.score <= score_threshold
        ]
        solutions.sort(key=lambda s: s.score)

        if self.verbose:
            print("=" * 70)
            print("EXACT BRANCH AND BOUND")
            print("=" * 70)
            print(f"Objects: {problem.num_objects}, ranges: {problem.num_ranges}")
            print(f"Nodes expanded: {self.nodes_expanded}, pruned: {self.nodes_pruned}")
            print(f"Best score: {best_score}")
            print(f"Solutions within tolerance: {len(solutions)}")
            print(f"Elapsed: {time.time() - start_time:.3f} seconds")

        return solutions

    def _branch(self, partial: PartialSolution, distance_matrix: np.ndarray,
                search_space: list, counter, cutoff: float,
                bound_tables: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None) -> None:
        """
        Expand a partial solution over its next range and push every child
        whose bound does not exceed `cutoff`. `bound_tables` enables the
        completion bound.
        """
        self.nodes_expanded += 1
        range_to_explore = partial.remaining_ranges[0]
        new_ranges = partial.remaining_ranges[1:]

        for new_gene in range_to_explore:
            genes = partial.genes + [new_gene]
            child = PartialSolution(
                genes=genes,
                score=sum_of_pairs_score(genes, distance_matrix),
                remaining_ranges=new_ranges,
            )

            bound = child.score
            if bound_tables is not None and new_ranges:
                bound += completion_bound(genes, *bound_tables)

            if bound <= cutoff:
                heapq.heappush(search_space, (child.score, next(counter), child))
            else:
                self.nodes_pruned += 1


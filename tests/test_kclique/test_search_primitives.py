"""
Tests for scoring, random initialization and steepest descent.
"""

import unittest

import numpy as np

from kclique.data_models import Range, Solution
from kclique.rng_stream import RngStream
from kclique.search_primitives import (
    find_best_substitution,
    initialize_random_population,
    random_assignment,
    steepest_descent,
    sum_of_pairs_score,
)


def random_instance(seed, sizes):
    """Random non-symmetric integer matrix and contiguous ranges of the given sizes."""
    rng = np.random.default_rng(seed)
    n = sum(sizes)
    matrix = rng.integers(0, 20, size=(n, n)).astype(float)
    ranges = []
    start = 0
    for size in sizes:
        ranges.append(Range(start, start + size))
        start += size
    return matrix, ranges


class TestSumOfPairsScore(unittest.TestCase):
    """Test the sum-of-pairs objective."""

    def setUp(self):
        """Set up a small non-symmetric matrix."""
        self.matrix = np.array([
            [1.0, 2.0, 3.0],
            [4.0, 5.0, 6.0],
            [7.0, 8.0, 9.0],
        ])

    def test_two_genes(self):
        """Test the explicit two-gene formula."""
        score = sum_of_pairs_score([0, 2], self.matrix)
        # d00 + d02 + d20 + d22
        self.assertEqual(score, 1.0 + 3.0 + 7.0 + 9.0)

    def test_single_gene(self):
        """Test that a single gene scores its self distance."""
        self.assertEqual(sum_of_pairs_score([1], self.matrix), 5.0)

    def test_empty(self):
        """Test that no genes score 0."""
        self.assertEqual(sum_of_pairs_score([], self.matrix), 0.0)

    def test_accepts_solution(self):
        """Test scoring a Solution object."""
        solution = Solution(genes=[0, 1], score=0.0)
        self.assertEqual(sum_of_pairs_score(solution, self.matrix), 1.0 + 2.0 + 4.0 + 5.0)

    def test_permutation_invariant(self):
        """Test that the order of genes does not change the score."""
        matrix, _ = random_instance(42, [3, 3, 3, 3])
        genes = [1, 4, 6, 11]
        expected = sum_of_pairs_score(genes, matrix)
        self.assertEqual(sum_of_pairs_score([11, 6, 4, 1], matrix), expected)
        self.assertEqual(sum_of_pairs_score([4, 11, 1, 6], matrix), expected)


class TestRandomAssignment(unittest.TestCase):
    """Test random initialization."""

    def setUp(self):
        """Set up ranges and stream."""
        self.ranges = [Range(0, 3), Range(3, 4), Range(4, 9)]
        self.stream = RngStream([42] * 6)

    def test_genes_within_ranges(self):
        """Test that each gene falls in its own range."""
        for _ in range(200):
            genes = random_assignment(self.ranges, self.stream)
            self.assertEqual(len(genes), 3)
            for gene, r in zip(genes, self.ranges):
                self.assertIn(gene, r)

    def test_population(self):
        """Test population size, placeholder score and validity."""
        population = initialize_random_population(self.ranges, 25, self.stream)
        self.assertEqual(len(population), 25)
        for individual in population:
            self.assertEqual(individual.score, 0.0)
            for gene, r in zip(individual.genes, self.ranges):
                self.assertIn(gene, r)

    def test_population_reproducible(self):
        """Test that identical streams give identical populations."""
        a = initialize_random_population(self.ranges, 10, RngStream([7] * 6))
        b = initialize_random_population(self.ranges, 10, RngStream([7] * 6))
        self.assertEqual([s.genes for s in a], [s.genes for s in b])

    def test_population_invalid_size(self):
        """Test that a non-positive size is rejected."""
        with self.assertRaises(ValueError):
            initialize_random_population(self.ranges, 0, self.stream)


class TestFindBestSubstitution(unittest.TestCase):
    """Test the single-position substitution search."""

    def test_delta_matches_score_change(self):
        """Test that the reported delta is the actual change of the score."""
        matrix, ranges = random_instance(7, [4, 2, 5, 3])
        genes = [0, 4, 6, 11]
        before = sum_of_pairs_score(genes, matrix)

        for position in range(len(genes)):
            best_gene, delta = find_best_substitution(genes, position, matrix, ranges)
            self.assertIn(best_gene, ranges[position])
            self.assertLessEqual(delta, 0.0)

            substituted = list(genes)
            substituted[position] = best_gene
            after = sum_of_pairs_score(substituted, matrix)
            self.assertAlmostEqual(after - before, delta)

    def test_best_is_minimal(self):
        """Test that no other candidate gives a lower score."""
        matrix, ranges = random_instance(11, [3, 6, 2])
        genes = [2, 3, 9]

        best_gene, _ = find_best_substitution(genes, 1, matrix, ranges)
        best_genes = list(genes)
        best_genes[1] = best_gene
        best_score = sum_of_pairs_score(best_genes, matrix)

        for candidate in ranges[1]:
            trial = list(genes)
            trial[1] = candidate
            self.assertGreaterEqual(sum_of_pairs_score(trial, matrix), best_score)

    def test_does_not_modify_genes(self):
        """Test that the input genes are left untouched."""
        matrix, ranges = random_instance(3, [3, 3])
        genes = [0, 5]
        find_best_substitution(genes, 0, matrix, ranges)
        self.assertEqual(genes, [0, 5])

    def test_tie_lowest_index_wins(self):
        """Test that equal contributions resolve to the lowest index."""
        matrix = np.ones((4, 4))
        ranges = [Range(0, 1), Range(1, 4)]
        best_gene, delta = find_best_substitution([0, 3], 1, matrix, ranges)
        self.assertEqual(best_gene, 1)
        self.assertEqual(delta, 0.0)

    def test_single_range(self):
        """Test that with one range the self distance decides."""
        matrix = np.diag([5.0, 2.0, 7.0])
        best_gene, delta = find_best_substitution([0], 0, matrix, [Range(0, 3)])
        self.assertEqual(best_gene, 1)
        self.assertEqual(delta, -3.0)


class TestSteepestDescent(unittest.TestCase):
    """Test the local search."""

    def setUp(self):
        """Set up a random instance."""
        self.matrix, self.ranges = random_instance(42, [4, 3, 5, 2, 4])

    def test_monotone_improvement(self):
        """Test that more iterations never give a worse score."""
        start = Solution(genes=[0, 4, 7, 12, 14], score=0.0)
        initial = sum_of_pairs_score(start, self.matrix)

        previous = initial
        for depth in range(1, 6):
            solution = start.copy()
            steepest_descent(solution, self.matrix, self.ranges, depth)
            self.assertLessEqual(solution.score, previous)
            previous = solution.score

    def test_score_is_recomputed(self):
        """Test that the stored score matches the genes."""
        solution = Solution(genes=[3, 6, 11, 13, 17], score=-1.0)
        steepest_descent(solution, self.matrix, self.ranges, 3)
        self.assertEqual(solution.score, sum_of_pairs_score(solution, self.matrix))

    def test_zero_iterations(self):
        """Test that zero iterations only rescore."""
        solution = Solution(genes=[1, 5, 8, 12, 15], score=0.0)
        applied = steepest_descent(solution, self.matrix, self.ranges, 0)
        self.assertEqual(applied, 0)
        self.assertEqual(solution.genes, [1, 5, 8, 12, 15])
        self.assertEqual(solution.score, sum_of_pairs_score([1, 5, 8, 12, 15], self.matrix))

    def test_local_optimum_is_stable(self):
        """Test that a local optimum is left unchanged."""
        solution = Solution(genes=[0, 4, 7, 12, 14], score=0.0)
        steepest_descent(solution, self.matrix, self.ranges, 1000)
        genes = list(solution.genes)
        score = solution.score

        applied = steepest_descent(solution, self.matrix, self.ranges, 1000)
        self.assertEqual(applied, 0)
        self.assertEqual(solution.genes, genes)
        self.assertEqual(solution.score, score)

    def test_one_substitution_per_iteration(self):
        """Test that each iteration changes at most one gene."""
        start = Solution(genes=[0, 4, 7, 12, 14], score=0.0)
        solution = start.copy()
        applied = steepest_descent(solution, self.matrix, self.ranges, 1)
        changed = sum(1 for a, b in zip(start.genes, solution.genes) if a != b)
        self.assertLessEqual(changed, 1)
        self.assertEqual(changed, applied)


if __name__ == '__main__':
    unittest.main()

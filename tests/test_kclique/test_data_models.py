"""
Tests for core data models: Range, Problem, Solution and PartialSolution.
"""

import unittest

import numpy as np

from kclique.data_models import (
    PartialSolution,
    Problem,
    ProblemValidationError,
    Range,
    Solution,
)


class TestRange(unittest.TestCase):
    """Test the half-open range."""

    def test_range_basics(self):
        """Test width, membership and iteration."""
        r = Range(2, 5)
        self.assertEqual(r.width, 3)
        self.assertIn(2, r)
        self.assertIn(4, r)
        self.assertNotIn(5, r)
        self.assertEqual(list(r), [2, 3, 4])

    def test_reversed_range_rejected(self):
        """Test that first > second is invalid."""
        with self.assertRaises(ProblemValidationError):
            Range(3, 2)


class TestProblem(unittest.TestCase):
    """Test problem construction and validation."""

    def setUp(self):
        """Set up a valid 4 x 4 instance with two ranges."""
        self.matrix = [
            [0, 1, 0, 1],
            [1, 0, 1, 0],
            [0, 1, 0, 1],
            [1, 0, 1, 0],
        ]
        self.ranges = [Range(0, 2), Range(2, 4)]

    def test_valid_problem(self):
        """Test a valid instance."""
        problem = Problem(self.matrix, self.ranges)
        self.assertEqual(problem.num_objects, 4)
        self.assertEqual(problem.num_ranges, 2)
        self.assertEqual(problem.num_ordered_pairs, 2)
        self.assertEqual(problem.distance_matrix.dtype, np.float64)
        self.assertIn("Ranges", problem.summary())

    def test_problem_is_read_only(self):
        """Test that the stored matrix cannot be modified."""
        problem = Problem(self.matrix, self.ranges)
        with self.assertRaises(ValueError):
            problem.distance_matrix[0, 0] = 5.0

    def test_problem_copies_input(self):
        """Test that later changes to the input do not leak into the problem."""
        matrix = np.array(self.matrix, dtype=float)
        problem = Problem(matrix, self.ranges)
        matrix[0, 1] = 99.0
        self.assertEqual(problem.distance_matrix[0, 1], 1.0)

    def test_single_range(self):
        """Test that one range covering all objects is accepted."""
        problem = Problem([[1, 0], [0, 2]], [Range(0, 2)])
        self.assertEqual(problem.num_ranges, 1)
        self.assertEqual(problem.num_ordered_pairs, 0)

    def test_non_square_matrix(self):
        """Test that a non-square matrix is rejected."""
        with self.assertRaises(ProblemValidationError):
            Problem([[0, 1, 2], [1, 0, 2]], [Range(0, 2)])

    def test_ragged_matrix(self):
        """Test that rows of different lengths are rejected."""
        with self.assertRaises(ProblemValidationError):
            Problem([[0, 1], [1]], [Range(0, 2)])

    def test_negative_distance(self):
        """Test that negative distances are rejected."""
        matrix = [row[:] for row in self.matrix]
        matrix[2][1] = -0.5
        with self.assertRaises(ProblemValidationError):
            Problem(matrix, self.ranges)

    def test_nan_distance(self):
        """Test that NaN distances are rejected."""
        matrix = [row[:] for row in self.matrix]
        matrix[0][3] = float("nan")
        with self.assertRaises(ProblemValidationError):
            Problem(matrix, self.ranges)

    def test_ranges_must_start_at_zero(self):
        """Test ranges not starting at 0."""
        with self.assertRaises(ProblemValidationError):
            Problem(self.matrix, [Range(1, 2), Range(2, 4)])

    def test_ranges_with_gap(self):
        """Test non-contiguous ranges."""
        with self.assertRaises(ProblemValidationError):
            Problem(self.matrix, [Range(0, 1), Range(2, 4)])

    def test_overlapping_ranges(self):
        """Test overlapping ranges."""
        with self.assertRaises(ProblemValidationError):
            Problem(self.matrix, [Range(0, 3), Range(2, 4)])

    def test_ranges_not_covering_matrix(self):
        """Test ranges that stop before N."""
        with self.assertRaises(ProblemValidationError):
            Problem(self.matrix, [Range(0, 2), Range(2, 3)])

    def test_no_ranges(self):
        """Test that at least one range is required."""
        with self.assertRaises(ProblemValidationError):
            Problem(self.matrix, [])

    def test_empty_range(self):
        """Test that an empty group is rejected."""
        with self.assertRaises(ProblemValidationError):
            Problem(self.matrix, [Range(0, 2), Range(2, 2), Range(2, 4)])

    def test_empty_matrix(self):
        """Test that an empty matrix is rejected."""
        with self.assertRaises(ProblemValidationError):
            Problem(np.zeros((0, 0)), [Range(0, 0)])


class TestSolution(unittest.TestCase):
    """Test solution equality, ordering and copying."""

    def test_equality_requires_score_and_genes(self):
        """Test exact equality semantics."""
        a = Solution(genes=[0, 2], score=1.0)
        self.assertEqual(a, Solution(genes=[0, 2], score=1.0))
        self.assertNotEqual(a, Solution(genes=[0, 3], score=1.0))
        self.assertNotEqual(a, Solution(genes=[0, 2], score=1.5))

    def test_ordering_by_score_only(self):
        """Test that ordering ignores genes."""
        better = Solution(genes=[5, 9], score=1.0)
        worse = Solution(genes=[0, 2], score=2.0)
        self.assertLess(better, worse)
        self.assertEqual(sorted([worse, better]), [better, worse])

    def test_copy_is_deep(self):
        """Test that copies do not share genes."""
        original = Solution(genes=[0, 2], score=3.0)
        clone = original.copy()
        clone.genes[0] = 1
        clone.score = 0.0
        self.assertEqual(original.genes, [0, 2])
        self.assertEqual(original.score, 3.0)

    def test_constructor_owns_genes(self):
        """Test that the constructor does not alias the caller's list."""
        genes = [0, 2]
        solution = Solution(genes=genes, score=0.0)
        genes[0] = 1
        self.assertEqual(solution.genes, [0, 2])

    def test_key_and_row(self):
        """Test the deduplication key and textual row."""
        solution = Solution(genes=[1, 3, 4], score=2.5)
        self.assertEqual(solution.key(), (2.5, (1, 3, 4)))
        self.assertEqual(solution.to_row(), "2.5;1;3;4")


class TestPartialSolution(unittest.TestCase):
    """Test branch-and-bound nodes."""

    def test_completion(self):
        """Test completeness check."""
        node = PartialSolution(genes=[0], score=0.0, remaining_ranges=[Range(2, 4)])
        self.assertFalse(node.is_complete())
        done = PartialSolution(genes=[0, 2], score=0.0, remaining_ranges=[])
        self.assertTrue(done.is_complete())

    def test_to_solution_reorders_genes(self):
        """Test conversion back to the original range order."""
        node = PartialSolution(genes=[7, 1, 4], score=2.0, remaining_ranges=())
        solution = node.to_solution([1, 2, 0])
        self.assertIsInstance(solution, Solution)
        self.assertEqual(solution.genes, [1, 4, 7])
        self.assertEqual(solution.score, 2.0)

        plain = node.to_solution()
        self.assertEqual(plain.genes, [7, 1, 4])


if __name__ == '__main__':
    unittest.main()

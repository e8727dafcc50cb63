#!/usr/bin/env python3
"""
Test runner for the k-clique solvers
"""

import unittest
import sys
from pathlib import Path

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))


def run_all_tests():
    """Run all test modules"""
    loader = unittest.TestLoader()
    tests_dir = str(Path(__file__).parent / "tests" / "test_kclique")
    suite = loader.discover(tests_dir, top_level_dir=tests_dir)

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


def run_integration_test():
    """Solve the bundled tiny instance with both strategies"""
    print("\n" + "=" * 50)
    print("INTEGRATION TEST")
    print("=" * 50)

    from kclique.branch_and_bound import ExactBranchAndBound
    from kclique.genetic import GeneticConfig, HybridGeneticAlgorithm
    from kclique.io_utils import load_problem

    instance = Path(__file__).parent / "examples" / "tiny_instance.txt"
    print(f"Loading {instance}...")
    problem = load_problem(instance)

    print("Running exact branch and bound...")
    exact = ExactBranchAndBound().solve(problem)

    print("Running hybrid genetic algorithm...")
    config = GeneticConfig(population_size=20, num_generations=10, improvement_probability=1.0)
    genetic = HybridGeneticAlgorithm(config).solve(problem)

    print(f"Exact best score: {exact[0].score} ({len(exact)} solution(s))")
    print(f"Genetic best score: {genetic[0].score} ({len(genetic)} solution(s))")

    success = (
        exact[0].score == 0.0 and
        genetic[0].score == exact[0].score and
        all(s in exact for s in genetic)
    )

    if success:
        print("✓ Integration test PASSED")
    else:
        print("✗ Integration test FAILED")

    return success


if __name__ == "__main__":
    print("Running k-clique Solver Tests")
    print("=" * 60)

    # Run unit tests
    print("Running unit tests...")
    unit_success = run_all_tests()

    # Run integration test
    integration_success = run_integration_test()

    # Summary
    print("\n" + "=" * 60)
    print("TEST SUMMARY")
    print("=" * 60)
    print(f"Unit tests: {'PASSED' if unit_success else 'FAILED'}")
    print(f"Integration test: {'PASSED' if integration_success else 'FAILED'}")

    overall_success = unit_success and integration_success
    print(f"Overall: {'PASSED' if overall_success else 'FAILED'}")

    sys.exit(0 if overall_success else 1)

"""
Hybrid genetic algorithm for the consensus problem.

Population metaheuristic (elitism, binary tournament, uniform crossover,
uniform mutation) with an embedded steepest-descent local search and a
hall of fame of the best distinct solutions seen across generations.
"""

import math
import time
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Tuple

from .crossover import uniform_crossover
from .data_models import Problem, Solution
from .hall_of_fame import HallOfFame
from .mutation import SKIPPED_MUTATION, mutate, mutation_statistics
from .rng_stream import RngStream
from .search_primitives import (
    initialize_random_population,
    steepest_descent,
    sum_of_pairs_score,
)
from .selection import binary_tournament_selection, select_elite
from .strategy import ConfigValidationError, Strategy, check_probability, check_tolerance


DEFAULT_SEEDS = (42, 42, 42, 42, 42, 42)


@dataclass
class GeneticConfig:
    """
    Settings of the hybrid genetic algorithm.

    Attributes:
        verbose: Print progress while solving
        tolerance: Permitted normalized gap between kept solutions and the best
        seeds: Six integer seeds of the random stream
        population_size: Number of individuals per generation
        num_generations: Number of generations to evaluate
        elite_ratio: Share of the population copied unchanged (floored)
        crossover_probability: Probability of uniform crossover for a child
        crossover_mixing_ratio: Probability of taking a gene from the second parent
        mutation_probability: Probability of mutating a child
        mutation_strength: Probability that a gene of a mutated child is resampled
        improvement_probability: Probability of running steepest descent on a child
        improvement_depth: Maximum steepest-descent iterations per child
    """
    verbose: bool = False
    tolerance: float = 0.0
    seeds: Tuple[int, ...] = DEFAULT_SEEDS

    population_size: int = 250
    num_generations: int = 250
    elite_ratio: float = 0.1

    crossover_probability: float = 0.5
    crossover_mixing_ratio: float = 0.1

    mutation_probability: float = 0.05
    mutation_strength: float = 0.2

    improvement_probability: float = 0.1
    improvement_depth: int = 4

    def __post_init__(self):
        """Store seeds as a tuple when given as a sequence."""
        if isinstance(self.seeds, (list, tuple)):
            self.seeds = tuple(self.seeds)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneticConfig":
        """
        Build a configuration from a flat mapping (e.g. a YAML section).

        Unknown keys raise ConfigValidationError; missing keys keep defaults.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(f"Unknown genetic algorithm option(s): {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary of all settings."""
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result['seeds'] = list(self.seeds)
        return result

    def validate(self) -> None:
        """
        Check every setting.

        Raises:
            ConfigValidationError: If a setting is out of its domain
        """
        if not isinstance(self.population_size, int) or self.population_size <= 0:
            raise ConfigValidationError(
                f"'population_size' must be a positive integer, got: {self.population_size}"
            )
        if not isinstance(self.num_generations, int) or self.num_generations <= 0:
            raise ConfigValidationError(
                f"'num_generations' must be a positive integer, got: {self.num_generations}"
            )
        if not isinstance(self.improvement_depth, int) or self.improvement_depth < 0:
            raise ConfigValidationError(
                f"'improvement_depth' must be a non-negative integer, got: {self.improvement_depth}"
            )

        check_tolerance(self.tolerance)
        check_probability('elite_ratio', self.elite_ratio)
        check_probability('crossover_probability', self.crossover_probability)
        check_probability('crossover_mixing_ratio', self.crossover_mixing_ratio)
        check_probability('mutation_probability', self.mutation_probability)
        check_probability('mutation_strength', self.mutation_strength)
        check_probability('improvement_probability', self.improvement_probability)

        if not isinstance(self.seeds, (list, tuple)) or not all(
            isinstance(s, int) and not isinstance(s, bool) for s in self.seeds
        ):
            raise ConfigValidationError(f"'seeds' must be a list of 6 integers, got: {self.seeds!r}")
        self.seeds = tuple(self.seeds)
        try:
            RngStream.check_seed(self.seeds)
        except ValueError as e:
            raise ConfigValidationError(f"Invalid 'seeds': {e}")

    @property
    def elite_size(self) -> int:
        """Number of elites, floor(elite_ratio * population_size)."""
        return int(math.floor(self.elite_ratio * self.population_size))


@dataclass
class GenerationRecord:
    """
    Statistics of one generation, taken after scoring.

    Attributes:
        generation: Zero-based generation index
        best_score: Lowest score in the population
        mean_score: Average score in the population
        worst_score: Highest score in the population
        hall_of_fame_size: Members in the hall of fame after the update
        num_elite: Distinct elites carried over
        improved_children: Children changed by steepest descent
        crossed_children: Children bred by uniform crossover
        mixed_genes: Genes those children took from their second parent
        mutated_children: Children that passed the mutation gate
        mutated_genes: Genes changed by mutation
    """
    generation: int
    best_score: float
    mean_score: float
    worst_score: float
    hall_of_fame_size: int
    num_elite: int
    improved_children: int = 0
    crossed_children: int = 0
    mixed_genes: int = 0
    mutated_children: int = 0
    mutated_genes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary for CSV export."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


class HybridGeneticAlgorithm(Strategy):
    """
    Genetic algorithm with embedded local search.

    Args:
        config: Algorithm settings (defaults used when omitted)

    Attributes:
        history: Per-generation statistics of the last solve
    """

    name = "genetic"

    def __init__(self, config: Optional[GeneticConfig] = None):
        self.config = config if config is not None else GeneticConfig()
        self.history: List[GenerationRecord] = []

    def is_verbose(self) -> bool:
        return self.config.verbose

    def solve(self, problem: Problem) -> List[Solution]:
        """
        Solve the consensus problem with the hybrid strategy.

        Args:
            problem: Validated problem instance

        Returns:
            Distinct hall-of-fame solutions within the tolerance of the best,
            sorted by ascending score

        Raises:
            ConfigValidationError: If the configuration is invalid
        """
        config = self.config
        config.validate()

        population_size = config.population_size
        elite_size = config.elite_size
        if population_size < 2 and elite_size < population_size:
            raise ConfigValidationError(
                "Tournament selection needs at least 2 individuals; "
                f"got population_size={population_size} with elite_size={elite_size}"
            )

        distance_matrix = problem.distance_matrix
        ranges = problem.ranges
        verbose = config.verbose

        stream = RngStream(config.seeds)
        hall_of_fame = HallOfFame(population_size)
        self.history = []

        if verbose:
            print("=" * 70)
            print("HYBRID GENETIC ALGORITHM")
            print("=" * 70)
            print(f"Objects: {problem.num_objects}, ranges: {problem.num_ranges}")
            print(f"Population: {population_size}, generations: {config.num_generations}, "
                  f"elite: {elite_size}")
            print(f"Seeds: {list(config.seeds)}")
            print()

        start_time = time.time()
        population = initialize_random_population(ranges, population_size, stream)

        for generation in range(config.num_generations):
            # score and sort (stable) the population
            for solution in population:
                solution.score = sum_of_pairs_score(solution, distance_matrix)
            population.sort(key=lambda s: s.score)

            for solution in population:
                hall_of_fame.offer(solution)

            elite = select_elite(population, elite_size)

            num_children = population_size - len(elite)
            parents = binary_tournament_selection(population, 2 * num_children, stream)

            children = []
            operator_counts = {
                'crossed_children': 0,
                'mixed_genes': 0,
                'mutated_children': 0,
                'mutated_genes': 0,
            }
            improved_children = 0
            for i in range(num_children):
                parent_1 = parents[2 * i]
                parent_2 = parents[2 * i + 1]

                if stream.rand_u01() < config.crossover_probability:
                    child, crossover_mask = uniform_crossover(
                        parent_1, parent_2, config.crossover_mixing_ratio, stream
                    )
                    operator_counts['crossed_children'] += 1
                    operator_counts['mixed_genes'] += crossover_mask.count("B")
                else:
                    child = parent_1.copy()

                unmutated = child
                child, op_log = mutate(
                    child, ranges, config.mutation_probability, config.mutation_strength, stream
                )
                if op_log != [SKIPPED_MUTATION]:
                    operator_counts['mutated_children'] += 1
                    operator_counts['mutated_genes'] += mutation_statistics(unmutated, child)['genes_changed']

                if stream.rand_u01() < config.improvement_probability:
                    if steepest_descent(child, distance_matrix, ranges, config.improvement_depth) > 0:
                        improved_children += 1

                children.append(child)

            scores = [s.score for s in population]
            self.history.append(
                GenerationRecord(
                    generation=generation,
                    best_score=scores[0],
                    mean_score=sum(scores) / len(scores),
                    worst_score=scores[-1],
                    hall_of_fame_size=len(hall_of_fame),
                    num_elite=len(elite),
                    improved_children=improved_children,
                    **operator_counts,
                )
            )

            population = elite + children

            if verbose and ((generation + 1) % max(1, config.num_generations // 10) == 0
                            or generation == config.num_generations - 1):
                print(f"  Progress: {generation + 1}/{config.num_generations} generations "
                      f"(best score {scores[0]})")

        solutions = self._filter_hall_of_fame(hall_of_fame, problem)

        if verbose:
            print()
            print("=" * 70)
            print("SUMMARY")
            print("=" * 70)
            print(f"Best score: {solutions[0].score}")
            print(f"Solutions within tolerance: {len(solutions)}")
            print(f"Elapsed: {time.time() - start_time:.3f} seconds")

        return solutions

    def _filter_hall_of_fame(self, hall_of_fame: HallOfFame, problem: Problem) -> List[Solution]:
        """Keep the distinct members whose score is within the scaled tolerance."""
        members = hall_of_fame.drain_sorted()
        score_threshold = members[0].score + self.config.tolerance * problem.num_ordered_pairs

        suitable = []
        seen = set()
        for solution in members:
            if solution.score <= score_threshold and solution.key() not in seen:
                seen.add(solution.key())
                suitable.append(solution)
        return suitable

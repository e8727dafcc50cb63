"""
CLI module for the k-clique solvers.

Handles argument parsing, run configuration loading and validation, and
strategy dispatching.
"""

import argparse
import copy
import sys
from typing import Any, Dict, List, Optional

from .branch_and_bound import ExactBranchAndBound
from .data_models import ProblemValidationError, Solution
from .genetic import GeneticConfig, HybridGeneticAlgorithm
from .io_utils import (
    INPUT_FORMATS,
    InputFormatError,
    load_config,
    load_problem,
    save_generation_log,
    save_solutions,
    write_solutions,
)
from .strategy import ConfigValidationError, Strategy


STRATEGIES = ('genetic', 'exact')

# command-line destination -> key of the 'genetic' config section
GENETIC_OPTIONS = {
    'pop_size': 'population_size',
    'num_generations': 'num_generations',
    'elite_ratio': 'elite_ratio',
    'crossover_probability': 'crossover_probability',
    'crossover_mixing_ratio': 'crossover_mixing_ratio',
    'mutation_probability': 'mutation_probability',
    'mutation_strength': 'mutation_strength',
    'improvement_probability': 'improvement_probability',
    'improvement_depth': 'improvement_depth',
}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser. Every option defaults to None so that
    values from a YAML run configuration are only overridden when given."""
    parser = argparse.ArgumentParser(
        prog='kclique',
        description='Select one object per group so that the sum of pairwise distances is minimal.'
    )

    # I/O settings
    parser.add_argument('-i', '--input', help='Instance file path (ranges and distance matrix)')
    parser.add_argument('--format', choices=INPUT_FORMATS,
                        help='Instance format (default: from file extension)')
    parser.add_argument('-o', '--output', help='Write solutions to this file instead of stdout')
    parser.add_argument('--overwrite', action='store_true', default=None,
                        help='Overwrite existing output files')
    parser.add_argument('--history', help='Save per-generation statistics to this CSV file')
    parser.add_argument('--plot', help='Save a convergence plot (PNG) to this file')
    parser.add_argument('--config', help='YAML run configuration')

    # solver settings
    parser.add_argument('--strategy', choices=STRATEGIES, help='Solver strategy (default: genetic)')
    parser.add_argument('-v', '--verbose', action='store_true', default=None,
                        help='Verbosity of the solver')
    parser.add_argument('-t', '--tolerance', type=float,
                        help='Permitted gap between kept solutions and the best solution, normalized')
    parser.add_argument('--completion-bound', action='store_true', default=None,
                        help='Exact strategy: prune with the nearest-distance completion bound')

    # random number generator seeds
    for index in range(6):
        parser.add_argument(f'--seed{index}', type=int,
                            help=f'Seed {index} of the random stream (default: 42)')

    # heuristic parameters
    parser.add_argument('-p', '--pop-size', type=int, help='Genetic algorithm population size')
    parser.add_argument('-n', '--num-generations', type=int, help='Number of generations to evaluate')
    parser.add_argument('--elite-ratio', type=float,
                        help='Size of the elite as a ratio of the population size')
    parser.add_argument('--crossover-probability', type=float,
                        help='Probability of applying uniform crossover on a child solution')
    parser.add_argument('--crossover-mixing-ratio', type=float,
                        help='Mixing ratio used for uniform crossover between two parents')
    parser.add_argument('--mutation-probability', type=float,
                        help='Probability of applying mutation on a child solution')
    parser.add_argument('--mutation-strength', type=float, help='Probability that a gene is mutated')
    parser.add_argument('--improvement-probability', type=float,
                        help='Probability of applying steepest descent on a child solution')
    parser.add_argument('--improvement-depth', type=int,
                        help='Number of steepest descent iterations per application')

    return parser


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    strategy = config.get('strategy', 'genetic')
    if strategy not in STRATEGIES:
        raise ConfigValidationError(
            f"Invalid strategy: '{strategy}'. Must be one of {', '.join(STRATEGIES)}"
        )

    for section in ('input', 'output', 'genetic', 'exact'):
        if section in config and not isinstance(config[section], dict):
            raise ConfigValidationError(f"'{section}' must be a dictionary")

    input_config = config.get('input', {})
    if not input_config.get('path'):
        raise ConfigValidationError("Missing required field: 'input.path' (or pass --input)")

    input_format = input_config.get('format')
    if input_format is not None and input_format not in INPUT_FORMATS:
        raise ConfigValidationError(
            f"Invalid input format: '{input_format}'. Must be one of {', '.join(INPUT_FORMATS)}"
        )

    unknown = sorted(set(config.get('exact', {})) - {'use_completion_bound'})
    if unknown:
        raise ConfigValidationError(f"Unknown exact strategy option(s): {', '.join(unknown)}")


def merge_arguments(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """
    Overlay explicit command-line values on a run configuration.

    Args:
        config: Run configuration loaded from YAML (not modified)
        args: Parsed command-line arguments

    Returns:
        New run configuration
    """
    merged = copy.deepcopy(config)
    input_config = merged.setdefault('input', {})
    output_config = merged.setdefault('output', {})
    genetic_config = merged.setdefault('genetic', {})
    exact_config = merged.setdefault('exact', {})

    if args.input is not None:
        input_config['path'] = args.input
    if args.format is not None:
        input_config['format'] = args.format

    for option in ('output', 'history', 'plot'):
        value = getattr(args, option)
        if value is not None:
            output_config['path' if option == 'output' else option] = value
    if args.overwrite is not None:
        output_config['overwrite'] = args.overwrite

    if args.strategy is not None:
        merged['strategy'] = args.strategy
    if args.verbose is not None:
        merged['verbose'] = args.verbose
    if args.tolerance is not None:
        merged['tolerance'] = args.tolerance
    if args.completion_bound is not None:
        exact_config['use_completion_bound'] = args.completion_bound

    seeds = [getattr(args, f'seed{index}') for index in range(6)]
    if any(seed is not None for seed in seeds):
        defaults = list(genetic_config.get('seeds', GeneticConfig().seeds))
        genetic_config['seeds'] = [
            seed if seed is not None else defaults[index] for index, seed in enumerate(seeds)
        ]

    for dest, key in GENETIC_OPTIONS.items():
        value = getattr(args, dest)
        if value is not None:
            genetic_config[key] = value

    return merged


def create_strategy(config: Dict[str, Any]) -> Strategy:
    """
    Build the configured strategy.

    Raises:
        ConfigValidationError: If strategy settings are invalid
    """
    strategy = config.get('strategy', 'genetic')
    verbose = bool(config.get('verbose', False))
    tolerance = config.get('tolerance', 0.0)
    try:
        tolerance = float(tolerance)
    except (TypeError, ValueError):
        raise ConfigValidationError(f"'tolerance' must be a non-negative number, got: {tolerance!r}")

    if strategy == 'genetic':
        genetic_config = GeneticConfig.from_dict(dict(config.get('genetic', {})))
        genetic_config.verbose = verbose
        genetic_config.tolerance = tolerance
        genetic_config.validate()
        return HybridGeneticAlgorithm(genetic_config)

    elif strategy == 'exact':
        exact_config = config.get('exact', {})
        return ExactBranchAndBound(
            tolerance=tolerance,
            verbose=verbose,
            use_completion_bound=bool(exact_config.get('use_completion_bound', False)),
        )

    else:
        # Should never reach here due to validation
        raise ConfigValidationError(f"Invalid strategy: {strategy}")


def run(config: Dict[str, Any], stdout=None) -> List[Solution]:
    """
    Load the instance, solve it and write the results.

    Args:
        config: Validated run configuration
        stdout: Stream receiving the solutions when no output path is set

    Returns:
        Solutions found by the strategy
    """
    stdout = stdout if stdout is not None else sys.stdout

    input_config = config['input']
    output_config = config.get('output', {})
    overwrite = bool(output_config.get('overwrite', False))

    problem = load_problem(input_config['path'], input_config.get('format'))
    strategy = create_strategy(config)

    if strategy.is_verbose():
        print(f"Loaded instance from: {input_config['path']}")
        print(problem.summary())
        print()

    solutions = strategy.solve(problem)

    if output_config.get('path'):
        output_path = save_solutions(solutions, output_config['path'], overwrite=overwrite)
        if strategy.is_verbose():
            print(f"Solutions saved to: {output_path}")
    else:
        write_solutions(solutions, stdout)

    history = getattr(strategy, 'history', None)
    if output_config.get('history') and history:
        save_generation_log(history, output_config['history'], overwrite=overwrite)
    if output_config.get('plot') and history:
        from .visualization_utils import plot_convergence
        plot_convergence(history, output_config['plot'])

    return solutions


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit status (0 on success, 1 on error)
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else {}
        config = merge_arguments(config, args)
        validate_run_config(config)
        run(config)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 1
    except (ConfigValidationError, ProblemValidationError, InputFormatError,
            FileNotFoundError, FileExistsError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0

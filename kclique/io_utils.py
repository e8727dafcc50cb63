"""
I/O utilities for the k-clique solvers.

Handles problem instance parsing (fixed format and CSV), solution
serialization, generation logs and YAML run configurations.
"""

import csv
from dataclasses import fields
from pathlib import Path
from typing import IO, Iterable, List, Optional, Sequence, Union

import yaml

from .data_models import Problem, Range, Solution
from .genetic import GenerationRecord
from .strategy import ConfigValidationError


class InputFormatError(ValueError):
    """Raised when an instance file cannot be parsed."""
    pass


INPUT_FORMATS = ('fixed', 'csv')


def read_fixed_format(input_path: Union[str, Path]) -> Problem:
    """
    Read a problem instance in the fixed whitespace format.

    Format (tokens may be split over lines freely):
        numObjects numRanges
        begin end            (numRanges times, half-open)
        d00 d01 ... d0n      (numObjects rows of numObjects distances)

    Args:
        input_path: Path to the instance file

    Returns:
        Validated Problem

    Raises:
        FileNotFoundError: If the file doesn't exist
        InputFormatError: If tokens are missing, extra or not numeric
        ProblemValidationError: If the parsed instance is inconsistent
    """
    input_path = Path(input_path)

    if not input_path.exists():
        raise FileNotFoundError(f"Instance file not found: {input_path}")

    with open(input_path, 'r') as f:
        tokens = f.read().split()

    position = 0

    def next_token(kind, what: str):
        nonlocal position
        if position >= len(tokens):
            raise InputFormatError(f"Unexpected end of file in {input_path} while reading {what}")
        token = tokens[position]
        position += 1
        try:
            return kind(token)
        except ValueError:
            raise InputFormatError(f"Invalid {what} in {input_path}: '{token}'")

    num_objects = next_token(int, "number of objects")
    num_ranges = next_token(int, "number of ranges")
    if num_objects <= 0 or num_ranges <= 0:
        raise InputFormatError(
            f"Header of {input_path} must hold positive counts, got {num_objects} {num_ranges}"
        )

    ranges = []
    for i in range(num_ranges):
        begin = next_token(int, f"begin of range {i}")
        end = next_token(int, f"end of range {i}")
        ranges.append(Range(begin, end))

    distance_matrix = [
        [next_token(float, f"distance[{x}][{y}]") for y in range(num_objects)]
        for x in range(num_objects)
    ]

    if position != len(tokens):
        raise InputFormatError(
            f"{len(tokens) - position} unexpected trailing token(s) in {input_path}"
        )

    return Problem(distance_matrix, ranges)


def read_csv_format(input_path: Union[str, Path]) -> Problem:
    """
    Read a header-less CSV instance.

    Each row is `category,distance_1,...,distance_n`. Rows of a category must
    be contiguous; ranges are inferred from category changes. The matrix is
    not required to be symmetric.

    Args:
        input_path: Path to the CSV file

    Returns:
        Validated Problem

    Raises:
        FileNotFoundError: If the file doesn't exist
        InputFormatError: If rows are malformed or categories are interleaved
        ProblemValidationError: If the parsed instance is inconsistent
    """
    input_path = Path(input_path)

    if not input_path.exists():
        raise FileNotFoundError(f"CSV file not found: {input_path}")

    with open(input_path, 'r', newline='') as f:
        rows = [row for row in csv.reader(f) if row]

    if not rows:
        raise InputFormatError(f"CSV file is empty: {input_path}")

    ranges = []
    seen_categories = set()
    range_begin = 0
    for row_index in range(1, len(rows) + 1):
        if row_index == len(rows) or rows[row_index][0] != rows[row_index - 1][0]:
            category = rows[row_index - 1][0]
            if category in seen_categories:
                raise InputFormatError(
                    f"Category '{category}' is not contiguous in {input_path} (row {row_index})"
                )
            seen_categories.add(category)
            ranges.append(Range(range_begin, row_index))
            range_begin = row_index

    distance_matrix = []
    for row_index, row in enumerate(rows):
        try:
            distance_matrix.append([float(value) for value in row[1:]])
        except ValueError as e:
            raise InputFormatError(f"Invalid distance in row {row_index + 1} of {input_path}: {e}")

    return Problem(distance_matrix, ranges)


def load_problem(input_path: Union[str, Path], input_format: Optional[str] = None) -> Problem:
    """
    Load a problem instance, choosing the reader from `input_format` or,
    when omitted, from the file extension (.csv means CSV).
    """
    if input_format is None:
        input_format = 'csv' if Path(input_path).suffix.lower() == '.csv' else 'fixed'

    if input_format == 'fixed':
        return read_fixed_format(input_path)
    elif input_format == 'csv':
        return read_csv_format(input_path)
    else:
        raise ValueError(f"Unknown input format: {input_format}. Must be one of {INPUT_FORMATS}")


def unique_solutions(solutions: Iterable[Solution]) -> List[Solution]:
    """Drop repeated solutions (same score and genes), keeping first occurrences."""
    unique = []
    seen = set()
    for solution in solutions:
        key = solution.key()
        if key not in seen:
            seen.add(key)
            unique.append(solution)
    return unique


def write_solutions(solutions: Iterable[Solution], output: IO[str]) -> int:
    """
    Write one `score;gene_1;...;gene_k` line per distinct solution.

    Returns:
        Number of lines written
    """
    unique = unique_solutions(solutions)
    for solution in unique:
        output.write(solution.to_row() + "\n")
    return len(unique)


def save_solutions(
    solutions: Sequence[Solution],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save distinct solutions to a text file.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        write_solutions(solutions, f)

    return output_path


def load_solutions(input_path: Union[str, Path]) -> List[Solution]:
    """
    Read solutions written by `save_solutions`.

    Raises:
        FileNotFoundError: If the file doesn't exist
        InputFormatError: If a line is malformed
    """
    input_path = Path(input_path)

    if not input_path.exists():
        raise FileNotFoundError(f"Solutions file not found: {input_path}")

    solutions = []
    with open(input_path, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            parts = line.split(';')
            try:
                solutions.append(Solution(genes=[int(g) for g in parts[1:]], score=float(parts[0])))
            except ValueError:
                raise InputFormatError(f"Invalid solution on line {line_number} of {input_path}: '{line}'")
    return solutions


def save_generation_log(
    history: Sequence[GenerationRecord],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save per-generation statistics to a CSV file.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Generation log already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        fieldnames = [f.name for f in fields(GenerationRecord)]
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()

        for record in history:
            writer.writerow(record.to_dict())

    return output_path


def load_config(config_path: Union[str, Path]) -> dict:
    """
    Load a YAML run configuration.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If the YAML is invalid or not a mapping
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigValidationError(f"Configuration file must hold a mapping: {config_path}")

    return config

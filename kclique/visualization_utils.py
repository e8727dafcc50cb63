"""
Visualization utilities for the hybrid genetic algorithm.

Plots the convergence of a run from its per-generation statistics.
"""

from pathlib import Path
from typing import Sequence, Tuple, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .genetic import GenerationRecord


def plot_convergence(
    history: Sequence[GenerationRecord],
    output_path: Union[str, Path],
    figsize: Tuple[int, int] = (10, 6)
) -> Path:
    """
    Save a line plot of the best, mean and worst score per generation.

    Args:
        history: Per-generation statistics of a solve
        output_path: Path to save the PNG file
        figsize: Figure size (width, height) in inches

    Returns:
        Path to the saved plot

    Raises:
        ValueError: If the history is empty
    """
    if not history:
        raise ValueError("Cannot plot an empty generation history")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    generations = [record.generation for record in history]

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(generations, [r.best_score for r in history], label='best', color='tab:blue')
    ax.plot(generations, [r.mean_score for r in history], label='mean', color='tab:orange')
    ax.plot(generations, [r.worst_score for r in history], label='worst',
            color='tab:gray', linestyle='--', alpha=0.6)

    ax.set_xlabel('Generation')
    ax.set_ylabel('Sum-of-pairs score')
    ax.set_title('Hybrid genetic algorithm convergence')
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)

    return output_path

"""
Visualization utilities for GenEvolve.

These helpers tolerate empty inputs so a run can always emit its plots.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Sequence, Union

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


def _prepare_output_path(output_path: Union[str, Path]) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _save_figure(fig: plt.Figure, output_path: Union[str, Path]) -> Path:
    path = _prepare_output_path(output_path)
    fig.tight_layout()
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return path


def _as_frame(generation_metrics: Union[pd.DataFrame, Sequence[Dict[str, Any]], None]) -> pd.DataFrame:
    if isinstance(generation_metrics, pd.DataFrame):
        return generation_metrics
    return pd.DataFrame(list(generation_metrics or []))


def plot_fitness_history(
    generation_metrics: Union[pd.DataFrame, Sequence[Dict[str, Any]], None],
    output_path: Union[str, Path],
) -> Path:
    """
    Plot best and mean fitness by generation, with a ±1 std band around the mean.

    Args:
        generation_metrics: EvolutionLogger records (list of dicts or DataFrame)
        output_path: Image file to write

    Returns:
        Path of the written image
    """
    frame = _as_frame(generation_metrics)
    fig, ax = plt.subplots(figsize=(10, 5))

    if frame.empty or "best_fitness" not in frame.columns:
        ax.text(0.5, 0.5, "No generation metrics", ha="center", va="center")
        ax.set_axis_off()
        return _save_figure(fig, output_path)

    x = frame["generation"].to_numpy() if "generation" in frame.columns else np.arange(len(frame))
    best = frame["best_fitness"].astype(float).to_numpy()
    ax.plot(x, best, label="Best Fitness", linewidth=2)

    if "mean_fitness" in frame.columns:
        mean = frame["mean_fitness"].astype(float).to_numpy()
        ax.plot(x, mean, label="Mean Fitness", linewidth=2)
        if "std_fitness" in frame.columns:
            std = frame["std_fitness"].astype(float).to_numpy()
            ax.fill_between(x, mean - std, mean + std, alpha=0.2)

    ax.set_title("Fitness by Generation")
    ax.set_xlabel("Generation")
    ax.set_ylabel("Fitness")
    ax.legend()
    ax.grid(alpha=0.2)
    return _save_figure(fig, output_path)

"""
Figures for the tutorial document.

Each function returns a matplotlib ``Figure`` and leaves saving to the
caller; ``save_figure`` writes and closes one.
"""
from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .config import INSTRUMENT, OUTCOME, RANDOM_SEED, TREATMENT

logger = logging.getLogger(__name__)

COLORS = {
    "control": "#2E86AB",
    "encouraged": "#F18F01",
    "truth": "#333333",
    "strong": "#2E86AB",
    "weak": "#C73E1D",
}


def jitter_plot(
    data: pd.DataFrame,
    instrument: str = INSTRUMENT,
    treatment: str = TREATMENT,
    outcome: str = OUTCOME,
    jitter: float = 0.15,
    seed: int | None = RANDOM_SEED,
    figsize: tuple[int, int] = (8, 6),
):
    """
    Scatter of treatment against outcome with uniform jitter on both axes,
    coloured by instrument.

    All three variables are binary, so without jitter the whole dataset
    collapses onto four points. The cluster sizes then show at a glance how
    take-up and infection differ between the encouraged and the rest.
    """
    rng = np.random.default_rng(seed)
    fig, ax = plt.subplots(figsize=figsize)

    for value, label, color in [
        (0, f"{instrument} = 0 (no SMS)", COLORS["control"]),
        (1, f"{instrument} = 1 (SMS)", COLORS["encouraged"]),
    ]:
        group = data[data[instrument] == value]
        x = group[treatment] + rng.uniform(-jitter, jitter, size=len(group))
        y = group[outcome] + rng.uniform(-jitter, jitter, size=len(group))
        ax.scatter(x, y, s=12, alpha=0.5, color=color, label=label)

    ax.set_xticks([0, 1])
    ax.set_xticklabels([f"{treatment} = 0", f"{treatment} = 1"])
    ax.set_yticks([0, 1])
    ax.set_yticklabels([f"{outcome} = 0", f"{outcome} = 1"])
    ax.set_xlabel(f"Treatment ({treatment})")
    ax.set_ylabel(f"Outcome ({outcome})")
    ax.set_title(f"{outcome} by {treatment}, coloured by {instrument} (jittered)")
    ax.legend(loc="center")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def monte_carlo_plot(
    draws: pd.DataFrame,
    beta: float,
    bins: int = 60,
    window: float = 2.0,
    figsize: tuple[int, int] = (10, 6),
):
    """
    Histograms of the 2SLS estimates with a strong and a weak instrument.

    Weak-instrument estimates have heavy tails, so the x-axis is clipped to
    ``beta ± window``; the share of draws outside the window is reported in
    the legend.
    """
    lo, hi = beta - window, beta + window
    edges = np.linspace(lo, hi, bins + 1)
    fig, ax = plt.subplots(figsize=figsize)

    for col, label, color in [
        ("strong_iv", "strong instrument", COLORS["strong"]),
        ("weak_iv", "weak instrument", COLORS["weak"]),
    ]:
        values = draws[col].to_numpy()
        outside = float(np.mean((values < lo) | (values > hi)))
        ax.hist(
            np.clip(values, lo, hi),
            bins=edges,
            alpha=0.55,
            color=color,
            label=f"2SLS, {label} ({outside:.0%} outside window)",
        )

    ax.axvline(beta, color=COLORS["truth"], linestyle="--", linewidth=2, label=f"true effect = {beta}")
    ax.axvline(
        float(draws["weak_ols"].median()),
        color=COLORS["weak"],
        linestyle=":",
        linewidth=2,
        label="median OLS (weak design)",
    )
    ax.set_xlabel("Estimated effect")
    ax.set_ylabel("Replications")
    ax.set_title(f"Sampling distribution of 2SLS over {len(draws)} simulated samples")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def save_figure(fig, path: str | Path, dpi: int = 150) -> Path:
    """Write ``fig`` to ``path`` and close it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Figure saved to {path}")
    return path

"""Fit and convergence visualization."""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..models.base import ModelFunc
from ..models.decay import split_samples
from .metrics import compute_fit_metrics


def plot_fit(
    samples,
    params,
    predict: ModelFunc,
    weights=None,
    title: str = "Model Fit",
    figsize: tuple = (12, 8),
    n_curve: int = 400,
) -> Figure:
    """
    Plot observations against the fitted model curve, with residuals.

    Args:
        samples: (t, y) rows or DataFrame
        params: Fitted parameter vector
        predict: Model function predict(params, t)
        weights: Sample weights; marker area is proportional to weight
        title: Plot title
        figsize: Figure size (width, height)
        n_curve: Number of points on the model curve

    Returns:
        Matplotlib Figure
    """
    t, y = split_samples(samples)
    residuals = predict(params, t) - y
    metrics = compute_fit_metrics(residuals, weights, observed=y)

    if weights is None:
        sizes = np.full(len(t), 30.0)
    else:
        w = np.asarray(weights, dtype=float)
        sizes = 30.0 * w / w.mean()

    t_curve = np.linspace(t.min(), t.max(), n_curve)

    fig, (ax1, ax2) = plt.subplots(
        2, 1,
        figsize=figsize,
        height_ratios=[2, 1],
        sharex=True,
    )

    # --- Data and model ---
    ax1.scatter(t, y, s=sizes, color="steelblue", alpha=0.7, edgecolor="black", linewidth=0.5, label="Observed")
    ax1.plot(t_curve, predict(params, t_curve), color="tab:red", linewidth=1.5, label="Model")

    stats_text = (
        f"Weighted RMS: {metrics['weighted_rms']:.4g}\n"
        f"RMSE: {metrics['rmse']:.4g}\n"
        f"R^2: {metrics['r_squared']:.4f}\n"
        f"N: {metrics['n_samples']}"
    )
    ax1.text(
        0.98, 0.98, stats_text,
        transform=ax1.transAxes,
        verticalalignment="top",
        horizontalalignment="right",
        fontsize=10,
        fontfamily="monospace",
        bbox=dict(boxstyle="round", facecolor="white", alpha=0.8),
    )

    ax1.set_ylabel("Observed", fontsize=11)
    ax1.set_title(title, fontsize=14, fontweight="bold")
    ax1.legend(loc="upper center", fontsize=10)
    ax1.grid(True, alpha=0.3)

    # --- Residuals ---
    ax2.axhline(y=0, color="black", linewidth=0.8)
    ax2.vlines(t, 0, residuals, color="gray", linewidth=1)
    ax2.scatter(t, residuals, s=sizes, color="tab:orange", edgecolor="black", linewidth=0.5)
    ax2.set_ylabel("Residual", fontsize=11)
    ax2.set_xlabel("t", fontsize=11)
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def plot_convergence(
    result,
    title: str = "Search Convergence",
    figsize: tuple = (12, 6),
) -> Figure:
    """
    Plot the incumbent value and tolerance tracker per iteration.

    Args:
        result: SearchResult with a recorded history
        title: Plot title
        figsize: Figure size

    Returns:
        Matplotlib Figure
    """
    history = result.history
    if history.empty:
        raise ValueError("Search result has no history; run with record_history=True")

    fig, ax1 = plt.subplots(figsize=figsize)

    ax1.plot(history["iteration"], history["best_value"], color="steelblue", linewidth=1.5, label="Best value")
    accepted = history[history["accepted"]]
    ax1.scatter(accepted["iteration"], accepted["best_value"], s=8, color="steelblue", alpha=0.6)
    if not result.maximize and (history["best_value"] > 0).all():
        ax1.set_yscale("log")
    ax1.set_xlabel("Iteration", fontsize=11)
    ax1.set_ylabel("Best objective value", fontsize=11, color="steelblue")
    ax1.tick_params(axis="y", labelcolor="steelblue")
    ax1.grid(True, alpha=0.3)

    ax2 = ax1.twinx()
    ax2.plot(history["iteration"], history["tolerance"], color="tab:orange", linewidth=1, alpha=0.8, label="Tolerance tracker")
    ax2.set_yscale("log")
    ax2.set_ylabel("Tolerance tracker", fontsize=11, color="tab:orange")
    ax2.tick_params(axis="y", labelcolor="tab:orange")

    lines1, labels1 = ax1.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(lines1 + lines2, labels1 + labels2, loc="upper right", fontsize=9)
    ax1.set_title(
        f"{title} ({result.iterations_run} iterations, stop: {result.stop_reason})",
        fontsize=14,
        fontweight="bold",
    )

    plt.tight_layout()
    return fig


def plot_weights(
    values,
    weights,
    title: str = "Density Weights",
    figsize: tuple = (12, 4),
) -> Figure:
    """
    Plot sample weights along the weighting axis.

    Args:
        values: Sample coordinates
        weights: Weights from compute_weights
        title: Plot title
        figsize: Figure size

    Returns:
        Matplotlib Figure
    """
    values = np.asarray(values, dtype=float)
    weights = np.asarray(weights, dtype=float)

    fig, ax = plt.subplots(figsize=figsize)
    ax.vlines(values, 0, weights, color="steelblue", linewidth=2)
    ax.scatter(values, weights, s=15, color="steelblue", zorder=3)
    ax.axhline(y=1.0 / len(weights), color="gray", linestyle="--", linewidth=0.8, label="Uniform")
    ax.set_xlabel("Coordinate", fontsize=11)
    ax.set_ylabel("Weight", fontsize=11)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(loc="upper right", fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig

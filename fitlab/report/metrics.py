"""Goodness-of-fit metrics for residuals under sample weights."""

from typing import Any

import numpy as np


def _to_float(x: Any) -> float:
    """Safely convert to float, handling edge cases."""
    if isinstance(x, complex):
        x = x.real
    try:
        return float(x)
    except (TypeError, ValueError):
        return float("nan")


def compute_fit_metrics(
    residuals,
    weights=None,
    observed=None,
) -> dict:
    """
    Compute weighted and unweighted residual metrics.

    Args:
        residuals: predicted - observed, one per sample
        weights: Non-negative sample weights (normalized internally);
                 None for uniform weighting
        observed: Observed values, needed for r_squared

    Returns:
        Dict with fit metrics
    """
    residuals = np.asarray(residuals, dtype=float)
    n = len(residuals)
    if n == 0:
        return {}

    if weights is None:
        w = np.full(n, 1.0 / n)
    else:
        w = np.asarray(weights, dtype=float)
        if len(w) != n:
            raise ValueError(f"Got {len(w)} weights for {n} residuals")
        w = w / w.sum()

    sq = residuals**2
    weighted_rms = _to_float(np.sqrt(np.sum(w * sq)))
    weighted_mae = _to_float(np.sum(w * np.abs(residuals)))
    max_abs_residual = _to_float(np.max(np.abs(residuals)))
    rmse = _to_float(np.sqrt(np.mean(sq)))

    # R^2 against the weighted mean of the observations
    r_squared = float("nan")
    if observed is not None:
        observed = np.asarray(observed, dtype=float)
        centered = observed - np.sum(w * observed)
        ss_tot = np.sum(w * centered**2)
        if ss_tot > 0:
            r_squared = _to_float(1 - np.sum(w * sq) / ss_tot)

    return {
        "weighted_rms": weighted_rms,
        "weighted_mae": weighted_mae,
        "max_abs_residual": max_abs_residual,
        "rmse": rmse,
        "r_squared": r_squared,
        "n_samples": n,
    }

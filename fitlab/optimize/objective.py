"""Objective/scoring functions for optimization."""

from typing import Any, Callable, Literal, get_args

import numpy as np

from ..models.base import ModelFunc
from ..models.decay import predict_decay, split_samples
from ..report.metrics import compute_fit_metrics

# objective(params, (samples, weights)) -> score
ObjectiveFunc = Callable[[np.ndarray, tuple[Any, Any]], float]

# Metric names from compute_fit_metrics usable as objectives
MetricName = Literal[
    "weighted_rms",
    "weighted_mae",
    "max_abs_residual",
    "rmse",
    "r_squared",
]


def _fit_metrics(params, aux, predict: ModelFunc) -> dict[str, float]:
    samples, weights = aux
    t, y = split_samples(samples)
    residuals = predict(params, t) - y
    return compute_fit_metrics(residuals, weights, observed=y)


def make_objective(
    metric: str | MetricName,
    predict: ModelFunc = predict_decay,
) -> ObjectiveFunc:
    """
    Create an objective function scoring a model by one fit metric.

    Orientation is not baked in: pair error metrics with maximize=False
    and r_squared with maximize=True when calling optimize().

    Args:
        metric: Name of metric from compute_fit_metrics output
        predict: Model function predict(params, t)

    Returns:
        Function computing the metric for (params, (samples, weights))
    """
    if metric not in get_args(MetricName):
        raise ValueError(f"Unknown metric: {metric!r}")

    def objective(params, aux) -> float:
        return float(_fit_metrics(params, aux, predict)[metric])

    return objective


def composite_objective(
    weights: dict[str, float],
    predict: ModelFunc = predict_decay,
    maximize: dict[str, bool] | None = None,
) -> ObjectiveFunc:
    """
    Create a weighted combination of fit metrics.

    Args:
        weights: Dict of {metric_name: weight}
        predict: Model function predict(params, t)
        maximize: Dict of {metric_name: True if higher is better}
                  Defaults to False (error metrics) for all metrics

    Returns:
        Objective function computing the weighted sum; lower is better

    Example:
        obj = composite_objective(
            weights={'weighted_rms': 0.8, 'max_abs_residual': 0.2},
        )
    """
    unknown = set(weights) - set(get_args(MetricName))
    if unknown:
        raise ValueError(f"Unknown metrics: {sorted(unknown)}")
    maximize = maximize or {}

    def objective(params, aux) -> float:
        metrics = _fit_metrics(params, aux, predict)
        total = 0.0
        for metric, weight in weights.items():
            sign = -1.0 if maximize.get(metric, False) else 1.0
            total += weight * sign * float(metrics[metric])
        return total

    return objective

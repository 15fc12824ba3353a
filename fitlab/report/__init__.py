"""Reporting and diagnostics."""

from .metrics import compute_fit_metrics
from .plot import (
    plot_convergence,
    plot_fit,
    plot_weights,
)

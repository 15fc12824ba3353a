"""Density-aware sample weights (normalized reciprocal of a Gaussian KDE)."""

from typing import Literal

import numpy as np
from scipy.stats import gaussian_kde

BandwidthRule = Literal["scott", "silverman"]


class DegenerateBandwidthError(ValueError):
    """Raised when no positive kernel bandwidth can be derived from the samples."""


def _as_samples(values) -> np.ndarray:
    x = np.asarray(values, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"Expected a 1-D sequence of values, got shape {x.shape}")
    if len(x) == 0:
        raise ValueError("Cannot compute weights for an empty sample")
    return x


def resolve_bandwidth(values, bandwidth: float | BandwidthRule | None = None) -> float:
    """
    Resolve the kernel bandwidth for a sample.

    Args:
        values: 1-D sample coordinates
        bandwidth: Explicit positive bandwidth, a rule name ('scott' or
            'silverman'), or None for ``2 * (max - min) / n``

    Returns:
        Positive bandwidth

    Raises:
        DegenerateBandwidthError: If the bandwidth resolves to zero, is not
            positive and finite, or a rule is applied to a sample without spread
    """
    x = _as_samples(values)

    if bandwidth is None:
        bw = 2.0 * float(x.max() - x.min()) / len(x)
        if bw <= 0:
            raise DegenerateBandwidthError(
                "All sample coordinates are identical; pass an explicit bandwidth"
            )
        return bw

    if isinstance(bandwidth, str):
        if bandwidth not in ("scott", "silverman"):
            raise ValueError(f"Unknown bandwidth rule: {bandwidth!r}")
        if len(x) < 2 or x.max() == x.min():
            raise DegenerateBandwidthError(
                f"Bandwidth rule {bandwidth!r} needs at least two distinct coordinates"
            )
        kde = gaussian_kde(x, bw_method=bandwidth)
        # kde.covariance is the data variance scaled by factor**2
        return float(np.sqrt(kde.covariance[0, 0]))

    bw = float(bandwidth)
    if not np.isfinite(bw) or bw <= 0:
        raise DegenerateBandwidthError(f"Bandwidth must be positive and finite, got {bandwidth}")
    return bw


def kernel_density(values, bandwidth: float) -> np.ndarray:
    """
    Unnormalized Gaussian kernel density at each sample (self term included).

    Every entry is at least 1.0 since each point contributes exp(0).
    """
    x = _as_samples(values)
    z = (x[None, :] - x[:, None]) / bandwidth
    return np.exp(-0.5 * z**2).sum(axis=1)


def compute_weights(values, bandwidth: float | BandwidthRule | None = None) -> np.ndarray:
    """
    Per-sample weights inversely proportional to local sample density.

    Points in dense clusters get low weight and isolated points get high
    weight, so that a weighted error aggregate behaves as if the samples
    were spread uniformly along the axis.

    Args:
        values: 1-D sample coordinates (e.g. observation times)
        bandwidth: Kernel bandwidth, rule name, or None for the default
            ``2 * (max - min) / n``

    Returns:
        Array of non-negative weights summing to 1, same length as values
    """
    bw = resolve_bandwidth(values, bandwidth)
    weights = 1.0 / kernel_density(values, bw)
    return weights / weights.sum()

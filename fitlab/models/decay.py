"""Driven two-exponential decay model and its weighted RMS objective.

A latent driver decays from unit initial value at rate ``rl``. The observed
variable decays at rate ``rd`` toward ``baseline``, fed by the driver, scaled
by ``scale`` and starting from ``scale * id + baseline``. Closed form::

    order1 = rl*il/(rd-rl) * exp(-rl*t)
    order2 = (id - rl*il/(rd-rl)) * exp(-rd*t)
    predicted(t) = scale*(order1 + order2) + baseline

Parameter vector layout: ``[rl, id, rd, scale, baseline]`` with ``il = 1``.
"""

import numpy as np
import pandas as pd

from .base import ModelSpec

PARAM_NAMES = ("rl", "id", "rd", "scale", "baseline")
LATENT_INITIAL = 1.0


class SingularModelError(ZeroDivisionError):
    """Raised when the decay rates coincide (rd == rl)."""


def predict_decay(params, t) -> np.ndarray:
    """
    Evaluate the decay model at times t.

    Args:
        params: [rl, id, rd, scale, baseline]
        t: Scalar or array of times

    Returns:
        Predicted observations, same shape as t

    Raises:
        SingularModelError: If rd == rl
    """
    params = np.asarray(params, dtype=float)
    if params.shape != (len(PARAM_NAMES),):
        raise ValueError(f"Expected {len(PARAM_NAMES)} decay parameters, got shape {params.shape}")
    rl, id_, rd, scale, baseline = params
    if rd == rl:
        raise SingularModelError(f"Decay rates coincide (rd == rl == {rd})")

    t = np.asarray(t, dtype=float)
    coupling = rl * LATENT_INITIAL / (rd - rl)
    order1 = coupling * np.exp(-rl * t)
    order2 = (id_ - coupling) * np.exp(-rd * t)
    return scale * (order1 + order2) + baseline


def split_samples(samples) -> tuple[np.ndarray, np.ndarray]:
    """Return (coordinates, observations) from a DataFrame or row sequence."""
    if samples is None:
        raise ValueError("Objective requires samples, got None")
    if isinstance(samples, pd.DataFrame):
        arr = samples.iloc[:, :2].to_numpy(dtype=float)
    else:
        arr = np.asarray(samples, dtype=float)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError(f"Samples must be (coordinate, observation) rows, got shape {arr.shape}")
    return arr[:, 0], arr[:, 1]


def decay_objective(params, aux) -> float:
    """
    Weighted root-mean-square residual of the decay model.

    Args:
        params: [rl, id, rd, scale, baseline]
        aux: (samples, weights) - weights already normalized to sum to 1,
            or None for uniform weighting

    Returns:
        sqrt(sum(w * (predicted - observed)^2)); lower is better
    """
    samples, weights = aux
    t, y = split_samples(samples)
    if weights is None:
        weights = np.full(len(t), 1.0 / len(t))
    residuals = predict_decay(params, t) - y
    return float(np.sqrt(np.sum(np.asarray(weights) * residuals**2)))


def make_decay_samples(
    params,
    times,
    noise: float = 0.0,
    seed: int | np.random.Generator | None = None,
) -> pd.DataFrame:
    """
    Generate synthetic (t, y) samples from known decay parameters.

    Args:
        params: [rl, id, rd, scale, baseline]
        times: Sample times
        noise: Standard deviation of additive Gaussian noise
        seed: Random seed or Generator

    Returns:
        DataFrame with columns 't' and 'y'
    """
    t = np.asarray(times, dtype=float)
    y = predict_decay(params, t)
    if noise > 0:
        rng = np.random.default_rng(seed)
        y = y + rng.normal(0.0, noise, size=len(t))
    return pd.DataFrame({"t": t, "y": y})


DECAY_MODEL = ModelSpec(
    name="two_exponential_decay",
    param_names=PARAM_NAMES,
    # rl and rd ranges are disjoint so the closed form never hits rd == rl
    bounds=[(0.3, 2.0), (0.0, 10.0), (0.01, 0.29), (0.1, 10.0), (-10.0, 10.0)],
    predict=predict_decay,
)

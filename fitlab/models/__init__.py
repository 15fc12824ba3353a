"""Models - parametric curves and their reference objective."""

from .base import ModelFunc, ModelSpec
from .decay import (
    DECAY_MODEL,
    PARAM_NAMES,
    SingularModelError,
    decay_objective,
    make_decay_samples,
    predict_decay,
    split_samples,
)

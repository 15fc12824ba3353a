"""Model specification shared by fitting, plotting and the CLI."""

from dataclasses import dataclass
from typing import Callable

import numpy as np

# predict(params, t) -> predicted observations at t
ModelFunc = Callable[[np.ndarray, np.ndarray], np.ndarray]


@dataclass
class ModelSpec:
    """Specification for a parametric model with its parameter bounds."""

    name: str
    param_names: tuple[str, ...]
    bounds: list[tuple[float, float]]  # one (low, high) per parameter
    predict: ModelFunc

    def __post_init__(self):
        if len(self.bounds) != len(self.param_names):
            raise ValueError(
                f"Model '{self.name}' has {len(self.param_names)} parameters "
                f"but {len(self.bounds)} bounds"
            )

    @property
    def n_params(self) -> int:
        return len(self.param_names)

    def get_default_params(self) -> np.ndarray:
        """Return midpoint of parameter bounds as a starting vector."""
        return np.array([(low + high) / 2 for low, high in self.bounds], dtype=float)

    def as_dict(self, params) -> dict[str, float]:
        """Label a parameter vector with this model's parameter names."""
        params = np.asarray(params, dtype=float)
        if len(params) != self.n_params:
            raise ValueError(
                f"Expected {self.n_params} parameters for '{self.name}', got {len(params)}"
            )
        return {name: float(v) for name, v in zip(self.param_names, params)}

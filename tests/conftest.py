import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from fitlab.models import make_decay_samples

TRUE_PARAMS = np.array([0.5, 2.0, 0.2, 3.0, 1.0])


@pytest.fixture
def true_params() -> np.ndarray:
    return TRUE_PARAMS.copy()


@pytest.fixture
def decay_samples():
    """Noise-free samples at t = 0..10."""
    return make_decay_samples(TRUE_PARAMS, np.arange(11.0))


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")

"""Sample weighting - density-compensating weights for irregular sampling."""

from .density import (
    DegenerateBandwidthError,
    compute_weights,
    kernel_density,
    resolve_bandwidth,
)

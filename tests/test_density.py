"""Tests for density-compensating sample weights."""

import numpy as np
import pytest

from fitlab.weighting import (
    DegenerateBandwidthError,
    compute_weights,
    kernel_density,
    resolve_bandwidth,
)


class TestComputeWeights:
    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    @pytest.mark.parametrize("bandwidth", [None, 0.05, 0.5, 3.0])
    def test_weights_sum_to_one(self, seed, bandwidth):
        rng = np.random.default_rng(seed)
        x = rng.exponential(2.0, size=rng.integers(2, 60))
        weights = compute_weights(x, bandwidth)
        assert weights.shape == x.shape
        assert np.all(weights >= 0)
        assert abs(weights.sum() - 1.0) < 1e-9

    @pytest.mark.parametrize("bandwidth", [0.1, 0.5, 1.0])
    def test_clustered_points_get_less_weight(self, bandwidth):
        weights = compute_weights([0.0, 0.01, 10.0], bandwidth)
        assert weights[0] < weights[2]
        assert weights[1] < weights[2]

    @pytest.mark.parametrize("bandwidth", [0.05, 0.1, 0.2])
    def test_evenly_spaced_points_get_equal_weight(self, bandwidth):
        weights = compute_weights([0.0, 1.0, 2.0, 3.0, 4.0], bandwidth)
        np.testing.assert_allclose(weights, 0.2, rtol=1e-4)

    def test_wide_bandwidth_favours_edges(self):
        # Edge points have neighbours on one side only
        weights = compute_weights([0.0, 1.0, 2.0, 3.0, 4.0], 1.0)
        assert weights[0] == pytest.approx(weights[4])
        assert weights[0] > weights[2]

    def test_accepts_lists_and_series(self):
        pd = pytest.importorskip("pandas")
        x = [0.0, 0.5, 3.0, 3.1]
        np.testing.assert_allclose(compute_weights(pd.Series(x)), compute_weights(x))

    def test_identical_points_with_explicit_bandwidth_are_uniform(self):
        weights = compute_weights([2.0, 2.0, 2.0, 2.0], bandwidth=1.0)
        np.testing.assert_allclose(weights, 0.25)

    def test_single_point_with_explicit_bandwidth(self):
        np.testing.assert_allclose(compute_weights([5.0], bandwidth=1.0), [1.0])

    def test_empty_sample_raises(self):
        with pytest.raises(ValueError, match="empty"):
            compute_weights([])

    def test_two_dimensional_input_raises(self):
        with pytest.raises(ValueError, match="1-D"):
            compute_weights([[0.0, 1.0], [2.0, 3.0]])

    def test_identical_points_without_bandwidth_raise(self):
        with pytest.raises(DegenerateBandwidthError):
            compute_weights([1.0, 1.0, 1.0])

    def test_single_point_without_bandwidth_raises(self):
        with pytest.raises(DegenerateBandwidthError):
            compute_weights([3.0])

    @pytest.mark.parametrize("bandwidth", [0.0, -1.0, float("nan"), float("inf")])
    def test_invalid_explicit_bandwidth_raises(self, bandwidth):
        with pytest.raises(DegenerateBandwidthError):
            compute_weights([0.0, 1.0, 2.0], bandwidth)

    def test_degenerate_bandwidth_is_a_value_error(self):
        assert issubclass(DegenerateBandwidthError, ValueError)


class TestResolveBandwidth:
    def test_default_rule(self):
        assert resolve_bandwidth([0.0, 1.0, 2.0, 3.0, 4.0]) == pytest.approx(1.6)

    def test_explicit_value_passes_through(self):
        assert resolve_bandwidth([0.0, 1.0], 0.3) == 0.3

    def test_scott_rule(self):
        x = np.array([0.0, 0.2, 0.5, 1.5, 4.0, 7.0])
        expected = np.std(x, ddof=1) * len(x) ** (-1 / 5)
        assert resolve_bandwidth(x, "scott") == pytest.approx(expected)

    def test_silverman_rule(self):
        x = np.array([0.0, 0.2, 0.5, 1.5, 4.0, 7.0])
        expected = np.std(x, ddof=1) * (len(x) * 3 / 4) ** (-1 / 5)
        assert resolve_bandwidth(x, "silverman") == pytest.approx(expected)

    def test_rule_on_constant_sample_raises(self):
        with pytest.raises(DegenerateBandwidthError):
            resolve_bandwidth([1.0, 1.0, 1.0], "scott")

    def test_unknown_rule_raises(self):
        with pytest.raises(ValueError, match="Unknown bandwidth rule"):
            resolve_bandwidth([0.0, 1.0], "wide")


class TestKernelDensity:
    def test_self_term_included(self):
        density = kernel_density([0.0, 100.0], bandwidth=1.0)
        np.testing.assert_allclose(density, [1.0, 1.0])

    def test_close_points_accumulate(self):
        density = kernel_density([0.0, 0.0, 50.0], bandwidth=1.0)
        np.testing.assert_allclose(density, [2.0, 2.0, 1.0])

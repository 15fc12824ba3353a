"""Tests for the decay model, its objective and ModelSpec."""

import numpy as np
import pandas as pd
import pytest

from fitlab.models import (
    DECAY_MODEL,
    ModelSpec,
    SingularModelError,
    decay_objective,
    make_decay_samples,
    predict_decay,
    split_samples,
)


class TestPredictDecay:
    def test_initial_value(self, true_params):
        # scale * id + baseline
        assert predict_decay(true_params, 0.0) == pytest.approx(7.0)

    def test_decays_to_baseline(self, true_params):
        assert predict_decay(true_params, 200.0) == pytest.approx(1.0)

    def test_closed_form(self, true_params):
        t = np.array([0.0, 1.0, 5.0])
        expected = 3.0 * (-5 / 3 * np.exp(-0.5 * t) + (2 + 5 / 3) * np.exp(-0.2 * t)) + 1.0
        np.testing.assert_allclose(predict_decay(true_params, t), expected)

    def test_equal_rates_raise(self):
        with pytest.raises(SingularModelError):
            predict_decay([0.3, 2.0, 0.3, 3.0, 1.0], [0.0, 1.0])

    def test_singular_error_is_arithmetic(self):
        assert issubclass(SingularModelError, ZeroDivisionError)

    def test_wrong_length_raises(self):
        with pytest.raises(ValueError, match="5 decay parameters"):
            predict_decay([0.5, 2.0, 0.2], [0.0])


class TestDecayObjective:
    def test_zero_at_true_params(self, true_params, decay_samples):
        weights = np.full(len(decay_samples), 1 / len(decay_samples))
        assert decay_objective(true_params, (decay_samples, weights)) == pytest.approx(0.0, abs=1e-12)

    def test_weighted_rms(self, true_params):
        samples = [(0.0, 6.0), (50.0, 1.0)]
        weights = np.array([0.25, 0.75])
        # residual 1.0 at t=0, ~0 at t=50
        assert decay_objective(true_params, (samples, weights)) == pytest.approx(0.5, rel=1e-5)

    def test_none_weights_are_uniform(self, true_params, decay_samples):
        shifted = decay_samples.assign(y=decay_samples["y"] + np.linspace(0, 1, len(decay_samples)))
        uniform = np.full(len(shifted), 1 / len(shifted))
        assert decay_objective(true_params, (shifted, None)) == pytest.approx(
            decay_objective(true_params, (shifted, uniform))
        )

    def test_missing_samples_raise(self, true_params):
        with pytest.raises(ValueError, match="requires samples"):
            decay_objective(true_params, (None, None))

    def test_singular_params_propagate(self, decay_samples):
        with pytest.raises(SingularModelError):
            decay_objective([0.2, 2.0, 0.2, 3.0, 1.0], (decay_samples, None))


class TestSamples:
    def test_split_dataframe_uses_first_two_columns(self):
        df = pd.DataFrame({"time": [0.0, 1.0], "value": [3.0, 4.0], "extra": [9.0, 9.0]})
        t, y = split_samples(df)
        np.testing.assert_array_equal(t, [0.0, 1.0])
        np.testing.assert_array_equal(y, [3.0, 4.0])

    def test_split_rejects_single_column(self):
        with pytest.raises(ValueError, match="rows"):
            split_samples([1.0, 2.0, 3.0])

    def test_make_samples_noise_free(self, true_params):
        df = make_decay_samples(true_params, [0.0, 2.0])
        assert list(df.columns) == ["t", "y"]
        np.testing.assert_allclose(df["y"], predict_decay(true_params, [0.0, 2.0]))

    def test_make_samples_noise_is_seeded(self, true_params):
        a = make_decay_samples(true_params, np.arange(5.0), noise=0.1, seed=3)
        b = make_decay_samples(true_params, np.arange(5.0), noise=0.1, seed=3)
        pd.testing.assert_frame_equal(a, b)
        assert not np.allclose(a["y"], predict_decay(true_params, np.arange(5.0)))


class TestModelSpec:
    def test_decay_model_bounds_keep_rates_apart(self):
        (rl_low, _), _, (_, rd_high), _, _ = DECAY_MODEL.bounds
        assert rd_high < rl_low

    def test_default_params_are_midpoints(self):
        spec = ModelSpec("line", ("a", "b"), [(0.0, 2.0), (-1.0, 1.0)], lambda p, t: p[0] * t + p[1])
        np.testing.assert_array_equal(spec.get_default_params(), [1.0, 0.0])

    def test_as_dict(self, true_params):
        assert DECAY_MODEL.as_dict(true_params) == {
            "rl": 0.5, "id": 2.0, "rd": 0.2, "scale": 3.0, "baseline": 1.0,
        }

    def test_as_dict_length_mismatch(self):
        with pytest.raises(ValueError):
            DECAY_MODEL.as_dict([1.0, 2.0])

    def test_bounds_length_mismatch(self):
        with pytest.raises(ValueError, match="bounds"):
            ModelSpec("bad", ("a", "b"), [(0.0, 1.0)], lambda p, t: t)

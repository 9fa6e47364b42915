"""Unit tests for landmark_pf.utils.angles."""

import numpy as np
import pytest

from landmark_pf.utils import weighted_circular_mean, wrap_angle


class TestWrapAngle:
    """Test suite for wrap_angle function."""

    def test_wrap_zero(self):
        assert np.isclose(wrap_angle(0.0), 0.0, atol=1e-10)

    def test_wrap_large_positive(self):
        assert np.isclose(wrap_angle(3.5 * np.pi), -np.pi / 2, atol=1e-10)

    def test_wrap_array(self):
        wrapped = wrap_angle(np.array([0.0, 2 * np.pi, -3 * np.pi / 2, 5.0]))
        assert np.all(wrapped >= -np.pi)
        assert np.all(wrapped <= np.pi)
        assert np.isclose(wrapped[2], np.pi / 2, atol=1e-10)


class TestWeightedCircularMean:
    """Test suite for weighted_circular_mean function."""

    def test_unweighted(self):
        assert np.isclose(weighted_circular_mean(np.array([0.1, 0.3])), 0.2, atol=1e-10)

    def test_across_pi_boundary(self):
        result = weighted_circular_mean(np.array([np.pi - 0.1, -np.pi + 0.1]))
        assert np.isclose(abs(result), np.pi, atol=1e-10)

    def test_ignores_full_turns(self):
        result = weighted_circular_mean(np.array([0.2, 0.2 + 4 * np.pi]))
        assert np.isclose(result, 0.2, atol=1e-10)

    def test_weights_select_angle(self):
        result = weighted_circular_mean(np.array([0.0, 1.0]), np.array([0.0, 2.0]))
        assert np.isclose(result, 1.0, atol=1e-10)

    def test_all_zero_weights_fall_back_to_uniform(self):
        angles = np.array([0.1, 0.3])
        assert np.isclose(weighted_circular_mean(angles, np.zeros(2)), 0.2, atol=1e-10)

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            weighted_circular_mean(np.array([]))

    def test_shape_mismatch_raises(self):
        with pytest.raises(ValueError):
            weighted_circular_mean(np.array([0.0, 1.0]), np.array([1.0]))
